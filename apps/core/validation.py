"""
Thin entry point into the declarative validation schemas.

Schemas themselves are DRF serializers (and a django-filter FilterSet for
task listing).  DRF already gives us the contract we want: unknown keys
are dropped, every field error is collected in one pass, and
``validated_data`` carries declared defaults rather than the raw input.
"""


def validate_body(serializer_class, data, **kwargs):
    """Validate a request body and return the normalised value."""
    serializer = serializer_class(data=data, **kwargs)
    serializer.is_valid(raise_exception=True)
    return serializer.validated_data
