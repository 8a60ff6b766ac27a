"""
Partial-update ("patch") support shared by tasks, categories and profiles.

A :class:`Patch` records exactly which columns the caller asked to change.
Absent fields are simply not in the patch; ``None`` is a real value
(e.g. clearing ``due_date``) and only reaches a patch when the validating
serializer allowed it.  :func:`apply_patch` turns the patch into a single
``QuerySet.update()`` so the caller's scoping filter (id + owner) and the
write happen in one statement.
"""

from django.utils import timezone

from .exceptions import NoFieldsToUpdate


class Patch:
    """An explicit set of column assignments for one row."""

    def __init__(self, assignments=None):
        self._assignments = dict(assignments or {})

    @classmethod
    def from_validated(cls, validated_data, columns):
        """
        Build a patch from serializer output.

        ``columns`` maps accepted input field names to model columns;
        anything else in ``validated_data`` is ignored.
        """
        return cls(
            {column: validated_data[field] for field, column in columns.items() if field in validated_data}
        )

    def __contains__(self, column):
        return column in self._assignments

    def __getitem__(self, column):
        return self._assignments[column]

    def __bool__(self):
        return bool(self._assignments)

    def __len__(self):
        return len(self._assignments)

    def __repr__(self):
        return f"Patch({self._assignments!r})"

    def set(self, column, value):
        """Add a derived assignment (not supplied by the caller)."""
        self._assignments[column] = value

    def columns(self):
        return list(self._assignments)

    def assignments(self):
        return dict(self._assignments)


def apply_patch(queryset, patch, *, touch=None):
    """
    Apply ``patch`` to every row of ``queryset``; return the affected count.

    ``touch`` names a timestamp column to bump alongside the patch
    (``QuerySet.update`` bypasses ``auto_now``).  An empty patch raises
    :class:`NoFieldsToUpdate` before anything is written.
    """
    if not patch:
        raise NoFieldsToUpdate()
    assignments = patch.assignments()
    if touch:
        assignments[touch] = timezone.now()
    return queryset.update(**assignments)
