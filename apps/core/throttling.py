"""
Per-client rate limiting.

A sliding window of request timestamps per client address, stored in the
Django cache by DRF's ``SimpleRateThrottle``.  The default LocMem cache is
process-local and only approximately accurate under concurrent requests;
configure ``CACHE_URL`` with a shared backend for multi-instance deploys.

Every throttled view also answers with ``X-RateLimit-Limit``,
``X-RateLimit-Remaining`` and ``X-RateLimit-Reset`` headers.
"""

import re
from datetime import datetime, timezone as dt_timezone

from django.core.exceptions import ImproperlyConfigured
from rest_framework.throttling import SimpleRateThrottle

UNIT_SECONDS = {"s": 1, "m": 60, "h": 3600, "d": 86400}

# "100/900s", "30/minute", "5/15m"
RATE_PATTERN = re.compile(r"^(?P<num>\d+)/(?P<count>\d*)(?P<unit>[smhd])[a-z]*$")


class ClientAddressRateThrottle(SimpleRateThrottle):
    """Throttle every request, authenticated or not, by client address."""

    scope = "client"

    def parse_rate(self, rate):
        """Accept DRF's ``n/period`` form plus multiples such as ``100/900s``."""
        if rate is None:
            return (None, None)
        match = RATE_PATTERN.match(rate)
        if not match:
            raise ImproperlyConfigured(f"Invalid throttle rate: {rate!r}")
        count = int(match["count"] or 1)
        return int(match["num"]), count * UNIT_SECONDS[match["unit"]]

    def get_cache_key(self, request, view):
        return self.cache_format % {
            "scope": self.scope,
            "ident": self.get_ident(request),
        }

    def allow_request(self, request, view):
        allowed = super().allow_request(request, view)
        # APIView.finalize_response copies view.headers onto the response
        if self.rate is not None and view is not None:
            view.headers.update(self.rate_limit_headers())
        return allowed

    def rate_limit_headers(self):
        """Headers describing the window as of the last ``allow_request``."""
        remaining = max(self.num_requests - len(self.history), 0)
        reset = datetime.fromtimestamp(self.now + self.duration, tz=dt_timezone.utc)
        return {
            "X-RateLimit-Limit": str(self.num_requests),
            "X-RateLimit-Remaining": str(remaining),
            "X-RateLimit-Reset": reset.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
        }
