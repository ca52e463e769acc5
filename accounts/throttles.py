import logging
import re

from rest_framework.throttling import SimpleRateThrottle

logger = logging.getLogger(__name__)

_PERIOD_RE = re.compile(r"^(\d*)([smhd])")
_PERIOD_SECONDS = {"s": 1, "m": 60, "h": 3600, "d": 86400}


class WindowRateThrottle(SimpleRateThrottle):
    """
    Per-IP throttle that also accepts multi-unit windows such as
    ``"5/15m"`` (five requests per fifteen minutes).
    """

    def parse_rate(self, rate):
        if rate is None:
            return (None, None)
        num, period = rate.split("/")
        match = _PERIOD_RE.match(period)
        if match is None:
            raise ValueError(f"Invalid throttle rate: {rate!r}")
        multiplier = int(match.group(1) or 1)
        return (int(num), multiplier * _PERIOD_SECONDS[match.group(2)])

    def get_cache_key(self, request, view):
        return self.cache_format % {
            "scope": self.scope,
            "ident": self.get_ident(request),
        }

    def throttle_failure(self):
        logger.warning("Rate limit exceeded for scope %s", self.scope)
        return super().throttle_failure()


class LoginRateThrottle(WindowRateThrottle):
    scope = "login"


class ApiRateThrottle(WindowRateThrottle):
    scope = "api"


class PasswordResetRequestThrottle(WindowRateThrottle):
    scope = "password_reset_request"


class PasswordResetConfirmThrottle(WindowRateThrottle):
    scope = "password_reset_confirm"
