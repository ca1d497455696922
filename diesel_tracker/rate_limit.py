"""Rate limiting global / Global rate limiter.

Utilise slowapi pour limiter les requetes par IP.
Les exports et le keepalive ont leur propre limite / Exports and keepalive have their own limit.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from diesel_tracker.config import settings

limiter = Limiter(
    key_func=get_remote_address,
    enabled=settings.RATE_LIMIT_ENABLED,
)
