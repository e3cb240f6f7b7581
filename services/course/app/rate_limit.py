"""
Global slowapi rate limiter.

Imported by auth/router.py for per-endpoint limits. Mounted onto app.state in
main.py so slowapi middleware can find it.

Storage comes from RATE_LIMIT_STORAGE_URI (in-memory by default, point it at
Redis when running more than one worker).
"""
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.config import Settings

_settings = Settings()

limiter = Limiter(
    key_func=get_remote_address,
    storage_uri=_settings.rate_limit_storage_uri,
)

# Per-IP limit on POST /auth/login (slowapi notation, e.g. "10/minute")
LOGIN_RATE_LIMIT = _settings.login_rate_limit
