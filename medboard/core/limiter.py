"""Rate limiter instance for SlowAPI.

Shared so both main (app.state.limiter) and route modules (auth) can use the
same instance without circular imports. Decorated endpoints must accept a
`request: Request` argument.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(key_func=get_remote_address)

LOGIN_LIMIT = "10/minute"
REGISTER_LIMIT = "5/minute"
PASSWORD_RESET_LIMIT = "5/minute"
REFRESH_LIMIT = "30/minute"

limit_login = limiter.limit(LOGIN_LIMIT)
limit_register = limiter.limit(REGISTER_LIMIT)
limit_password_reset = limiter.limit(PASSWORD_RESET_LIMIT)
limit_refresh = limiter.limit(REFRESH_LIMIT)
