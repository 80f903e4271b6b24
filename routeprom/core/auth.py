"""HTTP Basic credential check for the metrics endpoint."""

import secrets

from aiohttp import BasicAuth

BASIC_CHALLENGE = 'Basic realm="restricted"'


def check_basic_auth(header: str | None, username: str, password: str) -> bool:
    """Return True when ``header`` carries exactly ``username`` and ``password``."""
    if not header:
        return False
    try:
        credentials = BasicAuth.decode(header, encoding="utf-8")
    except ValueError:
        return False
    user_ok = secrets.compare_digest(credentials.login.encode("utf-8"), username.encode("utf-8"))
    password_ok = secrets.compare_digest(
        credentials.password.encode("utf-8"), password.encode("utf-8")
    )
    return user_ok and password_ok
