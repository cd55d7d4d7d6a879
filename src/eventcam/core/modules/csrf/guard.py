"""Origin checks for cookie-authenticated mutations."""

from urllib.parse import urlsplit

from eventcam.core.modules.access.models import AuthMethod

CSRF_PROTECTED_METHODS = frozenset({"POST", "PATCH", "PUT", "DELETE"})
LOCAL_HOSTNAMES = frozenset({"localhost", "127.0.0.1", "::1"})
DEFAULT_PORTS = {"http": 80, "https": 443}


def normalize_origin(value: str) -> str | None:
    """Reduce a URL to scheme://host[:port]. Returns None when it does not parse."""
    try:
        parts = urlsplit(value.strip())
        port = parts.port
    except ValueError:
        return None

    scheme = parts.scheme.lower()
    hostname = parts.hostname
    if scheme not in DEFAULT_PORTS or not hostname:
        return None

    host = f"[{hostname}]" if ":" in hostname else hostname
    if port is not None and port != DEFAULT_PORTS[scheme]:
        return f"{scheme}://{host}:{port}"
    return f"{scheme}://{host}"


def resolve_request_origin(origin: str | None, referer: str | None) -> str | None:
    """Origin header first, Referer as fallback."""
    if origin:
        return normalize_origin(origin)
    if referer:
        return normalize_origin(referer)
    return None


def is_local_hostname(hostname: str) -> bool:
    return hostname.lower() in LOCAL_HOSTNAMES


def is_trusted_origin(origin: str, trusted_origins: list[str]) -> bool:
    normalized = normalize_origin(origin)
    if normalized is None:
        return False

    hostname = urlsplit(normalized).hostname
    if hostname and is_local_hostname(hostname):
        return True

    return any(normalize_origin(allowed) == normalized for allowed in trusted_origins)


def should_enforce(method: str, auth_method: AuthMethod | None, has_bearer: bool, has_session_cookie: bool) -> bool:
    """Decide whether a request needs the origin check.

    Bearer requests are exempt. A session cookie triggers enforcement even
    before a principal exists, which covers the sign-in exchange itself.
    """
    if method.upper() not in CSRF_PROTECTED_METHODS:
        return False
    if auth_method == AuthMethod.BEARER or has_bearer:
        return False
    if auth_method == AuthMethod.SESSION:
        return True
    return has_session_cookie
