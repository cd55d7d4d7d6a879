import structlog

from eventcam.core.core import Service
from eventcam.core.modules.access.models import AuthMethod
from eventcam.core.modules.csrf.guard import is_trusted_origin, resolve_request_origin, should_enforce
from eventcam.errors import CsrfCheckFailedError

logger = structlog.get_logger(__name__)


class CsrfService(Service):
    """Applies the trusted-origin allow-list to cookie-authenticated mutations."""

    def check(
        self,
        method: str,
        origin: str | None,
        referer: str | None,
        *,
        has_bearer: bool,
        has_session_cookie: bool,
        auth_method: AuthMethod | None = None,
    ) -> None:
        """Raise CsrfCheckFailedError when an enforced request has an untrusted origin."""
        if not should_enforce(method, auth_method, has_bearer, has_session_cookie):
            return

        request_origin = resolve_request_origin(origin, referer)
        if request_origin is None or not is_trusted_origin(request_origin, self.core.config.trusted_origins):
            logger.warning("csrf_check_failed", method=method, origin=request_origin)
            raise CsrfCheckFailedError
