from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable

from fastapi import Request, Response, status

from ..domain.gate import Decision, decide
from ..domain.paths import EXEMPT_PATHS, PathMatcher
from ..domain.tokens import ONE_HOUR_MS, Clock
from ..logging_conf import get_logger

logger = get_logger("auth")


class BearerAuthGate:
    """FastAPI adapter around `decide()`.

    Register with `app.middleware("http")(BearerAuthGate(clock))`. Rejected
    requests get a bare 401 and never reach a route. Admitted requests carry
    `request.state.authenticated = True` and nothing else from the token.
    """

    def __init__(
        self,
        clock: Clock,
        *,
        exempt: Iterable[PathMatcher] = EXEMPT_PATHS,
        window_ms: int = ONE_HOUR_MS,
    ) -> None:
        self.clock = clock
        self.exempt = tuple(exempt)
        self.window_ms = window_ms

    async def __call__(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        path = request.url.path
        decision = decide(
            path,
            request.headers.get("Authorization"),
            self.clock(),
            exempt=self.exempt,
            window_ms=self.window_ms,
        )
        if decision is Decision.reject:
            logger.warning(
                "auth.rejected",
                extra={"event": "auth_rejected", "method": request.method, "path": path},
            )
            return Response(status_code=status.HTTP_401_UNAUTHORIZED)

        if decision is Decision.exempt:
            logger.debug("auth.exempt", extra={"event": "auth_exempt", "path": path})
        else:
            request.state.authenticated = True
        return await call_next(request)
