from __future__ import annotations

from fastapi import HTTPException, Request
from starlette.middleware.base import BaseHTTPMiddleware

from ..auth.cognito import CognitoAuthError, verify_bearer_token
from ..observability.logging import get_logger
from ..problem_details import problem_response


PUBLIC_PATHS = frozenset({"/", "/api/catalog"})


def is_public_path(path: str) -> bool:
    return path in PUBLIC_PATHS


def _bearer_token(request: Request) -> str:
    auth = request.headers.get("authorization")
    if not auth:
        raise HTTPException(status_code=401, detail="Unauthorized")

    parts = str(auth).split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise HTTPException(status_code=401, detail="Unauthorized")
    return parts[1].strip()


async def require_auth(request: Request) -> None:
    path = request.url.path

    # CORS preflight carries no credentials.
    if request.method.upper() == "OPTIONS":
        return

    # Only API routes are protected; everything else falls through to routing.
    if not path.startswith("/api/") or is_public_path(path):
        return

    token = _bearer_token(request)
    try:
        user = verify_bearer_token(token)
    except CognitoAuthError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e)) from e
    except Exception as e:  # noqa: BLE001
        raise HTTPException(status_code=401, detail="Unauthorized") from e

    request.state.user = user


class AuthMiddleware(BaseHTTPMiddleware):
    """
    Bearer-token enforcement for /api/* routes.

    Added before CORSMiddleware so CORS wraps all responses, auth failures included.
    """

    async def dispatch(self, request: Request, call_next):
        try:
            await require_auth(request)
        except HTTPException as exc:
            log = get_logger("auth_middleware")
            if exc.status_code >= 500:
                log.error("auth_middleware_error", status_code=exc.status_code, path=request.url.path)
            else:
                log.info("auth_middleware_denied", status_code=exc.status_code, path=request.url.path)
            return problem_response(
                request=request,
                status_code=exc.status_code,
                detail=str(exc.detail) if isinstance(exc.detail, str) else None,
            )
        return await call_next(request)
