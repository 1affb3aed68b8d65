import secrets
from fastapi import Depends, HTTPException, status, Request
from typing import Optional
from .config import Settings, get_settings


class AuthDecision:
    """Outcome of checking a request against the shared bearer secret"""

    def __init__(self, allowed: bool, reason: Optional[str] = None):
        self.allowed = allowed
        self.reason = reason

    def __bool__(self) -> bool:
        return self.allowed


def authorize(request: Request, settings: Settings) -> AuthDecision:
    """Check the Authorization header against the configured API token"""
    if not settings.AUTH_REQUIRED:
        return AuthDecision(True)

    auth_header = request.headers.get("Authorization")
    if not auth_header:
        return AuthDecision(False, "Unauthorized: missing Authorization header")

    if not auth_header.startswith("Bearer "):
        return AuthDecision(False, "Unauthorized: Authorization header must use the Bearer scheme")

    token = auth_header[len("Bearer "):]
    # An unset secret never matches
    if not settings.API_TOKEN or not secrets.compare_digest(token.encode(), settings.API_TOKEN.encode()):
        return AuthDecision(False, "Unauthorized: invalid token")

    return AuthDecision(True)


async def require_token(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> None:
    """Reject the request with 401 unless it carries the shared bearer token"""
    decision = authorize(request, settings)
    if not decision:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=decision.reason,
            headers={"WWW-Authenticate": "Bearer"},
        )
