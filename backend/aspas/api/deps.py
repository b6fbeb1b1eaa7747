# aspas/api/deps.py
import uuid
from dataclasses import dataclass
from typing import Optional

import jwt
from fastapi import BackgroundTasks, Depends, Header

from aspas.core.errors import AppError, ErrorKind
from aspas.core.security import decode_access_token
from aspas.services.auth import AuthService
from aspas.services.email import EmailService, get_email_service


@dataclass
class TokenClaims:
    """Identity carried by a verified bearer token."""
    user_id: Optional[str]
    email: Optional[str]
    role: Optional[str]


async def get_current_claims(authorization: str | None = Header(default=None)) -> TokenClaims:
    """
    FastAPI dependency: verify the ``Authorization: Bearer <token>`` header.

    Only the signature and expiry are checked here; routes that need the stored
    user load it themselves.

    Raises:
        AppError (401): MISSING_TOKEN when the header is absent or not a bearer token
        AppError (401): TOKEN_EXPIRED when the token is past its expiry
        AppError (401): INVALID_TOKEN for any other decoding failure

    Usage:
        @router.get("/protected")
        async def protected_route(claims: TokenClaims = Depends(get_current_claims)):
            return {"user_id": claims.user_id}
    """
    token = None
    if authorization and authorization.lower().startswith("bearer "):
        token = authorization.split(" ", 1)[1].strip()
    if not token:
        raise AppError(ErrorKind.MISSING_TOKEN)

    try:
        payload = decode_access_token(token)
    except jwt.ExpiredSignatureError:
        raise AppError(ErrorKind.TOKEN_EXPIRED) from None
    except jwt.PyJWTError:
        raise AppError(ErrorKind.INVALID_TOKEN) from None

    return TokenClaims(
        user_id=payload.get("userId"),
        email=payload.get("email"),
        role=payload.get("role"),
    )


async def get_current_user_id(claims: TokenClaims = Depends(get_current_claims)) -> uuid.UUID:
    """Like ``get_current_claims`` but insists on a well-formed userId claim."""
    try:
        return uuid.UUID(str(claims.user_id))
    except ValueError:
        raise AppError(ErrorKind.INVALID_TOKEN) from None


def get_auth_service(
    background_tasks: BackgroundTasks,
    mailer: EmailService = Depends(get_email_service),
) -> AuthService:
    # Mail goes out after the response has been sent
    return AuthService(mailer, schedule=background_tasks.add_task)
