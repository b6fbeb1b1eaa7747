# aspas/api/routers/auth.py
import uuid

from fastapi import APIRouter, Depends, status

from aspas.api.deps import get_auth_service, get_current_user_id
from aspas.core.ratelimit import RateLimitStore, get_rate_limit_store, login_rate_limit, reset_login_attempts
from aspas.core.security import iso_utc
from aspas.models.user import User
from aspas.schemas.auth import ForgotPasswordIn, LoginIn, RegisterIn, ResetPasswordIn
from aspas.services.auth import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


def _public_user(u: User) -> dict:
    return {
        "id": str(u.id),
        "email": u.email,
        "username": u.username,
        "name": u.name,
        "avatar": u.avatar,
        "bio": u.bio,
        "role": u.role.value,
        "createdAt": iso_utc(u.created_at),
        "updatedAt": iso_utc(u.updated_at),
        "updatedBy": u.updated_by,
    }


@router.post("/login", dependencies=[Depends(login_rate_limit)])
async def login(
    body: LoginIn,
    auth: AuthService = Depends(get_auth_service),
    store: RateLimitStore = Depends(get_rate_limit_store),
):
    """
    Authenticate with email and password and issue a bearer token.

    The route is guarded by ``login_rate_limit`` (per IP, then per email). A
    successful login clears the per-email counter.

    Args:
        body: Request body containing:
            - email: str
            - senha: str (password, at least 6 characters)

    Returns:
        dict: {token, user: {id, nome, email, role}}

    Error codes:
        - VALIDATION_ERROR (400): malformed body
        - INVALID_CREDENTIALS (401): unknown email or wrong password (same message)
        - TOO_MANY_LOGIN_ATTEMPTS / TOO_MANY_LOGIN_ATTEMPTS_EMAIL (429)
        - TOKEN_GENERATION_ERROR (500)
    """
    result = await auth.login(body.email, body.senha)
    await reset_login_attempts(store, body.email)
    u = result.user
    return {
        "token": result.token,
        "user": {"id": str(u.id), "nome": u.name, "email": u.email, "role": u.role.value},
    }


@router.post("/registro", status_code=status.HTTP_201_CREATED)
async def register(body: RegisterIn, auth: AuthService = Depends(get_auth_service)):
    """
    Register a new account.

    ``nome`` becomes both the display name and the username. A welcome mail is
    sent after the response; delivery problems never fail the registration.

    Returns:
        dict: {message, user} (the password hash is never returned)

    Error codes:
        - VALIDATION_ERROR (400)
        - EMAIL_ALREADY_EXISTS (409), checked before the username
        - USERNAME_ALREADY_EXISTS (409)
    """
    u = await auth.register(body.nome, body.email, body.senha, body.role)
    return {"message": "User created successfully", "user": _public_user(u)}


@router.post("/forgot-password")
async def forgot_password(body: ForgotPasswordIn, auth: AuthService = Depends(get_auth_service)):
    """
    Start password recovery. Always answers with the same message so callers
    cannot probe which emails are registered.
    """
    return await auth.forgot_password(body.email)


@router.post("/reset-password")
async def reset_password(body: ResetPasswordIn, auth: AuthService = Depends(get_auth_service)):
    """
    Redeem a recovery token and set a new password.

    Error codes (all 400):
        - INVALID_TOKEN: unknown token
        - TOKEN_ALREADY_USED: token already redeemed or superseded
        - TOKEN_EXPIRED: token past its expiry
    """
    return await auth.reset_password(body.token, body.novaSenha)


@router.get("/me")
async def me(user_id: uuid.UUID = Depends(get_current_user_id), auth: AuthService = Depends(get_auth_service)):
    """Return the profile of the token's user."""
    u = await auth.get_user(user_id)
    return {
        "user": {
            "id": str(u.id),
            "name": u.name,
            "email": u.email,
            "role": u.role.value,
            "createdAt": iso_utc(u.created_at),
        }
    }
