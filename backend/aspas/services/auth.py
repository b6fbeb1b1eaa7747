# aspas/services/auth.py
"""
Authentication service: login, registration, password recovery and "who am I".

Mail is always best effort. When the service is given a ``schedule`` callable
(FastAPI ``BackgroundTasks.add_task``) deliveries run after the response is sent;
without one they are awaited inline. Either way a failed delivery is only logged.
"""
import logging
import uuid
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

import jwt
from tortoise.exceptions import IntegrityError
from tortoise.expressions import Q
from tortoise.transactions import in_transaction

from aspas.config import settings
from aspas.core.errors import AppError, ErrorKind
from aspas.core.security import (
    as_utc,
    create_access_token,
    generate_reset_token,
    hash_password,
    reset_token_expiry,
    utc_now,
    verify_password,
)
from aspas.models.password_reset import PasswordReset
from aspas.models.user import Role, User
from aspas.services.email import EmailResult, EmailService

logger = logging.getLogger("uvicorn.error")

FORGOT_PASSWORD_MESSAGE = "If this email is registered, you will receive recovery instructions."
RESET_PASSWORD_MESSAGE = "Password updated successfully"

Scheduler = Callable[..., Any]


@dataclass
class LoginResult:
    token: str
    user: User


class AuthService:
    def __init__(self, mailer: EmailService, schedule: Optional[Scheduler] = None):
        self.mailer = mailer
        self._schedule = schedule

    # ------------------------------------------------------------------ mail
    async def _notify(self, send: Callable[..., Awaitable[EmailResult]], *args: Any) -> None:
        if self._schedule is not None:
            self._schedule(self._deliver, send, *args)
        else:
            await self._deliver(send, *args)

    @staticmethod
    async def _deliver(send: Callable[..., Awaitable[EmailResult]], *args: Any) -> None:
        try:
            result = await send(*args)
        except Exception:
            # Delivery never affects the operation that triggered it
            logger.exception("[auth] Mail delivery %s raised", getattr(send, "__name__", send))
            return
        if not result.success:
            logger.warning("[auth] Mail %s not delivered: %s", getattr(send, "__name__", send), result.message)

    # ----------------------------------------------------------------- login
    async def login(self, email: str, password: str) -> LoginResult:
        """
        Authenticate by email and password.

        Unknown email and wrong password raise the same INVALID_CREDENTIALS error,
        and both paths verify one hash.
        """
        user = await User.get_or_none(email=email)
        password_ok = verify_password(password, user.password_hash if user else None)
        if user is None or not password_ok:
            raise AppError(ErrorKind.INVALID_CREDENTIALS)

        try:
            token = create_access_token(str(user.id), user.email, user.role.value)
        except jwt.PyJWTError:
            logger.exception("[auth] Token signing failed for user %s", user.id)
            raise AppError(ErrorKind.TOKEN_GENERATION_ERROR) from None
        if not token:
            raise AppError(ErrorKind.TOKEN_GENERATION_ERROR)
        return LoginResult(token=token, user=user)

    # -------------------------------------------------------------- register
    async def register(self, name: str, email: str, password: str, role: Role = Role.FREE) -> User:
        """
        Create an account. ``name`` is used as display name and username.

        Raises:
            AppError(EMAIL_ALREADY_EXISTS) / AppError(USERNAME_ALREADY_EXISTS)
        """
        await self._ensure_available(name, email)
        try:
            user = await User.create(
                username=name,
                name=name,
                email=email,
                password_hash=hash_password(password),
                role=role,
                updated_by=email,
            )
        except IntegrityError:
            # Lost a race with a concurrent registration: report the field that collided
            await self._ensure_available(name, email)
            raise
        logger.info("[auth] Registered user id=%s email=%s", user.id, user.email)

        await self._notify(self.mailer.send_welcome, name, email)
        return user

    @staticmethod
    async def _ensure_available(username: str, email: str) -> None:
        existing = await User.filter(Q(email=email) | Q(username=username)).all()
        if any(u.email == email for u in existing):
            raise AppError(ErrorKind.EMAIL_ALREADY_EXISTS)
        if any(u.username == username for u in existing):
            raise AppError(ErrorKind.USERNAME_ALREADY_EXISTS)

    # ------------------------------------------------------- password reset
    async def forgot_password(self, email: str) -> dict:
        """
        Issue a reset token and mail the link.

        The response is identical whether or not the email is registered; unknown
        emails create no token and send no mail.
        """
        user = await User.get_or_none(email=email)
        if user is None:
            return {"message": FORGOT_PASSWORD_MESSAGE}

        now = utc_now()
        # Housekeeping: drop this email's dead tokens, then retire the live ones
        await PasswordReset.filter(Q(email=email) & (Q(used=True) | Q(expires_at__lte=now))).delete()
        await PasswordReset.filter(email=email, used=False).update(used=True)

        token = generate_reset_token()
        await PasswordReset.create(email=email, token=token, expires_at=reset_token_expiry(now), used=False)

        reset_link = f"{settings.frontend_url.rstrip('/')}/reset-password?token={token}"
        await self._notify(self.mailer.send_password_recovery, user.name or "", email, reset_link)
        return {"message": FORGOT_PASSWORD_MESSAGE}

    async def reset_password(self, token: str, new_password: str) -> dict:
        """
        Redeem a reset token.

        Token states:
          - unknown  -> RESET_TOKEN_INVALID
          - used     -> RESET_TOKEN_USED
          - expired  -> marked used, then RESET_TOKEN_EXPIRED
          - valid    -> password changed, token marked used (at most once)
        """
        reset = await PasswordReset.get_or_none(token=token)
        if reset is None:
            raise AppError(ErrorKind.RESET_TOKEN_INVALID)
        if reset.used:
            raise AppError(ErrorKind.RESET_TOKEN_USED)
        if as_utc(reset.expires_at) <= utc_now():
            await PasswordReset.filter(id=reset.id).update(used=True)
            raise AppError(ErrorKind.RESET_TOKEN_EXPIRED)

        password_hash = hash_password(new_password)
        async with in_transaction() as conn:
            # Conditional claim: only one concurrent redemption sees a row updated
            claimed = await PasswordReset.filter(id=reset.id, used=False).using_db(conn).update(used=True)
            if not claimed:
                raise AppError(ErrorKind.RESET_TOKEN_USED)
            updated = await User.filter(email=reset.email).using_db(conn).update(
                password_hash=password_hash,
                updated_by=reset.email,
                updated_at=utc_now(),
            )
            if not updated:
                raise AppError(ErrorKind.USER_NOT_FOUND)

        logger.info("[auth] Password reset completed for %s", reset.email)
        return {"message": RESET_PASSWORD_MESSAGE}

    # -------------------------------------------------------------------- me
    async def get_user(self, user_id: str) -> User:
        try:
            uid = uuid.UUID(str(user_id))
        except ValueError:
            raise AppError(ErrorKind.USER_NOT_FOUND) from None
        user = await User.get_or_none(id=uid)
        if user is None:
            raise AppError(ErrorKind.USER_NOT_FOUND)
        return user
