# aspas/schemas/auth.py
"""
Pydantic schemas for authentication endpoints.
Defines request models for login, registration and password recovery.
Field names follow the public API (senha = password, nome = name, novaSenha = new password).
"""
from pydantic import BaseModel, EmailStr, Field, constr, field_validator

from aspas.models.user import Role

__all__ = ["LoginIn", "RegisterIn", "ForgotPasswordIn", "ResetPasswordIn"]


class LoginIn(BaseModel):
    """
    Request model for user login endpoint.
    The email is matched exactly as stored.
    """
    email: EmailStr
    senha: str = Field(min_length=6)  # Password (plain text, verified against the stored hash)


class RegisterIn(BaseModel):
    """
    Request model for user registration.
    ``nome`` becomes both the display name and the (unique) username.
    """
    nome: constr(strip_whitespace=True, min_length=2, max_length=100)
    email: EmailStr
    senha: str = Field(min_length=6, max_length=100)
    role: Role = Role.FREE

    @field_validator("email")
    @classmethod
    def _lower_email(cls, v: str) -> str:
        return v.lower()

    @field_validator("role")
    @classmethod
    def _no_self_admin(cls, v: Role) -> Role:
        # Admins come from the bootstrap account, never from public sign-up
        if v == Role.ADMIN:
            raise ValueError("role must be FREE or PRO")
        return v


class ForgotPasswordIn(BaseModel):
    """Request model for starting the password recovery flow."""
    email: EmailStr

    @field_validator("email")
    @classmethod
    def _lower_email(cls, v: str) -> str:
        return v.lower()


class ResetPasswordIn(BaseModel):
    """Request model for redeeming a password reset token."""
    token: str = Field(min_length=1)  # Token received by email
    novaSenha: str = Field(min_length=6, max_length=100)  # New password
