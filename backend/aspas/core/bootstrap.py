# aspas/core/bootstrap.py
"""
Bootstrap module for application initialization.
Handles initial setup tasks such as creating default admin user on first startup.
"""
import os
import logging
from aspas.models.user import Role, User
from aspas.core.security import hash_password

logger = logging.getLogger("uvicorn.error")


async def ensure_default_admin() -> None:
    """
    If no admin exists in the database, create a default admin based on environment variables.
    Only takes effect under the following conditions:
      - Currently no user with role=ADMIN
      - And ADMIN_PASSWORD is set (to avoid using default weak password)
    Environment variables:
      ADMIN_USERNAME (default: "admin")
      ADMIN_EMAIL    (default: "admin@example.com")
      ADMIN_PASSWORD (required, otherwise won't create)
    """
    if await User.filter(role=Role.ADMIN).exists():
        return

    admin_password = os.getenv("ADMIN_PASSWORD")
    if not admin_password:
        logger.warning("[bootstrap] No admin present, but ADMIN_PASSWORD not set -> skip creating default admin.")
        return

    admin_username = os.getenv("ADMIN_USERNAME", "admin")
    admin_email = os.getenv("ADMIN_EMAIL", "admin@example.com").strip().lower()

    if await User.filter(email=admin_email).exists():
        logger.warning("[bootstrap] ADMIN_EMAIL %s already belongs to a regular account -> skip.", admin_email)
        return

    # Someone may have registered "admin" as a regular account: pick a free name
    base_username = admin_username
    suffix = 1
    while await User.filter(username=admin_username).exists():
        suffix += 1
        admin_username = f"{base_username}{suffix}"

    u = await User.create(
        username=admin_username,
        name=base_username,
        email=admin_email,
        password_hash=hash_password(admin_password),
        role=Role.ADMIN,
        updated_by=admin_email,
    )
    logger.warning("[bootstrap] Created default admin -> username=%s email=%s id=%s",
                   u.username, u.email, u.id)
