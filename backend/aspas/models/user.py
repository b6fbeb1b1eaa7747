# aspas/models/user.py
"""
Database model for users.
Represents a user account in the system, containing authentication credentials,
profile information, and role-based access control.
"""
import uuid
from enum import Enum
from tortoise import fields, models


class Role(str, Enum):
    ADMIN = "ADMIN"
    FREE = "FREE"
    PRO = "PRO"


class User(models.Model):
    """
    User database model.

    Relationships:
    - Has many Projects, Tasks and Phrases (cascade on delete)

    Security:
    - Password is stored as a hash (never store plain text passwords)
    - Email and username are unique across all users
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)  # Primary key: unique user identifier
    email = fields.CharField(max_length=256, unique=True, index=True)  # Login identifier
    username = fields.CharField(max_length=256, unique=True, index=True)
    password_hash = fields.CharField(max_length=255)  # Argon2 hash, never plain text
    name = fields.CharField(max_length=100, null=True)
    avatar = fields.CharField(max_length=1024, default="")
    bio = fields.TextField(default="")
    role = fields.CharEnumField(Role, max_length=8, default=Role.FREE)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)
    updated_by = fields.CharField(max_length=256, null=True)  # Email of whoever last changed the row

    class Meta:
        """Tortoise ORM metadata configuration."""
        table = "users"
