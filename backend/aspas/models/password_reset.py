# aspas/models/password_reset.py
import uuid
from tortoise import fields, models


class PasswordReset(models.Model):
    """
    Password recovery token.
    - email: Owner's email (denormalized, not a foreign key)
    - token: Random hex string sent by mail, unique
    - expires_at: Creation time + reset TTL (1 hour)
    - used: Set once, on redemption or on a redemption attempt after expiry
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    email = fields.CharField(max_length=256, index=True)
    token = fields.CharField(max_length=128, unique=True, index=True)
    expires_at = fields.DatetimeField()
    used = fields.BooleanField(default=False)
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "password_resets"
