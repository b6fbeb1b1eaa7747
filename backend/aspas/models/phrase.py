# aspas/models/phrase.py
import uuid
from tortoise import fields, models


class Phrase(models.Model):
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    phrase = fields.TextField()
    author = fields.CharField(max_length=100)
    tags = fields.JSONField(default=list)  # list[str]
    user = fields.ForeignKeyField("models.User", related_name="phrases", on_delete=fields.CASCADE)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "phrases"
