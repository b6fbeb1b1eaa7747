# aspas/models/task.py
import uuid
from enum import Enum
from tortoise import fields, models


class Priority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class Task(models.Model):
    # project and user always belong to the same owner (checked by the task service)
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    title = fields.CharField(max_length=200)
    description = fields.CharField(max_length=1000, null=True)
    completed = fields.BooleanField(default=False)
    due_date = fields.DatetimeField(null=True)
    priority = fields.CharEnumField(Priority, max_length=8, default=Priority.MEDIUM)
    project = fields.ForeignKeyField("models.Project", related_name="tasks", on_delete=fields.CASCADE)
    user = fields.ForeignKeyField("models.User", related_name="tasks", on_delete=fields.CASCADE)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "tasks"
