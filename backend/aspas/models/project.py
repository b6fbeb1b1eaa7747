# aspas/models/project.py
"""
Database model for projects.
A project groups tasks and belongs to exactly one user.
"""
import uuid
from tortoise import fields, models


class Project(models.Model):
    """
    Project database model.

    Relationships:
    - Belongs to a User (many-to-one)
    - Has many Tasks (one-to-many, via related_name="tasks"); deleting a project deletes its tasks
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    name = fields.CharField(max_length=100)
    description = fields.CharField(max_length=500, null=True)
    color = fields.CharField(max_length=7, null=True)  # Hex color, "#RRGGBB"
    user = fields.ForeignKeyField("models.User", related_name="projects", on_delete=fields.CASCADE)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "projects"
