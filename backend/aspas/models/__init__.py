# aspas/models/__init__.py
"""
Database models module initialization.
Exports all database models for convenient imports throughout the application.

Models exported:
- User: User account and authentication model
- PasswordReset: Single-use password recovery token
- Project: Project owned by a user
- Task: Task inside a project
- Phrase: Quotable phrase (legacy)
"""
from .user import User, Role
from .password_reset import PasswordReset
from .project import Project
from .task import Task, Priority
from .phrase import Phrase
