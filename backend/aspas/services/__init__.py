"""
Services Module

Business logic behind the routers:
- auth: login, registration, password recovery
- email: transactional mail through Resend
- projects / tasks / phrases: owner-scoped CRUD
"""

from .auth import AuthService, LoginResult
from .email import EmailResult, EmailService, get_email_service
from .phrases import PhraseService
from .projects import ProjectService
from .tasks import TaskService
