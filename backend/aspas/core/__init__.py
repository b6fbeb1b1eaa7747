# aspas/core/__init__.py
"""
Core application modules.
Contains essential infrastructure components:
- bootstrap: Application initialization and default admin creation
- db: Database configuration and connection management
- errors: Domain error taxonomy and HTTP error envelope
- pagination: Page arithmetic shared by list endpoints
- ratelimit: Login attempt counters with swappable stores
- security: Authentication, password hashing and reset tokens
- validation: Schema-driven validation of params and query strings
"""
