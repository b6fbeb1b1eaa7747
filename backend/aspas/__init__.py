"""
Aspas Note API.
Backend for tasks, projects and quotable phrases behind email/password authentication.
"""
