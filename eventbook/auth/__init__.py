"""
Authentication Module

Registration, login and profile endpoints. Passwords are hashed with bcrypt
and callers authenticate with HS256 bearer tokens; ``require_admin`` guards
the admin-only endpoints of the other modules.
"""

from . import router, schemas, service, dependencies

__all__ = ["router", "schemas", "service", "dependencies"]
