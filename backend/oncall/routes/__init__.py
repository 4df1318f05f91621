"""
Authentication routes:
- auth.py: login, register, logout, current user
"""

from .auth import bp as auth_bp

__all__ = ["auth_bp"]
