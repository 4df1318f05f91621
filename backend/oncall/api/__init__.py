"""
REST API blueprints for the on-call manager.

Each blueprint is a thin layer over the EntityStore held in
app.extensions["store"].
"""

from .organizations import bp as organizations_bp, assignments_bp
from .physicians import bp as physicians_bp
from .schedules import bp as schedules_bp
from .requests import bp as requests_bp
from .users import bp as users_bp

__all__ = [
    "organizations_bp",
    "assignments_bp",
    "physicians_bp",
    "schedules_bp",
    "requests_bp",
    "users_bp",
]
