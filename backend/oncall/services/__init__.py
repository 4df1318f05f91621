"""
Backend services for the on-call manager.

- seed_demo_data: synthetic demo dataset for a fresh store
"""

from .demo_data import seed_demo_data

__all__ = ["seed_demo_data"]
