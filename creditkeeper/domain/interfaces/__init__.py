"""
Domain Interfaces (Ports)
"""

from .repositories import ProfileRepository

__all__ = [
    "ProfileRepository",
]
