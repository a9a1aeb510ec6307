# app/models/database/__init__.py
"""Database models initialization."""

from .base import Base
from .user import User
from .asset import Asset, Category
from .assignment import Assignment, ReturnRequest

# This makes imports cleaner elsewhere in the application
__all__ = [
    'Base',
    'User',
    'Asset',
    'Category',
    'Assignment',
    'ReturnRequest'
]
