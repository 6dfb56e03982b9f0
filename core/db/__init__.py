"""
Core Database Components

This package provides reusable database components:
- models: Base model classes with common functionality
- exceptions: Database-level exceptions (optimistic locking)
"""

from core.db.exceptions import ConcurrentModificationError, StaleObjectError

__all__ = [
    'ConcurrentModificationError',
    'StaleObjectError',
]
