"""Session-scoped repository infrastructure.

This package provides:
- Session: Identity map of one unit of work
- Repository: Loads, tracks and flushes aggregates of one unit of work
- UnitOfWork: Creates a repository per unit of work and commits it
"""

from .repository import Repository
from .session import Session
from .unit_of_work import UnitOfWork

__all__ = [
    "Repository",
    "Session",
    "UnitOfWork",
]
