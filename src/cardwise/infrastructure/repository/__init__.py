# Infrastructure Repository Package
from .sqlite_repo import SqliteCardRepository

__all__ = ["SqliteCardRepository"]
