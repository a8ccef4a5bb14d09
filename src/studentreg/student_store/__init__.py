"""Student Record Store - Persistent storage for registered students."""

from studentreg.student_store.exceptions import DuplicateKeyError, StoreError
from studentreg.student_store.models import StudentRecord
from studentreg.student_store.store import StudentStore

__all__ = [
    "DuplicateKeyError",
    "StoreError",
    "StudentRecord",
    "StudentStore",
]
