"""FastAPI dependencies for dependency injection.

The store handle and password context are created by the application
lifespan and kept on ``app.state``; nothing here is module-global.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from studentreg.registration import RegistrationService
from studentreg.student_store import StudentStore


def get_student_store(request: Request) -> StudentStore:
    """Dependency that provides the StudentStore opened at startup."""
    store: StudentStore | None = getattr(request.app.state, "student_store", None)
    if store is None:
        raise RuntimeError("StudentStore not initialized. Start the app through its lifespan.")
    return store


# Type alias for dependency injection
StudentStoreDep = Annotated[StudentStore, Depends(get_student_store)]


def get_registration_service(request: Request, store: StudentStoreDep) -> RegistrationService:
    """Dependency that provides a RegistrationService bound to the app's store."""
    return RegistrationService(
        store,
        password_context=getattr(request.app.state, "password_context", None),
    )


RegistrationServiceDep = Annotated[RegistrationService, Depends(get_registration_service)]
