"""Application ports - interfaces for external adapters."""

from hojaruta.application.ports.permission_checker import PermissionChecker
from hojaruta.application.ports.token_provider import (
    PasswordHasher,
    TokenClaims,
    TokenProvider,
)
from hojaruta.application.ports.unit_of_work import UnitOfWork, UnitOfWorkFactory

__all__ = [
    "PasswordHasher",
    "PermissionChecker",
    "TokenClaims",
    "TokenProvider",
    "UnitOfWork",
    "UnitOfWorkFactory",
]
