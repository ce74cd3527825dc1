"""Permission actions for role gating."""

from enum import StrEnum


class PermissionAction(StrEnum):
    """Actions a role can be allowed to perform."""

    READ = "read"
    WRITE = "write"
    ADMIN = "admin"
