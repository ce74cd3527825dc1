"""Permission checker port - role gating."""

from typing import Protocol

from hojaruta.domain.value_objects import PermissionAction


class PermissionChecker(Protocol):
    """Port for checking whether a role may perform an action."""

    def check(self, role: str | None, action: PermissionAction) -> bool: ...
