"""Permission checker implementation - fixed role sets per action."""

from hojaruta.domain.value_objects import PermissionAction, Rol

WRITE_ROLES = frozenset({Rol.DESARROLLADOR, Rol.ADMIN, Rol.ADMINISTRADOR, Rol.SECRETARIA})
ADMIN_ROLES = frozenset({Rol.DESARROLLADOR, Rol.ADMIN, Rol.ADMINISTRADOR})


class RolePermissionChecker:
    """Any authenticated role reads; write and admin need a listed role."""

    def check(self, role: str | None, action: PermissionAction) -> bool:
        if not role:
            return False
        role = role.lower()
        if action is PermissionAction.READ:
            return True
        if action is PermissionAction.WRITE:
            return role in WRITE_ROLES
        return role in ADMIN_ROLES
