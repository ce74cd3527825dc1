"""Domain exceptions."""


class HojaRutaError(Exception):
    """Base exception for the routing backend."""

    code = "INTERNAL_ERROR"


class PermissionDenied(HojaRutaError):
    """User role does not allow the requested action."""

    code = "FORBIDDEN"


class NotFound(HojaRutaError):
    """Requested resource was not found."""

    code = "NOT_FOUND"

    def __init__(self, entity: str, identifier: object = None) -> None:
        self.entity = entity
        self.identifier = identifier
        if identifier is None:
            super().__init__(f"{entity} no existe")
        else:
            super().__init__(f"{entity} {identifier} no existe")


class ValidationError(HojaRutaError):
    """Validation failed for input data."""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, field: str | None = None) -> None:
        self.field = field
        super().__init__(message)


class ReferenceViolation(ValidationError):
    """Foreign key points at a row that does not exist."""

    code = "REFERENCE_ERROR"


class InvalidTransition(ValidationError):
    """State change not allowed by the transition table."""

    code = "INVALID_TRANSITION"

    def __init__(self, current: str, target: str) -> None:
        self.current = current
        self.target = target
        super().__init__(f"Transicion invalida: {current} -> {target}", field="estado")


class Conflict(HojaRutaError):
    """Resource already exists."""

    code = "CONFLICT"


class LedgerFull(HojaRutaError):
    """Every section slot of a document is taken."""

    code = "LEDGER_FULL"

    def __init__(self, capacity: int) -> None:
        self.capacity = capacity
        super().__init__(f"Todas las {capacity} secciones estan ocupadas")


class AuthenticationError(HojaRutaError):
    """Credentials or token rejected."""

    code = "AUTH_ERROR"


class InvalidCredentials(AuthenticationError):
    """Username or password does not match."""

    code = "INVALID_CREDENTIALS"


class TokenExpired(AuthenticationError):
    """Token signature is valid but it has expired."""

    code = "TOKEN_EXPIRED"


class InvalidToken(AuthenticationError):
    """Token could not be verified."""

    code = "INVALID_TOKEN"


class InvalidTokenStructure(InvalidToken):
    """Token verified but lacks required claims."""

    code = "INVALID_STRUCTURE"


class PayloadTooLarge(HojaRutaError):
    """Request body is larger than the configured limit."""

    code = "PAYLOAD_TOO_LARGE"

    def __init__(self, limit: int) -> None:
        self.limit = limit
        super().__init__("Payload demasiado grande")
