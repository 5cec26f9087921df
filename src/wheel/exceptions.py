"""Custom exceptions for wheel tracker operations."""

from typing import Optional


class WheelError(Exception):
    """Base exception for wheel tracker operations."""

    pass


class ValidationFailed(WheelError):
    """One or more field rules were violated; nothing was written.

    Attributes:
        errors: Every violated rule, in the order checked
    """

    def __init__(self, errors: list[str], message: str = "Validation failed"):
        super().__init__(message)
        self.message = message
        self.errors = list(errors)

    def __str__(self) -> str:
        return f"{self.message}: {'; '.join(self.errors)}"


class NotFoundError(WheelError):
    """Referenced entity does not exist.

    Attributes:
        entity: Entity kind (e.g. "Trade", "Account")
        entity_id: Identifier that was looked up
    """

    def __init__(self, entity: str, entity_id: object):
        super().__init__(f"{entity} not found: {entity_id}")
        self.entity = entity
        self.entity_id = entity_id


class ConflictError(WheelError):
    """Operation blocked by dependent data.

    Attributes:
        counts: Number of blocking rows per entity type
    """

    def __init__(self, message: str, counts: Optional[dict[str, int]] = None):
        super().__init__(message)
        self.counts = dict(counts or {})


class InvalidTransitionError(WheelError):
    """Trade status change not allowed from the current status."""

    pass


class ChainIntegrityError(WheelError):
    """Trade chain data is malformed (multiple children or a cycle)."""

    pass


class ExternalUnavailableError(WheelError):
    """Price source unreachable, timed out, or returned no usable data."""

    pass
