"""Domain errors raised by shoplab services.

API routes translate these into HTTP client errors.
"""


class ShopError(Exception):
    """Base class for shoplab domain errors."""


class ValidationError(ShopError, ValueError):
    """A required field is missing or empty."""


class DuplicateNameError(ShopError, ValueError):
    """A member with the same name already exists."""

    def __init__(self, name: str):
        super().__init__(f"Member already exists: {name}")
        self.name = name


class NotFoundError(ShopError, LookupError):
    """No record with the requested identifier."""

    def __init__(self, kind: str, record_id: int):
        super().__init__(f"{kind} not found: {record_id}")
        self.kind = kind
        self.record_id = record_id


class NotEnoughStockError(ShopError, ValueError):
    """Ordering more than the item's stock."""


class OrderStateError(ShopError, ValueError):
    """Order cannot make the requested status transition."""
