"""Domain errors raised by the pack calculator."""


class DomainError(Exception):
    """Base class for every domain error."""

    default_message = "domain error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message if message is not None else self.default_message)


class InvalidPackSizeError(DomainError, ValueError):
    default_message = "pack size must be greater than zero"


class InvalidPackNameError(DomainError, ValueError):
    default_message = "pack name cannot be empty"


class PackNotFoundError(DomainError, LookupError):
    default_message = "pack not found"


class PackAlreadyExistsError(DomainError):
    default_message = "pack already exists"


class InvalidOrderQuantityError(DomainError, ValueError):
    default_message = "order quantity must be greater than zero"


class EmptyPackSizesError(DomainError, ValueError):
    default_message = "pack sizes cannot be empty"


class CalculationFailedError(DomainError):
    default_message = "unable to calculate pack distribution"


class NoValidPacksError(DomainError):
    default_message = "no valid pack configurations available"


class OrderTooLargeError(DomainError, ValueError):
    default_message = "order quantity exceeds maximum limit"