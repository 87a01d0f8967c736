class NotFoundError(Exception):
    """Raised when a referenced entity does not exist."""
    pass


class ProductNotFoundError(NotFoundError):
    """Exception raised when the requested product doesn't exist."""
    pass


class UserNotFoundError(NotFoundError):
    """Exception raised when the requested user (or seller) doesn't exist."""
    pass


class InsufficientStockError(Exception):
    """Exception raised when there's not enough stock to fulfill a sale."""
    pass


class DuplicateError(Exception):
    """Raised when a unique field (product name, user email) is already taken."""
    pass


class InvalidCredentialsError(Exception):
    """Login failed: unknown email or wrong password."""
    pass


class InvalidReferenceError(ValueError):
    """A string could not be coerced into an entity identifier."""
    pass
