class FleetDomainError(Exception):
    """Base class for user-facing domain errors. Messages are localized (pt-PT)."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

class NotFoundError(FleetDomainError):
    """Raised when the referenced bus, route or user does not exist."""

    status_code = 404

class InvalidArgumentError(FleetDomainError):
    """Raised when a mutation request is missing a required field or breaks a business rule."""

    status_code = 400

class ConstraintViolationError(FleetDomainError):
    """Raised when an insert or update collides with a unique constraint."""

    status_code = 409

class IdentifierConflictError(ConstraintViolationError):
    """Raised when a generated bus NIA is already taken by another bus."""
