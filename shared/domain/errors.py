"""
Domain Error Taxonomy

Every failure a core operation can report is a DomainError subclass. The
top-level kinds map one-to-one onto client-facing categories:

- ValidationError: malformed or missing input
- NotFoundError: entity absent
- ForbiddenError: role or ownership mismatch
- ConflictError: state does not allow the request (stock, transitions, ...)
- ExternalServiceError: payment gateway failure
- InternalError: anything unexpected

Reason-specific subclasses (InsufficientStock, InvalidTransition, ...) keep
their parent's kind and add a stable ``code`` for API clients.
"""


class DomainError(Exception):
    """Base class for all reportable domain failures"""

    kind = 'internal'
    code = 'internal_error'
    default_message = 'Unexpected error'

    def __init__(self, message: str | None = None, **details):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> dict:
        payload = {'code': self.code, 'detail': self.message}
        if self.details:
            payload['context'] = {key: str(value) for key, value in self.details.items()}
        return payload


class ValidationError(DomainError):
    kind = 'validation'
    code = 'validation_error'
    default_message = 'Invalid input'


class NotFoundError(DomainError):
    kind = 'not_found'
    code = 'not_found'
    default_message = 'Not found'


class ForbiddenError(DomainError):
    kind = 'forbidden'
    code = 'forbidden'
    default_message = 'Access denied'


class ConflictError(DomainError):
    kind = 'conflict'
    code = 'conflict'
    default_message = 'Request conflicts with current state'


class ExternalServiceError(DomainError):
    kind = 'external'
    code = 'external_service_error'
    default_message = 'Payment gateway is unavailable'


class InternalError(DomainError):
    pass


# ===== Inventory =====

class AssetUnavailable(ConflictError):
    code = 'asset_unavailable'
    default_message = 'Asset is not available'


class InsufficientStock(ConflictError):
    code = 'insufficient_stock'
    default_message = 'Not enough stock for the requested quantity'


class ServiceInactive(ConflictError):
    code = 'service_inactive'
    default_message = 'Service is not active'


class OverlappingCapacityExceeded(ConflictError):
    code = 'overlapping_capacity_exceeded'
    default_message = 'Asset is already booked for the requested period'


# ===== Lifecycle =====

class InvalidTransition(ConflictError):
    code = 'invalid_transition'
    default_message = 'Current status does not allow this action'


# ===== Payments =====

class DuplicatePayment(ConflictError):
    code = 'duplicate_payment'
    default_message = 'A payment for this booking is already in progress'


class InvalidAmount(ValidationError):
    code = 'invalid_amount'
    default_message = 'Payment amount must be positive'
