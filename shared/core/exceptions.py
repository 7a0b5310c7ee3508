from shared.utils.app_status_code import AppStatusCode


class AppException(Exception):
    """Base for errors raised by the service layer and rendered by the exception handlers."""

    http_status = 400
    status_code = AppStatusCode.OPERATION_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AppException):
    """Required request-level input is missing or malformed."""

    http_status = 400
    status_code = AppStatusCode.REQUIRED_VALIDATION_ERROR


class NotFoundError(AppException):
    http_status = 404
    status_code = AppStatusCode.NOT_FOUND_ERROR


class BusinessRuleViolation(AppException):
    http_status = 400
    status_code = AppStatusCode.BUSINESS_RULE_VIOLATION


class InvalidQuantity(BusinessRuleViolation):
    """A quantity change would leave stock negative."""


class ConcurrencyConflictError(AppException):
    """Optimistic-lock retries were exhausted on a stock row."""

    http_status = 409
    status_code = AppStatusCode.CONCURRENCY_CONFLICT


class DuplicateEntryError(BusinessRuleViolation):
    """A tenant already owns a row with the same unique key."""

    status_code = AppStatusCode.DUPLICATE_ADD_ERROR
