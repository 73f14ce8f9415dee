class ConsoleException(Exception):
    """Base exception for the enterprise console"""

    pass


class UnauthorizedException(ConsoleException):
    """Raised when the bearer token is missing, invalid or rejected by the platform"""

    pass


class NotFoundException(ConsoleException):
    """Raised when resource not found"""

    pass


class ForbiddenException(ConsoleException):
    """Raised when the enterprise role does not allow the operation"""

    pass


class ValidationException(ConsoleException):
    """Raised for client-side validation errors caught before any API call"""

    pass


class ApiRequestError(ConsoleException):
    """
    Raised when a platform API call fails.

    Network errors, non-2xx responses and `success: false` payloads all
    collapse into this one error. `status_code` is None and `network_error`
    is set when the platform could not be reached at all.
    """

    def __init__(self, message: str, status_code: int | None = None, network_error: bool = False):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.network_error = network_error
