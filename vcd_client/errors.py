"""Exceptions raised by the vCloud Director clients."""

from __future__ import annotations


class VcloudDirectorError(Exception):
    """Base error for vCloud Director API failures.

    Attributes:
        status: HTTP status code of the failed response, if any.
        major_error_code: ``majorErrorCode`` from the vCloud error body.
        minor_error_code: ``minorErrorCode`` from the vCloud error body.
        vendor_specific_error_code: ``vendorSpecificErrorCode`` from the body.
    """

    def __init__(
        self,
        message: str,
        status: int | None = None,
        major_error_code: str | None = None,
        minor_error_code: str | None = None,
        vendor_specific_error_code: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.status = status
        self.major_error_code = major_error_code
        self.minor_error_code = minor_error_code
        self.vendor_specific_error_code = vendor_specific_error_code


class BadRequest(VcloudDirectorError):
    """400: the request was malformed."""


class Unauthorized(VcloudDirectorError):
    """401: missing or invalid credentials."""


class Forbidden(VcloudDirectorError):
    """403: the object does not exist or the user may not access it."""


class NotFound(VcloudDirectorError):
    """404: the resource path is unknown."""


class Conflict(VcloudDirectorError):
    """409: the object is busy or in a conflicting state."""


class ServiceError(VcloudDirectorError):
    """5xx: the API failed to process the request."""


class VcloudConnectionError(VcloudDirectorError, ConnectionError):
    """The API endpoint could not be reached."""


_STATUS_ERRORS = {
    400: BadRequest,
    401: Unauthorized,
    403: Forbidden,
    404: NotFound,
    409: Conflict,
}


def error_for_status(status: int) -> type[VcloudDirectorError]:
    """Return the exception class matching an HTTP status code.

    Args:
        status: HTTP status code.

    Returns:
        type[VcloudDirectorError]: Specific subclass, ``ServiceError`` for 5xx,
        otherwise the base class.
    """
    if status in _STATUS_ERRORS:
        return _STATUS_ERRORS[status]
    if 500 <= status < 600:
        return ServiceError
    return VcloudDirectorError
