"""
Exceptions raised while building S3 version 4 signatures.

All of them derive from SigningError, itself a ValueError, so callers can
catch either the specific kind or everything at once.

"""

# Licensed under the MIT License:
# http://opensource.org/licenses/MIT


class SigningError(ValueError):
    """
    Base class for all signing failures.

    value -- the offending input, if any

    """

    def __init__(self, msg, value=None):
        super(SigningError, self).__init__(msg)
        self.value = value


class MalformedUrl(SigningError):
    """URL cannot be parsed or has no scheme/host."""


class InvalidDate(SigningError):
    """Explicit timestamp is not a datetime or a parsable date string."""


class InvalidExpiration(SigningError):
    """Presigned URL expiration is not an integer in 1..604800."""


class MissingRequiredHeader(SigningError):
    """A header the canonical request needs (host) cannot be derived."""
