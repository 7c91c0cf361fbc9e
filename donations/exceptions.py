"""Domain errors raised by services and rendered by the API exception handler."""


class DonationError(Exception):
    """Base class for expected, user-facing failures."""

    status_code = 400
    default_message = "Request could not be processed"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationFailed(DonationError):
    status_code = 400
    default_message = "Invalid request"


class DuplicateClaim(ValidationFailed):
    default_message = "Family has already claimed this donation"


class NotFound(DonationError):
    status_code = 404
    default_message = "Not found"
