class StorefrontError(Exception):
    """Base class for storefront client errors"""


class APIError(StorefrontError):
    """
    Raised when the backend answers with a non-2xx status or cannot be
    reached at all (status_code is None in that case).
    """
    def __init__(self, status_code, message, errors=None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.errors = errors or {}

    @property
    def is_not_found(self):
        return self.status_code == 404

    def __str__(self):
        if self.status_code is None:
            return self.message
        return f"{self.status_code}: {self.message}"


class FormError(StorefrontError):
    """Client-side validation failed; errors maps field name to message"""
    def __init__(self, errors):
        self.errors = errors
        super().__init__(self.message)

    @property
    def message(self):
        """The first error, as shown to the user"""
        return next(iter(self.errors.values()), "Invalid input")
