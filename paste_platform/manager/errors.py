"""Entry service failures.

Each failure carries a stable `reason` tag and a user-facing `message`;
the HTTP layer maps them to a status code or an error-page redirect.
"""


class EntryError(ValueError):
    """Base class for recoverable entry service failures."""

    reason = "error"
    message = "Internal server error"

    def __init__(self, message=None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class EmptyContent(EntryError):
    reason = "empty_content"
    message = "Content cannot be empty"


class UrlTaken(EntryError):
    reason = "url_taken"
    message = "URL already exists. Please choose a different one."


class NotFound(EntryError):
    reason = "not_found"
    message = "Entry not found"


class Unauthorized(EntryError):
    reason = "unauthorized"
    message = "Invalid edit code"


class SaveFailed(EntryError):
    reason = "save_failed"
    message = "Failed to save entry"
