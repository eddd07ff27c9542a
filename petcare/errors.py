class NotFoundError(Exception):
    """Raised when a referenced record does not exist or its id is malformed."""

    def __init__(self, message):
        super().__init__(message)
        self.message = message
