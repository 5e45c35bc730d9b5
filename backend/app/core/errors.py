from fastapi import status


class TextRelayError(Exception):
    """Base class for errors surfaced to clients as a ``{code, msg}`` envelope."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: int = 2
    default_message: str = "internal error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class BadRequestError(TextRelayError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = 1
    default_message = "Bad request"


class ContentTooLongError(TextRelayError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = 2

    def __init__(self, max_length: int) -> None:
        self.max_length = max_length
        super().__init__(f"content too long, max length is {max_length}")


class UploadFailedError(TextRelayError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = 2
    default_message = "failed to upload"


class ObjectUnavailableError(TextRelayError):
    status_code = status.HTTP_404_NOT_FOUND
    code = 2
    default_message = "failed to get object"


class ObjectStatError(TextRelayError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = 3
    default_message = "failed to get object stat"
