from app.schemas.text import ErrorResponse, UploadData, UploadRequest, UploadResponse

__all__ = [
    "UploadRequest",
    "UploadData",
    "UploadResponse",
    "ErrorResponse",
]
