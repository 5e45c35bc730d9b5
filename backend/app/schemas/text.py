from typing import Any

from pydantic import BaseModel, Field


class UploadRequest(BaseModel):
    content: str = Field(..., min_length=1)


class UploadData(BaseModel):
    url: str


class UploadResponse(BaseModel):
    code: int = 0
    msg: str = ""
    data: UploadData


class ErrorResponse(BaseModel):
    code: int
    msg: str
    data: dict[str, Any] = Field(default_factory=dict)
