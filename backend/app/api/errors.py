"""Translate errors into the ``{code, msg, data}`` response envelope."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.core.errors import TextRelayError
from app.schemas import ErrorResponse


def error_response(status_code: int, code: int, message: str) -> JSONResponse:
    body = ErrorResponse(code=code, msg=message)
    return JSONResponse(status_code=status_code, content=body.model_dump())


async def text_relay_exception_handler(request: Request, exc: TextRelayError) -> JSONResponse:
    return error_response(exc.status_code, exc.code, exc.message)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(TextRelayError, text_relay_exception_handler)
