import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse
from pydantic import ValidationError
from starlette.background import BackgroundTask

from app.api.deps import get_text_service
from app.core.errors import BadRequestError
from app.schemas import ErrorResponse, UploadData, UploadRequest, UploadResponse
from app.services.texts import TextService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["texts"])


@router.post(
    "/upload",
    response_model=UploadResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": UploadRequest.model_json_schema()}},
        }
    },
)
async def upload_text(
    request: Request,
    service: TextService = Depends(get_text_service),
) -> UploadResponse:
    # The body is JSON whatever Content-Type the client sends.
    try:
        payload = UploadRequest.model_validate_json(await request.body())
    except ValidationError as exc:
        logger.info("Rejected upload body: %s", exc.errors(include_input=False))
        raise BadRequestError() from exc

    result = await service.upload(payload.content)
    return UploadResponse(data=UploadData(url=result.url))


# Catch-all: must stay the last route registered on the app.
@router.get(
    "/{object_path:path}",
    name="download_text",
    response_class=StreamingResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def download_text(
    object_path: str,
    service: TextService = Depends(get_text_service),
) -> StreamingResponse:
    download = await service.download(object_path)
    return StreamingResponse(
        download.stored.iter_chunks(),
        media_type=download.info.content_type,
        headers={
            "Content-Length": str(download.info.size),
            "Content-Disposition": download.content_disposition,
        },
        background=BackgroundTask(download.stored.close),
    )
