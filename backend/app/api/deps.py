from fastapi import Request

from app.services.texts import TextService


def get_text_service(request: Request) -> TextService:
    service: TextService | None = getattr(request.app.state, "text_service", None)
    if service is None:
        raise RuntimeError("TextService is not initialised; application lifespan has not run")
    return service
