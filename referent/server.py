"""HTTP API consumed by the article UI."""

import logging
from dataclasses import asdict
from typing import Annotated

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, StrictStr, field_validator

from .config import Settings, get_settings
from .errors import ReferentError
from .images import generate_image
from .process import (
    MERGEABLE_ACTIONS,
    ActionKind,
    ActionRequest,
    CompletionClient,
    CompletionResult,
    DispatchOptions,
    run_action,
)
from .sources import parse_url

logger = logging.getLogger(__name__)

RequiredStr = Annotated[StrictStr, Field(min_length=1)]


class ParseInput(BaseModel):
    url: RequiredStr


class ProcessInput(ActionRequest):
    """Action request limited to the actions served by /api/ai-process."""

    @field_validator("action")
    @classmethod
    def check_action(cls, value: ActionKind) -> ActionKind:
        if value not in MERGEABLE_ACTIONS:
            raise ValueError(f"unsupported action {value.value!r}")
        return value


class TextInput(BaseModel):
    text: RequiredStr


class ImageInput(BaseModel):
    prompt: RequiredStr


def _settings(request: Request) -> Settings:
    return request.app.state.settings or get_settings()


def get_completion_client(settings: Annotated[Settings, Depends(_settings)]) -> CompletionClient:
    return CompletionClient(settings)


def _dispatch_options(settings: Settings) -> DispatchOptions:
    return DispatchOptions(
        language=settings.target_language, chunk_threshold=settings.chunk_threshold
    )


def _completion_payload(result: CompletionResult) -> dict:
    return {"model": result.model, "usage": asdict(result.usage), "chunks": result.chunks}


def _validation_message(exc: RequestValidationError) -> str:
    """First validation problem as a short sentence."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    loc = [str(part) for part in first.get("loc", ()) if part != "body"]
    field = loc[-1] if loc else "body"
    if first.get("type") == "missing":
        return f"{field.capitalize()} is required"
    return f"Invalid {field}: {first.get('msg', 'invalid value')}"


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI application."""
    app = FastAPI(title="Referent", description="Parse articles and process them with AI.")
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={"error": _validation_message(exc), "category": "validation"},
        )

    @app.exception_handler(ReferentError)
    async def referent_error_handler(request: Request, exc: ReferentError) -> JSONResponse:
        logger.error("%s %s failed [%s]: %s", request.method, request.url.path, exc.category, exc)
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.to_payload(include_details=_settings(request).is_development),
        )

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "%s %s failed unexpectedly", request.method, request.url.path, exc_info=exc
        )
        error = ReferentError("Internal server error", details={"exception": repr(exc)})
        return JSONResponse(
            status_code=error.status_code,
            content=error.to_payload(include_details=_settings(request).is_development),
        )

    @app.get("/api/health")
    def health() -> dict:
        return {"status": "ok"}

    @app.post("/api/parse")
    def parse(data: ParseInput, settings: Annotated[Settings, Depends(_settings)]) -> dict:
        article = parse_url(data.url.strip(), timeout=settings.fetch_timeout)
        return article.to_dict()

    @app.post("/api/ai-process")
    def ai_process(
        data: ProcessInput,
        client: Annotated[CompletionClient, Depends(get_completion_client)],
        settings: Annotated[Settings, Depends(_settings)],
    ) -> dict:
        result = run_action(client, data.action, data.text, _dispatch_options(settings))
        return {"result": result.text, "action": data.action.value, **_completion_payload(result)}

    @app.post("/api/translate")
    def translate(
        data: TextInput,
        client: Annotated[CompletionClient, Depends(get_completion_client)],
        settings: Annotated[Settings, Depends(_settings)],
    ) -> dict:
        result = run_action(client, ActionKind.TRANSLATE, data.text, _dispatch_options(settings))
        return {"translation": result.text, **_completion_payload(result)}

    @app.post("/api/generate-image-prompt")
    def generate_image_prompt(
        data: TextInput,
        client: Annotated[CompletionClient, Depends(get_completion_client)],
        settings: Annotated[Settings, Depends(_settings)],
    ) -> dict:
        result = run_action(client, ActionKind.IMAGE_PROMPT, data.text, _dispatch_options(settings))
        return {"prompt": result.text.strip(), **_completion_payload(result)}

    @app.post("/api/generate-image")
    def generate_image_route(
        data: ImageInput,
        settings: Annotated[Settings, Depends(_settings)],
    ) -> dict:
        image = generate_image(data.prompt, settings=settings)
        return {"image": image.data_url(), "mimeType": image.content_type, "model": image.model}

    return app


app = create_app()
