"""FastAPI application exposing README generation over HTTP."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Callable, List, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response, StreamingResponse
from pydantic import BaseModel, ConfigDict, Field

from ..config import GitMeConfig, load_config
from ..errors import GitMeError, InvalidUrlError, ProviderError, RepositoryNotFoundError
from ..events import stream_events
from ..logging import get_logger
from ..models import FileData, RepoInfo, RequestMetadata
from ..orchestrator import Orchestrator
from ..progress import ProgressLog

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}

_STATUS_BY_ERROR: tuple[tuple[type[GitMeError], int], ...] = (
    (InvalidUrlError, 400),
    (RepositoryNotFoundError, 404),
    (ProviderError, 502),
)

logger = get_logger("service")


class MetadataPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    description: Optional[str] = None
    features: Optional[str] = None
    license: Optional[str] = None
    additional_context: Optional[str] = Field(default=None, alias="additionalContext")

    def to_metadata(self) -> RequestMetadata:
        return RequestMetadata(
            description=self.description,
            features=self.features,
            license=self.license,
            additional_context=self.additional_context,
        )


class FilePayload(BaseModel):
    path: str
    content: str


class RepoInfoPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    description: Optional[str] = None
    language: Optional[str] = None
    stars: int = 0
    forks: int = 0
    default_branch: Optional[str] = Field(default=None, alias="defaultBranch")

    def to_repo_info(self) -> RepoInfo:
        return RepoInfo(
            name=self.name,
            description=self.description or "",
            language=self.language or "Unknown",
            stars=self.stars,
            forks=self.forks,
            default_branch=self.default_branch,
        )


class GenerateFromFilesRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    files: List[FilePayload]
    repo_info: RepoInfoPayload = Field(alias="repoInfo")
    metadata: Optional[MetadataPayload] = None


class GenerateFromUrlRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    repo_url: str = Field(alias="repoUrl", min_length=1)
    metadata: Optional[MetadataPayload] = None


class ReadmeResponse(BaseModel):
    readme: str


class HealthResponse(BaseModel):
    status: str


def status_for_error(exc: GitMeError) -> int:
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status
    return 500


def _describe_validation_error(exc: RequestValidationError) -> str:
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        message = error.get("msg", "invalid value")
        problems.append(f"{location}: {message}" if location else message)
    return "Invalid request body: " + "; ".join(problems)


def create_app(
    orchestrator_factory: Callable[[], Orchestrator] | None = None,
    *,
    config: GitMeConfig | None = None,
) -> FastAPI:
    """Create the FastAPI application exposing the README endpoints."""

    if orchestrator_factory is None:
        settings = config or load_config(Path.cwd())

        def _default_factory() -> Orchestrator:
            return Orchestrator(settings)

        factory: Callable[[], Orchestrator] = _default_factory
    else:
        factory = orchestrator_factory
    app = FastAPI(title="GitMe README Service", version="1.0.0")

    async def get_orchestrator() -> Orchestrator:
        # Fresh orchestrator per request; nothing is shared across requests.
        return factory()

    @app.middleware("http")
    async def cors_headers(request: Request, call_next: Callable[[Request], Any]) -> Response:
        if request.method == "OPTIONS":
            return Response(status_code=200, headers=CORS_HEADERS)
        response = await call_next(request)
        response.headers.update(CORS_HEADERS)
        return response

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/generate-readme-from-files", response_model=ReadmeResponse)
    async def generate_from_files(
        payload: GenerateFromFilesRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> ReadmeResponse:
        files = [FileData(path=item.path, content=item.content) for item in payload.files]
        repo_info = payload.repo_info.to_repo_info()
        metadata = payload.metadata.to_metadata() if payload.metadata else None
        logger.info("Processing %d files for %s", len(files), repo_info.name)

        def _run() -> str:
            return orchestrator.generate_from_files(files, repo_info, metadata, ProgressLog())

        loop = asyncio.get_running_loop()
        readme = await loop.run_in_executor(None, _run)
        return ReadmeResponse(readme=readme)

    @app.post("/generate-readme")
    async def generate_from_url(
        payload: GenerateFromUrlRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> StreamingResponse:
        metadata = payload.metadata.to_metadata() if payload.metadata else None

        def _job(progress: ProgressLog) -> str:
            return orchestrator.generate_from_url(payload.repo_url, metadata, progress)

        return StreamingResponse(
            stream_events(_job),
            media_type="text/event-stream",
            headers={"Cache-Control": "no-cache", "Connection": "keep-alive"},
        )

    @app.exception_handler(GitMeError)
    async def pipeline_error_handler(_: Request, exc: GitMeError) -> JSONResponse:
        logger.warning("Request failed: %s", exc)
        return JSONResponse(status_code=status_for_error(exc), content={"error": str(exc)})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"error": _describe_validation_error(exc)})

    @app.exception_handler(Exception)
    async def unexpected_error_handler(_: Request, exc: Exception) -> JSONResponse:
        # Runs outside the http middleware stack, so CORS headers are set here.
        logger.exception("Unexpected failure while handling request")
        return JSONResponse(
            status_code=500,
            content={"error": str(exc) or "Unknown error"},
            headers=CORS_HEADERS,
        )

    return app


def run_service(
    host: str = "0.0.0.0", port: int = 8000, *, config: GitMeConfig | None = None
) -> None:  # pragma: no cover - integration path
    import uvicorn

    app = create_app(config=config)
    uvicorn.run(app, host=host, port=port)


__all__ = [
    "CORS_HEADERS",
    "GenerateFromFilesRequest",
    "GenerateFromUrlRequest",
    "create_app",
    "run_service",
    "status_for_error",
]
