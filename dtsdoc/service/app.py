"""FastAPI application exposing the flattening transform over HTTP."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from fastapi import Body, Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..config import DtsDocConfig, TransformConfig
from ..loader import load_project
from ..orchestrator import BuildOutcome, Orchestrator


class TransformResponse(BaseModel):
    pages: Dict[str, Any]
    issues: List[str] = []


class HealthResponse(BaseModel):
    status: str


def _default_orchestrator() -> Orchestrator:
    return Orchestrator()


def create_app(
    orchestrator_factory: Callable[[], Orchestrator] = _default_orchestrator,
) -> FastAPI:
    """Create the FastAPI application exposing dtsdoc operations."""

    app = FastAPI(title="dtsdoc service", version="1.0.0")

    async def get_orchestrator() -> Orchestrator:
        # A fresh orchestrator per request keeps runs independent.
        return orchestrator_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/transform", response_model=TransformResponse)
    async def transform(
        project: Dict[str, Any] = Body(...),
        namespace_prefix: Optional[str] = None,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> TransformResponse:
        transform_config = TransformConfig()
        if namespace_prefix is not None:
            transform_config.namespace_prefix = namespace_prefix

        def _run() -> BuildOutcome:
            config = DtsDocConfig(root=Path.cwd(), transform=transform_config)
            return orchestrator.run_project(load_project(project), config=config, write=False)

        loop = asyncio.get_running_loop()
        outcome = await loop.run_in_executor(None, _run)
        return TransformResponse(pages=outcome.payload, issues=outcome.issues)

    @app.exception_handler(RuntimeError)
    async def runtime_error_handler(
        _: Any, exc: RuntimeError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(
    host: str = "127.0.0.1", port: int = 8000
) -> None:  # pragma: no cover - integration path
    import uvicorn

    uvicorn.run(create_app(), host=host, port=port)
