"""
FastAPI Meeting Recorder API

RESTful API that transcribes meeting audio and generates structured minutes.

Author: AI Assistant
Date: 2025-11-18
"""

import sys
import uuid
import logging
import time
from contextlib import asynccontextmanager
from contextvars import ContextVar
from typing import Optional

import dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from openai import OpenAI

from api.audio.models import ErrorResponse
from api.audio.routes import router as meeting_router
from api.config import Config
from api.errors import ConfigurationError, MeetingServiceError, ValidationError
from pipelines.meeting_pipeline import MeetingPipeline

logger = logging.getLogger(__name__)

request_id_var: ContextVar[str] = ContextVar("request_id", default="-")

ENDPOINTS = (
    ("GET ", "/health", "Health check"),
    ("POST", "/transcribe", "Transcrever áudio"),
    ("POST", "/generate-minutes", "Gerar ata"),
    ("POST", "/process-meeting", "Processar tudo"),
)


# =============================================================================
# LOGGING
# =============================================================================

class RequestIdFilter(logging.Filter):
    """Attach the current request ID to every log record"""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get()
        return True


def setup_logging(level: str = "INFO") -> None:
    handler = logging.StreamHandler()
    handler.addFilter(RequestIdFilter())
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] %(message)s",
        handlers=[handler],
        force=True,
    )


# =============================================================================
# LIFESPAN EVENTS
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    config: Config = app.state.config

    # Startup
    config.ensure_directories()
    logger.info("=" * 60)
    logger.info(f"🚀 Backend rodando em http://{config.api_host}:{config.api_port}")
    logger.info(f"📁 Upload directory: {config.upload_dir}")
    logger.info("✅ OpenAI configurado")
    logger.info("=" * 60)
    logger.info("Endpoints disponíveis:")
    for method, path, description in ENDPOINTS:
        logger.info(f"  {method} {path:<20} - {description}")

    yield

    # Shutdown
    logger.info("🛑 Shutting down API")


# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================

async def meeting_error_handler(request: Request, exc: MeetingServiceError):
    """Translate service errors into `{error, details, code}` bodies"""
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=exc.summary or exc.message,
            details=exc.message,
            code=exc.code,
        ).model_dump(),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies are input errors, reported as 400"""
    details = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg', '')}"
        for err in exc.errors()
    )
    return JSONResponse(
        status_code=ValidationError.status_code,
        content=ErrorResponse(
            error="Requisição inválida",
            details=details,
            code=ValidationError.code,
        ).model_dump(),
    )


# =============================================================================
# FASTAPI APP
# =============================================================================

def create_app(config: Config, client: Optional[OpenAI] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        config: Loaded configuration
        client: Provider client; built from ``config`` when omitted
    """
    if client is None:
        client = OpenAI(api_key=config.openai_api_key, base_url=config.openai_base_url)

    app = FastAPI(
        title="Meeting Recorder API",
        description="Transcribes meeting audio and generates structured minutes",
        version=config.api_version,
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.meeting_pipeline = MeetingPipeline.from_config(config, client)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(config.cors_allow_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def add_request_id_and_logging(request: Request, call_next):
        """Add request ID and log requests"""
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id
        token = request_id_var.set(request_id)
        start_time = time.time()

        try:
            response = await call_next(request)
            processing_time = time.time() - start_time

            logger.info(
                f"{request.method} {request.url.path} - {response.status_code} - {processing_time:.3f}s"
            )

            response.headers["X-Request-ID"] = request_id
            response.headers["X-Processing-Time"] = f"{processing_time:.3f}"
            return response
        finally:
            request_id_var.reset(token)

    app.add_exception_handler(MeetingServiceError, meeting_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.include_router(meeting_router)

    return app


# =============================================================================
# ENTRY POINT
# =============================================================================

def main() -> None:
    dotenv.load_dotenv()
    setup_logging()

    try:
        config = Config.from_env()
    except ConfigurationError as exc:
        logger.error(f"❌ ERRO: {exc}")
        logger.error("👉 Crie arquivo .env com: OPENAI_API_KEY=sk-...")
        sys.exit(1)

    logging.getLogger().setLevel(config.log_level)

    import uvicorn

    uvicorn.run(create_app(config), host=config.api_host, port=config.api_port, log_level="info")


if __name__ == "__main__":
    main()
