"""
deepscan.main – FastAPI application entry point.

Start the server:
    uvicorn deepscan.main:app --reload --port 8000
"""
from __future__ import annotations

import logging

from fastapi import FastAPI, File, Form, Request, UploadFile
from fastapi.responses import JSONResponse

from deepscan.config import Settings, load_settings
from deepscan.engine import ScoringEngine
from deepscan.errors import AnalysisError, MediaValidationError
from deepscan.models import AnalyzeResponse, ErrorResponse, MediaSubmission
from deepscan.utils.logger_config import setup_logger

logger = logging.getLogger(__name__)

GENERIC_ERROR_DETAIL = "Internal error"


def _json(model: AnalyzeResponse | ErrorResponse, status_code: int = 200) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=model.model_dump(mode="json", by_alias=True, exclude_none=True),
    )


def create_app(
    settings: Settings | None = None,
    engine: ScoringEngine | None = None,
) -> FastAPI:
    """
    Build the ASGI application.

    Args:
        settings  Service settings; loaded from the environment when omitted.
        engine    Scoring engine; built from *settings* when omitted.
    """
    settings = settings or load_settings()
    setup_logger("deepscan", settings.log_level)

    app = FastAPI(
        title="DeepScan – Content Authenticity API",
        version="1.0.0",
        description=(
            "Scores uploaded images and videos for signs of synthetic "
            "manipulation and returns a risk tier with a recommendation."
        ),
    )
    app.state.settings = settings
    app.state.engine = engine or ScoringEngine(settings)

    # -----------------------------------------------------------------------
    # Routes
    # -----------------------------------------------------------------------

    @app.get("/api/health")
    async def health() -> dict[str, str]:
        """Liveness probe: returns {"status": "ok"} when the server is up."""
        return {"status": "ok"}

    @app.post("/api/deepfake/analyze")
    async def analyze(
        request: Request,
        file: UploadFile | None = File(default=None),
        caption: str = Form(default=""),
    ) -> JSONResponse:
        """Score one uploaded image or video for manipulation signals."""
        engine: ScoringEngine = request.app.state.engine
        settings: Settings = request.app.state.settings

        try:
            submission = await _read_submission(file, caption, settings)
            report = await engine.analyze(submission)
        except MediaValidationError as exc:
            logger.info("Rejected upload: %s", exc.message)
            return _json(ErrorResponse(error=exc.message), exc.status_code)
        except Exception as exc:
            logger.exception("Analysis failed")
            detail = str(exc) if settings.expose_error_details else GENERIC_ERROR_DETAIL
            status_code = exc.status_code if isinstance(exc, AnalysisError) else 500
            return _json(ErrorResponse(error="Analysis failed", details=detail), status_code)

        return _json(AnalyzeResponse(analysis=report.analysis, debug=report.debug))

    return app


async def _read_submission(
    file: UploadFile | None, caption: str, settings: Settings
) -> MediaSubmission | None:
    if file is None:
        return None
    # Reject on the advertised size before buffering the whole upload.
    if file.size is not None and file.size > settings.max_upload_bytes:
        raise MediaValidationError("File size too large")

    content = await file.read()
    return MediaSubmission.from_bytes(
        content=content,
        filename=file.filename or "",
        content_type=file.content_type or "",
        caption=caption,
    )


app = create_app()
