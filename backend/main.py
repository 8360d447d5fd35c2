import json
import logging
from functools import lru_cache
from typing import Any, Optional

import sentry_sdk
from fastapi import FastAPI, Request, Response
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from sentry_sdk.integrations.fastapi import FastApiIntegration

from video_summary import __version__
from video_summary.config import (
    describe_active_models,
    get_pipeline_config,
    get_server_config,
)
from video_summary.gemini import API_KEY_HEADER
from video_summary.pipeline import PipelineError, UnexpectedError, VideoSummaryPipeline
from video_summary.pipeline.stages import build_default_stages
from video_summary.responses import error_payload, outcome_payload
from video_summary.schema import parse_analysis_request
from backend.cors import cors_headers

# Configure logging
logging.basicConfig(
    level=get_pipeline_config().log_level,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("api")


def _init_error_tracking() -> None:
    sentry_dsn = get_server_config().sentry_dsn
    if not sentry_dsn:
        logger.debug("SENTRY_DSN not set - error tracking disabled")
        return
    sentry_sdk.init(
        dsn=sentry_dsn,
        release=get_pipeline_config().build_id,
        integrations=[FastApiIntegration()],
        traces_sample_rate=0.0,
    )
    logger.info("Sentry error tracking initialized")


_init_error_tracking()

app = FastAPI(
    title="Video Summary API",
    description="Structured creative breakdowns of video ads",
    version=__version__,
)


@lru_cache(maxsize=1)
def get_pipeline() -> VideoSummaryPipeline:
    """Shared pipeline; per-request state lives in SummaryContext."""
    return VideoSummaryPipeline(stages=build_default_stages())


async def _read_json_body(request: Request) -> Any:
    """Decoded body, or {} when it is empty or not JSON."""
    raw = await request.body()
    if not raw:
        return {}
    try:
        return json.loads(raw)
    except ValueError:
        return {}


def _client_api_key(request: Request) -> Optional[str]:
    if not get_server_config().allow_client_api_key:
        return None
    return request.headers.get(API_KEY_HEADER) or None


# --- Endpoints ---

@app.get("/api/status")
async def get_status():
    """System health check (no upstream calls)"""
    return {
        "status": "online",
        "version": __version__,
        "build_id": get_pipeline_config().build_id,
        **describe_active_models(),
    }


@app.options("/api/video-summary")
async def video_summary_preflight(request: Request):
    return Response(status_code=204, headers=cors_headers(request.headers.get("origin")))


@app.post("/api/video-summary")
async def video_summary(request: Request):
    """Summarise one ad URL into the structured breakdown"""
    headers = cors_headers(request.headers.get("origin"))
    try:
        body = await _read_json_body(request)
        summary_request = parse_analysis_request(body)
        pipeline = get_pipeline()
        outcome = await run_in_threadpool(
            pipeline.process, summary_request, _client_api_key(request)
        )
    except PipelineError as e:
        if isinstance(e, UnexpectedError):
            sentry_sdk.capture_exception(e)
        return JSONResponse(error_payload(e), status_code=e.status_code, headers=headers)
    except Exception as e:
        logger.exception(f"Video summary failed: {e}")
        sentry_sdk.capture_exception(e)
        error = UnexpectedError(str(e) or type(e).__name__, cause=e)
        return JSONResponse(error_payload(error), status_code=error.status_code, headers=headers)

    return JSONResponse(outcome_payload(outcome), status_code=200, headers=headers)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
