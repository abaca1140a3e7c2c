# backend/app/main.py
import asyncio
from functools import lru_cache
from typing import Any, Set

from fastapi import Body, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import Settings, get_settings
from .gemini_client import AdventureGenerator, GeminiAdventureGenerator, generate
from .jobs.jobs import JobRegistry, get_registry
from .logging_config import get_metrics_snapshot, inc_metric, log, measure, set_metric
from .models import (
    AdventureRequest,
    AdventureResponse,
    ErrorResponse,
    JobAccepted,
    JobStatusResponse,
)
from .prompts import build_prompt

GENERATION_FAILED = "Failed to generate adventure content."
JOB_NOT_FOUND = "Job not found."
INVALID_BODY = "Request body is not valid JSON."

app = FastAPI(title="TTRPG Adventure Generator", version="1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# asyncio only keeps weak references to tasks; hold them until they finish.
_background_jobs: Set[asyncio.Task] = set()


@lru_cache
def _generator_for(settings: Settings) -> GeminiAdventureGenerator:
    return GeminiAdventureGenerator(settings)


def get_generator(settings: Settings = Depends(get_settings)) -> AdventureGenerator:
    return _generator_for(settings)


@app.exception_handler(Exception)
async def unhandled_error(request: Request, exc: Exception):
    log.error(
        "💥 Unhandled error on %s %s", request.method, request.url.path, exc_info=exc
    )
    return JSONResponse({"error": "Internal server error."}, status_code=500)


@app.exception_handler(RequestValidationError)
async def invalid_request(request: Request, exc: RequestValidationError):
    log.warning("⚠️ Rejected body on %s %s: %s", request.method, request.url.path, exc.errors())
    return JSONResponse({"error": INVALID_BODY}, status_code=400)


# ==========================================================
#                    GENERATION PIPELINE
# ==========================================================


async def run_generation_job(
    job_id: str,
    prompt: str,
    generator: AdventureGenerator,
    registry: JobRegistry,
) -> None:
    """
    Background half of an async submission. Owns `job_id` and records its
    terminal state exactly once; never raises.
    """
    try:
        with measure("generation"):
            text = await generate(generator, prompt)
    except Exception:
        log.exception("❌ Job %s failed while calling Gemini", job_id)
        registry.fail(job_id, GENERATION_FAILED)
        inc_metric("jobs_failed")
        return

    registry.complete(job_id, text)
    inc_metric("jobs_completed")
    log.info("✅ Job %s complete (%d chars)", job_id, len(text))


def _spawn(coro) -> asyncio.Task:
    task = asyncio.create_task(coro)
    _background_jobs.add(task)
    task.add_done_callback(_background_jobs.discard)
    return task


@app.post(
    "/generate-adventure",
    responses={
        200: {"model": AdventureResponse},
        202: {"model": JobAccepted},
        500: {"model": ErrorResponse},
    },
)
async def generate_adventure(
    payload: Any = Body(None),
    settings: Settings = Depends(get_settings),
    registry: JobRegistry = Depends(get_registry),
    generator: AdventureGenerator = Depends(get_generator),
):
    # Like express.json(): no body or a non-object body reads as no parameters.
    adventure = AdventureRequest.model_validate(payload if isinstance(payload, dict) else {})
    prompt = build_prompt(adventure, settings.prompt_style)

    if settings.mode == "sync":
        inc_metric("sync_requests")
        try:
            with measure("generation"):
                text = await generate(generator, prompt)
        except Exception:
            log.exception("❌ Error calling Gemini API")
            inc_metric("sync_failures")
            return JSONResponse({"error": GENERATION_FAILED}, status_code=500)
        return AdventureResponse(adventure_text=text).model_dump(by_alias=True)

    job_id = registry.create()
    inc_metric("jobs_submitted")
    log.info("🚀 Job %s accepted (system=%r, genre=%r)", job_id, adventure.system, adventure.genre)

    _spawn(run_generation_job(job_id, prompt, generator, registry))
    return JSONResponse(
        JobAccepted(job_id=job_id).model_dump(by_alias=True), status_code=202
    )


@app.get(
    "/status/{job_id}",
    response_model=JobStatusResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_job_status(job_id: str, registry: JobRegistry = Depends(get_registry)):
    job = registry.get(job_id)
    if job is None:
        return JSONResponse({"error": JOB_NOT_FOUND}, status_code=404)
    return JobStatusResponse(status=job.status, data=job.result)


# ==========================================================
#                     METRICS + HEALTH
# ==========================================================


@app.get("/")
async def root():
    return {"status": "ok", "message": "TTRPG adventure generator running"}


@app.get("/metrics")
async def metrics(registry: JobRegistry = Depends(get_registry)):
    set_metric("jobs_tracked", len(registry))
    return get_metrics_snapshot()


@app.get("/health")
async def health(settings: Settings = Depends(get_settings)):
    return {"status": "ok", "mode": settings.mode, "model": settings.model}


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run("backend.app.main:app", host=settings.host, port=settings.port)
