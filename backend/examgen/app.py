# backend/examgen/app.py

import os, logging
from typing import List, Optional
from fastapi import FastAPI, Header, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.middleware.base import BaseHTTPMiddleware

from examgen.core.errors import (
    AllModelsFailedError,
    MissingCredentialError,
    ResponseTooLargeError,
)
from examgen.core.exam_generator import CallbackObserver, ExamGenerator
from examgen.core.model_invoker import MODEL_CATALOG, ModelInvoker
from examgen.core.schemas import ExamConfig, GenerateExamResponse, ModelInfo
from examgen.core.settings import GenerationContext

# ------------------------------------------------------------
# Setup
# ------------------------------------------------------------
logging.basicConfig(level=os.getenv("EXAMGEN_LOG_LEVEL", "INFO").upper())
logger = logging.getLogger("examgen.app")

app = FastAPI(title="Exam Generation API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# Middleware to log requests (size only: bodies carry whole reference files)
class LogRequestMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        try:
            body = await request.body()
            logger.info(f"Incoming {request.method} {request.url.path} bytes={len(body)}")
        except Exception:
            logger.warning("Could not read request body")
        return await call_next(request)

app.add_middleware(LogRequestMiddleware)


def build_invoker(context: GenerationContext) -> ModelInvoker:
    return ModelInvoker(context)


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"status": "error", "message": message}, status_code=status_code)

# ------------------------------------------------------------
# Exception handlers
# ------------------------------------------------------------
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.error(f"Validation error: {exc.errors()}")
    return JSONResponse(
        status_code=422,
        content={
            "status": "error",
            "detail": exc.errors(),
        },
    )

@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"status": "error", "message": str(exc)},
    )

# ------------------------------------------------------------
# Routes
# ------------------------------------------------------------
@app.get("/models", response_model=List[ModelInfo])
def list_models():
    return MODEL_CATALOG

@app.post("/generate_exam", response_model=GenerateExamResponse)
async def generate_exam_route(
    req: ExamConfig,
    x_api_key: Optional[str] = Header(default=None),
    x_preferred_model: Optional[str] = Header(default=None),
):
    context = GenerationContext.from_env(session_api_key=x_api_key, preferred_model=x_preferred_model)
    generator = ExamGenerator(build_invoker(context))
    progress: List[str] = []

    try:
        exam = await generator.generate(req, CallbackObserver(progress.append))
    except MissingCredentialError as e:
        logger.error(f"MissingCredentialError: {e}")
        return _error(str(e), 401)
    except ResponseTooLargeError as e:
        logger.error(f"ResponseTooLargeError: {e}")
        return _error(str(e), 422)
    except AllModelsFailedError as e:
        logger.error(f"AllModelsFailedError after {len(e.attempts)} attempt(s): {e}")
        return _error(str(e), 502)
    except Exception as e:
        logger.error("Exception during generate_exam", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Generation failed: {e}")

    logger.info(f"Exam generated for level={req.level} grade={req.grade_level} state={generator.state.value}")
    return {"status": "ok", "progress": progress, "exam": exam}

@app.get("/healthz")
def healthz():
    return {"ok": True}
