"""Main FastAPI application."""
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from workout_planner_api import __version__
from workout_planner_api.api.library_routes import router as library_router
from workout_planner_api.api.program_routes import router as program_router
from workout_planner_api.api.schedule_routes import router as schedule_router
from workout_planner_api.config import settings
from workout_planner_api.services.storage import StorageError

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


configure_logging()

app = FastAPI(title="Workout Planner API", version=__version__)

# Configure CORS to allow requests from the UI
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError):
    logger.error(f"Storage failure on {request.url.path}: {exc}")
    return JSONResponse(status_code=503, content={"detail": "Storage unavailable"})


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    logger.warning(f"Invalid data on {request.url.path}: {exc}")
    detail = [{"loc": list(e["loc"]), "msg": e["msg"], "type": e["type"]} for e in exc.errors()]
    return JSONResponse(status_code=422, content={"detail": detail})


@app.get("/health")
def health():
    return {"status": "ok", "environment": settings.ENVIRONMENT, "storage": settings.STORAGE_BACKEND}


app.include_router(schedule_router)
app.include_router(library_router)
app.include_router(program_router)
