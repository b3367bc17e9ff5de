import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config.settings import settings
from src.core.logging_config import setup_logging
from src.db.database import init_db
from src.routers import admin as admin_router
from src.routers import assessment as assessment_router
from src.routers import users as users_router

# Configure logging VERY early
setup_logging(settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Creating database tables if needed")
    init_db()
    yield
    logger.info("Shutting down employability assessment API")


app = FastAPI(title="Employability Assessment API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    logger.info(
        "Request handled",
        extra={
            "method": request.method,
            "path": request.url.path,
            "status": response.status_code,
            "duration_ms": round((time.perf_counter() - start) * 1000, 1),
        },
    )
    return response


# --- Include Routers ---
app.include_router(users_router.router, prefix="/api", tags=["users"])
app.include_router(assessment_router.router, prefix="/api", tags=["assessment"])
app.include_router(admin_router.router, prefix="/api", tags=["admin"])


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Reports invalid input as 400 with the first validation message as detail."""
    errors = exc.errors()
    message = errors[0].get("msg", "请求数据不完整") if errors else "请求数据不完整"
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]
    logger.info(f"Rejected invalid request to {request.url.path}: {message}")
    return JSONResponse(status_code=400, content={"detail": message})


@app.get("/health", tags=["Health Check"])
async def health():
    return {"status": "ok", "message": "Employability assessment API is running."}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=3000, reload=True)
