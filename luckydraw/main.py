"""Lucky Draw Web Application."""
import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from luckydraw.core.config import settings
from luckydraw.core.database import create_db_and_tables
from luckydraw.core.errors import LuckyDrawError
from luckydraw.routes import checkins, draw, participants, prizes, winners

# Configure logging
log_dir = Path.home() / ".logs" / "luckydraw"
log_dir.mkdir(parents=True, exist_ok=True)
log_file = log_dir / "latest.log"

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    filename=str(log_file),
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown lifecycle."""
    # Startup
    logger.info("Starting Lucky Draw application")
    create_db_and_tables()
    yield
    # Shutdown
    logger.info("Lucky Draw application shut down")


app = FastAPI(
    title=settings.app_name,
    description="Event check-in with an automatic lucky draw and operator-run prize draws",
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS for the kiosk and admin front ends
origins = (
    ["*"]
    if settings.allowed_origins == "*"
    else [o.strip() for o in settings.allowed_origins.split(",")]
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(participants.router)
app.include_router(checkins.router)
app.include_router(prizes.router)
app.include_router(draw.router)
app.include_router(winners.router)


@app.exception_handler(LuckyDrawError)
async def lucky_draw_error_handler(request: Request, exc: LuckyDrawError):
    """Render typed service errors as JSON with their category's status code."""
    if exc.status_code >= 500:
        logger.error(f"{exc.code} on {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.code},
    )


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "app": settings.app_name}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port)
