from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.routing import Mount

from salonbook.config import get_settings
from salonbook.dependencies.services import get_api_client_cached

from salonbook.health import router as health_router
from salonbook.mcp_server import mcp
from salonbook.mock_data_view import router as mock_data_router
from salonbook.routes.bookings import router as bookings_router
from salonbook.routes.calendar import router as calendar_router
from salonbook.routes.directory import router as directory_router
from salonbook.routes.shifts import router as shifts_router
from salonbook.routes.slots import router as slots_router


def configure_logging() -> None:
    """Ensure application logs use the INFO level by default."""
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logging.basicConfig(
            level=logging.INFO,
            format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        )
    else:
        root_logger.setLevel(logging.INFO)


configure_logging()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    settings_snapshot = settings.model_dump(exclude={"api_token"})
    logger.info("Application settings on startup: %s", settings_snapshot)

    has_mcp = any(isinstance(r, Mount) and r.path == "/mcp" for r in app.routes)
    logger.debug("MCP mount present: %s", has_mcp)

    client = get_api_client_cached()
    logger.info("Application startup complete (mock data: %s).", settings.use_mock_data)

    try:
        yield
    finally:
        logger.info("Closing booking API client.")
        await client.close()
        logger.info("Application shutdown complete.")


settings = get_settings()
app = FastAPI(
    title=settings.app_name,
    lifespan=lifespan,
    redirect_slashes=False,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[str(origin).rstrip("/") for origin in settings.cors_origins],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(slots_router)
app.include_router(shifts_router)
app.include_router(calendar_router, prefix="/calendar")
app.include_router(bookings_router)
app.include_router(directory_router)
app.include_router(health_router)
app.include_router(mock_data_router)

# Streamable HTTP MCP server
app.mount("/mcp", mcp.streamable_http_app())
