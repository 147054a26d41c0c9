import inspect
import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request, HTTPException
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles
from openai import AsyncOpenAI

from dal.face_dal import FaceDAL
from routes.face_route import router as face_router
from routes.realtime_ws import router as realtime_router
from routes.session_route import router as session_router
from services.realtime.audience_config import AudienceConfig
from services.realtime.audience_scheduler import AudienceScheduler
from services.realtime.response_generator import ChatResponseGenerator
from services.realtime.room_hub import RoomHub
from services.realtime.session_store import SessionRegistry
from utils.database_init import AsyncDatabaseInitializer

BASE_DIR = Path(__file__).resolve().parent
PUBLIC_DIR = BASE_DIR / "public"

from dotenv import load_dotenv

load_dotenv()  # Load environment variables from .env file if present

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
LOGGER = logging.getLogger(__name__)


def _build_openai_client():
    """Return an AsyncOpenAI client, or None so chat degrades to fallback lines."""
    if not os.getenv("OPENAI_API_KEY"):
        LOGGER.warning("OPENAI_API_KEY is not set; synthetic chat will use fallback lines")
        return None
    try:
        return AsyncOpenAI()
    except Exception as exc:
        raise RuntimeError("Failed to initialize OpenAI Async client") from exc


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan manager to initialize:
      - the SQLite face gallery (at DATABASE_DIR/faces.db)
      - the OpenAI async client
      - the session registry, room hub, and audience scheduler
    and attach them to `app.state`.
    """
    db_initializer = AsyncDatabaseInitializer()
    await db_initializer.ensure_database()
    app.state.db_initializer = db_initializer

    config = AudienceConfig.from_env()
    app.state.audience_config = config
    app.state.openai_client = _build_openai_client()

    app.state.session_registry = SessionRegistry()
    app.state.room_hub = RoomHub()
    app.state.response_generator = ChatResponseGenerator(app.state.openai_client, config)
    app.state.audience_scheduler = AudienceScheduler(
        app.state.session_registry,
        app.state.room_hub,
        app.state.response_generator,
        config=config,
        gallery_loader=FaceDAL(db_initializer).list_faces,
    )

    try:
        yield
    finally:
        await app.state.audience_scheduler.close()

        # Gracefully close the OpenAI client if it exposes a close/aclose method.
        client = getattr(app.state, "openai_client", None)
        if client is not None:
            aclose = getattr(client, "aclose", None) or getattr(client, "close", None)
            if aclose is not None:
                try:
                    if inspect.iscoroutinefunction(aclose):
                        await aclose()
                    else:
                        result = aclose()
                        if inspect.isawaitable(result):
                            await result
                except Exception:
                    LOGGER.debug("Ignoring error while closing the OpenAI client", exc_info=True)


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application instance.
    """
    app = FastAPI(lifespan=lifespan)

    # Serve static assets from the public directory, if it exists.
    if PUBLIC_DIR.exists():
        app.mount("/public", StaticFiles(directory=PUBLIC_DIR), name="public")

    @app.get("/", include_in_schema=False)
    async def serve_index():
        """
        Serve the frontend index page from the public directory.
        """
        index_path = PUBLIC_DIR / "index.html"
        if not index_path.exists():
            raise HTTPException(status_code=404, detail="Frontend not found")
        return FileResponse(index_path)

    @app.get("/health")
    async def health(request: Request):
        """
        Simple health check that reports the gallery store, OpenAI client, and live streams.
        """
        state = request.app.state
        has_db = hasattr(state, "db_initializer")
        has_openai = getattr(state, "openai_client", None) is not None
        registry = getattr(state, "session_registry", None)
        active = len(registry.list()) if registry is not None else 0
        return {"ok": True, "db_initialized": has_db, "openai_available": has_openai, "active_streams": active}

    # Register application routers
    app.include_router(session_router)
    app.include_router(face_router)
    app.include_router(realtime_router)

    return app


app = create_app()
