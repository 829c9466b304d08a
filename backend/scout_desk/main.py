import asyncio
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from scout_desk.api.deps import get_container
from scout_desk.api.v1.api import api_router
from scout_desk.core.config import get_settings
from scout_desk.core.logger import get_logger

logger = get_logger(__name__)
settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    container = app.dependency_overrides.get(get_container, get_container)()
    await asyncio.to_thread(container.scheduler.load_now)
    container.scheduler.start()
    logger.info("Background refresh every %ss", container.settings.refresh_interval_seconds)
    if container.settings.auth_secret == "change-me":
        logger.warning("SCOUT_AUTH_SECRET is not set; session tokens are signed with the default secret")
    yield
    await container.scheduler.stop()


app = FastAPI(title="Scout Desk Backend", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix=settings.api_prefix)


@app.get("/")
def root() -> dict:
    return {"service": "scout-desk-backend", "version": app.version}
