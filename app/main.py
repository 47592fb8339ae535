"""FastAPI application entrypoint. No business logic; only wiring, lifespan and middleware."""

from dotenv import load_dotenv

load_dotenv()

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.v1 import router as v1_router
from app.core.config import settings
from app.core.firebase import close_firebase, init_firebase
from app.services.identity import IdentityProvider
from app.services.session import SessionContext, log_identity_change

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build Firebase handles and the session context once per application instance."""
    handles = init_firebase(settings)
    session = SessionContext(IdentityProvider(settings, handles.app), handles.firestore)
    unsubscribe = session.subscribe(log_identity_change)
    app.state.firebase = handles
    app.state.session = session
    if not session.enabled:
        logger.warning(
            "Firebase Auth is not initialized; authentication features are disabled."
        )
    try:
        yield
    finally:
        unsubscribe()
        session.close()
        close_firebase(handles)


app = FastAPI(
    title="Bluefitt Connect API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.APP_ENV == "dev" else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(v1_router, prefix=settings.API_V1_PREFIX)


@app.get("/")
def root() -> dict[str, str]:
    """Root route; minimal payload for discovery."""
    return {"message": "Bluefitt Connect API"}
