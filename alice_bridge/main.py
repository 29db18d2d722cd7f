import asyncio
import gc
import logging
import resource
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request
from pydantic import ValidationError

from alice_bridge.config import Settings
from alice_bridge.dialog import INVALID_REQUEST, DialogService
from alice_bridge.llm_client import build_client
from alice_bridge.models import AliceRequest, AliceResponse, HealthResponse
from alice_bridge.session_manager import SessionStore, clean_old_sessions

logger = logging.getLogger(__name__)


def memory_snapshot() -> dict:
    usage = resource.getrusage(resource.RUSAGE_SELF)
    return {"max_rss_kb": usage.ru_maxrss, "gc_objects": len(gc.get_objects())}


def create_app(
    settings: Settings,
    llm_client=None,
    store: Optional[SessionStore] = None,
) -> FastAPI:
    profile = settings.profile
    if store is None:
        store = SessionStore(ttl_seconds=settings.session_ttl, max_history=profile.max_history)
    if llm_client is None:
        llm_client = build_client(settings)
    dialog = DialogService(profile, store, llm_client)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        cleaner_task = asyncio.create_task(clean_old_sessions(store, settings.sweep_interval))
        logger.info("🧠 Model: %s (%s)", settings.model, profile.name)
        try:
            yield
        finally:
            cleaner_task.cancel()
            try:
                await cleaner_task
            except asyncio.CancelledError:
                pass
            await llm_client.aclose()
            logger.info("Server stopped gracefully.")

    app = FastAPI(title=f"Alice × {profile.display_name}", version="1.0.0", lifespan=lifespan)
    app.state.store = store
    app.state.dialog = dialog

    @app.post("/alice", response_model=AliceResponse)
    async def alice(request: Request):
        try:
            payload = await request.json()
            req = AliceRequest.model_validate(payload)
        except (ValueError, ValidationError):
            logger.warning("Malformed /alice request body")
            return AliceResponse.say(INVALID_REQUEST)
        return await dialog.handle(req)

    @app.get("/health", response_model=HealthResponse)
    async def health():
        return HealthResponse(
            status="ok",
            time=datetime.now(timezone.utc).isoformat(),
            memory=memory_snapshot(),
            sessions=len(store),
            model=settings.model,
            provider=profile.name,
        )

    return app
