from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from peerlink.config import get_settings
from peerlink.domain.retention import NotificationRetentionPolicy
from peerlink.infrastructure.change_feed import notification_change_feed
from peerlink.infrastructure.database import SessionLocal, engine, initialize_database
from peerlink.infrastructure.expiry import NotificationExpirySweeper
from peerlink.infrastructure.realtime import (
    ChangeFeedBridge,
    DeliveryRouter,
    RealtimePublisher,
)
from peerlink.interfaces.api.routes import register_routes


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Prepare the schema, run the background tasks and release resources."""

    settings = get_settings()
    initialize_database()

    bridge = ChangeFeedBridge.from_settings(
        notification_change_feed.subscribe, app.state.publisher, settings
    )
    sweeper = NotificationExpirySweeper(
        SessionLocal,
        NotificationRetentionPolicy.from_settings(settings),
        interval=settings.notification_sweep_interval_seconds,
    )
    app.state.change_feed_bridge = bridge
    app.state.expiry_sweeper = sweeper
    bridge.start()
    sweeper.start()
    try:
        yield
    finally:
        await sweeper.stop()
        await bridge.stop()
        engine.dispose()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    settings = get_settings()
    app = FastAPI(title="PeerLink API", lifespan=lifespan)

    # One room registry per application instance.
    app.state.delivery_router = DeliveryRouter()
    app.state.publisher = RealtimePublisher(app.state.delivery_router)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routes(app)
    return app


app = create_app()
