"""Websocket handler for the realtime messaging channel."""

from __future__ import annotations

import logging
from typing import Any

from anyio import to_thread
from fastapi import APIRouter, HTTPException, WebSocket, WebSocketDisconnect
from pydantic import ValidationError as PayloadValidationError

from peerlink.application.use_cases.messages import MessageDeliveryResult, send_message
from peerlink.config import get_settings
from peerlink.domain.exceptions import (
    CollaboratorError,
    UnauthorizedError,
    ValidationError,
)
from peerlink.infrastructure.database import SessionLocal
from peerlink.infrastructure.realtime import (
    SEND_MESSAGE_FAILED,
    DeliveryRouter,
    RealtimePublisher,
)
from peerlink.interfaces.api.dependencies import resolve_current_user
from peerlink.interfaces.api.schemas import SendMessagePayload

router = APIRouter(prefix="/realtime", tags=["realtime"])
logger = logging.getLogger(__name__)


class _ChannelContext:
    """State of one websocket connection."""

    def __init__(
        self,
        websocket: WebSocket,
        delivery_router: DeliveryRouter,
        publisher: RealtimePublisher,
        bound_user_id: str | None,
    ) -> None:
        self.websocket = websocket
        self.delivery_router = delivery_router
        self.publisher = publisher
        self.bound_user_id = bound_user_id

    async def fail(self, event: str, error) -> None:
        """Report an event-path failure according to the configured policy."""

        if not get_settings().realtime_acknowledge_errors:
            return
        await self.websocket.send_json(
            {"type": SEND_MESSAGE_FAILED, "data": {"event": event, **error.to_dict()}}
        )


async def _handle_join(context: _ChannelContext, data: Any) -> None:
    if isinstance(data, int) and not isinstance(data, bool):
        data = str(data)
    if not isinstance(data, str) or not data.strip():
        logger.warning("Ignoring join with invalid user id %r", data)
        return
    if context.bound_user_id is not None and data != context.bound_user_id:
        logger.warning(
            "Connection of user %s tried to join room %s", context.bound_user_id, data
        )
        return
    await context.delivery_router.join(context.websocket, data)


async def _handle_send_message(context: _ChannelContext, data: Any) -> None:
    try:
        payload = SendMessagePayload.model_validate(data)
    except PayloadValidationError as exc:
        logger.error("Error sending message: invalid payload %s", exc.errors())
        await context.fail("sendMessage", ValidationError("Invalid sendMessage payload"))
        return

    if context.bound_user_id is not None and payload.sender_id != context.bound_user_id:
        logger.warning(
            "Connection of user %s tried to send as %s",
            context.bound_user_id,
            payload.sender_id,
        )
        await context.fail("sendMessage", UnauthorizedError("Unauthorized"))
        return

    session = SessionLocal()
    try:
        result: MessageDeliveryResult = await send_message(
            session,
            context.publisher,
            sender_id=payload.sender_id,
            receiver_id=payload.receiver_id,
            content=payload.content,
        )
    finally:
        await to_thread.run_sync(session.close)

    if result.ok:
        return
    if isinstance(result.error, CollaboratorError):
        logger.error("Error sending message", exc_info=result.error)
    else:
        logger.error("Error sending message: %s", result.error)
    await context.fail("sendMessage", result.error)


@router.websocket("/ws")
async def realtime_websocket(websocket: WebSocket) -> None:
    """Realtime channel carrying ``join``/``sendMessage`` in and pushes out.

    An optional ``token`` query parameter binds the connection to one user; such
    connections may only join their own room and send as themselves.
    """

    bound_user_id: str | None = None
    token = websocket.query_params.get("token")
    if token:
        session = SessionLocal()
        try:
            user = await to_thread.run_sync(resolve_current_user, token, session)
        except HTTPException:
            await websocket.close(code=1008)
            return
        finally:
            await to_thread.run_sync(session.close)
        bound_user_id = user.id

    delivery_router: DeliveryRouter = websocket.app.state.delivery_router
    context = _ChannelContext(
        websocket, delivery_router, websocket.app.state.publisher, bound_user_id
    )

    await websocket.accept()
    await delivery_router.connect(websocket)
    try:
        while True:
            try:
                frame = await websocket.receive_json()
            except WebSocketDisconnect:
                raise
            except (ValueError, KeyError):
                logger.debug("Ignoring malformed realtime frame")
                continue

            if not isinstance(frame, dict):
                continue

            frame_type = frame.get("type")
            data = frame.get("data")
            if frame_type == "ping":
                await websocket.send_json({"type": "pong"})
            elif frame_type == "join":
                await _handle_join(context, data)
            elif frame_type == "sendMessage":
                await _handle_send_message(context, data)
            else:
                logger.debug("Ignoring realtime frame of type %r", frame_type)
    except WebSocketDisconnect:
        pass
    finally:
        await delivery_router.leave(websocket)
