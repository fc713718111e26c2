"""Telegram webhook receiver and binding administration."""

import logging
import secrets
import uuid
from typing import Any, Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request
from fastapi.responses import JSONResponse

from kostnotify.auth import require_admin
from kostnotify.bindings import BindingStore
from kostnotify.channels.telegram import TelegramAdapter
from kostnotify.config import settings
from kostnotify.dependencies import get_bindings, get_conversation, get_telegram, get_users
from kostnotify.exceptions import StorageError
from kostnotify.linking import LinkingConversation
from kostnotify.notifications.messages import t
from kostnotify.redis import get_redis
from kostnotify.response import paginated_response, single_response
from kostnotify.schemas.notification import DeliveryResultResponse
from kostnotify.schemas.telegram import BindingRegister, BindingResponse, SendTestMessage
from kostnotify.users import UserRepository

tg_logger = logging.getLogger("telegram.webhook")

router = APIRouter(prefix="/telegram", tags=["telegram"])
public_router = APIRouter(tags=["telegram-webhook"])


# ---------------------------------------------------------------------------
# Public: receive bot updates
# ---------------------------------------------------------------------------


@public_router.post("/telegram/webhook", summary="Receive a Telegram bot update")
async def receive_update(
    request: Request,
    conversation: LinkingConversation = Depends(get_conversation),
    redis_client=Depends(get_redis),
    secret_token: Optional[str] = Header(None, alias="X-Telegram-Bot-Api-Secret-Token"),
):
    if settings.telegram_webhook_secret and not secrets.compare_digest(
        secret_token or "", settings.telegram_webhook_secret
    ):
        tg_logger.warning("Rejected telegram update with invalid secret token")
        raise HTTPException(status_code=403, detail="Invalid secret token")

    try:
        update = await request.json()
    except ValueError:
        tg_logger.warning("Ignoring telegram update with unreadable body")
        return {"status": "ok"}

    if not isinstance(update, dict):
        return {"status": "ok"}

    if await _seen_before(redis_client, update.get("update_id")):
        tg_logger.info("Ignoring redelivered telegram update %s", update.get("update_id"))
        return {"status": "ok"}

    try:
        handled = await conversation.handle(update)
    except Exception:
        tg_logger.exception("Telegram webhook error for update %s", update.get("update_id"))
        await _forget(redis_client, update.get("update_id"))
        return JSONResponse(status_code=500, content={"status": "error"})

    tg_logger.debug("Telegram update %s handled: %s", update.get("update_id"), handled)
    return {"status": "ok"}


async def _seen_before(redis_client, update_id: Any) -> bool:
    """Record ``update_id``; True when it was already recorded within the TTL."""
    if update_id is None:
        return False
    try:
        stored = await redis_client.set(
            _dedup_key(update_id), 1, nx=True, ex=settings.webhook_dedup_ttl
        )
    except Exception:
        tg_logger.warning("Update de-duplication unavailable; processing update %s", update_id)
        return False
    return not stored


async def _forget(redis_client, update_id: Any) -> None:
    """Drop the record of a failed update so Telegram's redelivery is processed."""
    if update_id is None:
        return
    try:
        await redis_client.delete(_dedup_key(update_id))
    except Exception:
        tg_logger.warning("Could not clear de-duplication key for update %s", update_id)


def _dedup_key(update_id: Any) -> str:
    return f"telegram_update:{update_id}"


# ---------------------------------------------------------------------------
# Authenticated: manage bindings
# ---------------------------------------------------------------------------


@router.get("/bindings", summary="List telegram bindings")
async def list_bindings(
    active: Optional[bool] = Query(None),
    limit: int = Query(50, le=200),
    offset: int = Query(0),
    bindings: BindingStore = Depends(get_bindings),
    _key=Depends(require_admin),
):
    rows, total = await bindings.list_bindings(active=active, limit=limit, offset=offset)
    items = [BindingResponse.model_validate(b) for b in rows]
    return paginated_response(items, total, limit, offset)


@router.put("/bindings", summary="Bind a telegram chat to a user")
async def register_binding(
    body: BindingRegister,
    users: UserRepository = Depends(get_users),
    bindings: BindingStore = Depends(get_bindings),
    _key=Depends(require_admin),
):
    if body.user_id:
        user = await users.get(body.user_id)
    else:
        user = await users.find_by_phone(body.phone)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    profile = body.model_dump(include={"username", "first_name", "last_name"})
    try:
        binding = await bindings.upsert_for_user(user, body.chat_id, profile)
    except StorageError:
        raise HTTPException(
            status_code=409,
            detail="Could not bind chat; the chat id or phone may belong to another user",
        )
    return single_response(BindingResponse.model_validate(binding))


@router.delete("/bindings/{user_id}", status_code=204, summary="Deactivate a user's telegram binding")
async def deactivate_binding(
    user_id: uuid.UUID,
    users: UserRepository = Depends(get_users),
    bindings: BindingStore = Depends(get_bindings),
    _key=Depends(require_admin),
):
    user = await users.get(user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    if not await bindings.deactivate(user):
        raise HTTPException(status_code=404, detail="Binding not found")


@router.post("/test", summary="Send a test message to a chat")
async def send_test_message(
    body: SendTestMessage,
    telegram: TelegramAdapter = Depends(get_telegram),
    _key=Depends(require_admin),
):
    text = body.message or t(settings.default_locale, "test_message", app=settings.app_name)
    result = await telegram.send_message(body.chat_id, text)
    if not result.success:
        raise HTTPException(status_code=502, detail=f"Telegram send failed: {result.error}")
    return single_response(DeliveryResultResponse.model_validate(result))
