"""Dispatch trigger and in-app notification centre."""

import logging
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from kostnotify.auth import require_admin
from kostnotify.channels import inapp
from kostnotify.channels.dispatcher import Dispatcher
from kostnotify.database import get_db
from kostnotify.dependencies import get_dispatcher, get_users
from kostnotify.exceptions import UnknownEventType
from kostnotify.models.notification import PRIORITIES
from kostnotify.response import paginated_response, single_response
from kostnotify.schemas.notification import (
    DeliveryResultResponse,
    DispatchRequest,
    NotificationResponse,
)
from kostnotify.users import UserRepository

logger = logging.getLogger(__name__)

router = APIRouter(tags=["notifications"])

PRIORITY_PATTERN = f"^({'|'.join(PRIORITIES)})$"


@router.post("/notifications/dispatch", summary="Dispatch a domain event to a user")
async def dispatch_event(
    body: DispatchRequest,
    users: UserRepository = Depends(get_users),
    dispatcher: Dispatcher = Depends(get_dispatcher),
    _key=Depends(require_admin),
):
    user = await users.get(body.user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    logger.info("Dispatch of %s requested for user %s", body.event_type, user.id)
    try:
        results = await dispatcher.dispatch(user, body.event_type, body.payload)
    except UnknownEventType as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except ValidationError as exc:
        raise HTTPException(
            status_code=422,
            detail=exc.errors(include_url=False, include_context=False, include_input=False),
        )

    items = [DeliveryResultResponse.model_validate(r) for r in results]
    return single_response(items, meta={"event_type": body.event_type})


@router.get("/users/{user_id}/notifications", summary="List in-app notifications")
async def list_user_notifications(
    user_id: uuid.UUID,
    unread: Optional[bool] = Query(None),
    priority: Optional[str] = Query(None, pattern=PRIORITY_PATTERN),
    type: Optional[str] = Query(None),
    limit: int = Query(50, le=200),
    offset: int = Query(0),
    db: AsyncSession = Depends(get_db),
    _key=Depends(require_admin),
):
    rows, total = await inapp.list_notifications(
        db, user_id, unread=unread, priority=priority, type=type, limit=limit, offset=offset
    )
    unread_count = await inapp.count_unread(db, user_id)
    items = [NotificationResponse.model_validate(n) for n in rows]
    return paginated_response(items, total, limit, offset, unread=unread_count)


@router.post("/users/{user_id}/notifications/read-all", summary="Mark all notifications read")
async def mark_all_notifications_read(
    user_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    _key=Depends(require_admin),
):
    updated = await inapp.mark_all_read(db, user_id)
    return single_response({"updated": updated})


@router.post("/users/{user_id}/notifications/{notification_id}/read", summary="Mark a notification read")
async def mark_notification_read(
    user_id: uuid.UUID,
    notification_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    _key=Depends(require_admin),
):
    notification = await _get_notification(db, user_id, notification_id)
    await inapp.mark_read(db, notification)
    return single_response(NotificationResponse.model_validate(notification))


@router.post("/users/{user_id}/notifications/{notification_id}/unread", summary="Mark a notification unread")
async def mark_notification_unread(
    user_id: uuid.UUID,
    notification_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    _key=Depends(require_admin),
):
    notification = await _get_notification(db, user_id, notification_id)
    await inapp.mark_unread(db, notification)
    return single_response(NotificationResponse.model_validate(notification))


async def _get_notification(db: AsyncSession, user_id: uuid.UUID, notification_id: uuid.UUID):
    notification = await inapp.get_notification(db, user_id, notification_id)
    if not notification:
        raise HTTPException(status_code=404, detail="Notification not found")
    return notification
