from datetime import datetime
from fastapi import APIRouter, Depends, Query
from typing import Optional
import uuid

from docshare.api.deps import get_notification_service, get_requester
from docshare.domains.notifications.schemas import (
    NotificationCheckResponse, NotificationListResponse, NotificationReadAllResponse,
    NotificationReadResponse, NotificationResponse
)
from docshare.domains.notifications.services import NotificationService

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    since: Optional[datetime] = Query(None),
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1, le=100),
    requester_id: uuid.UUID = Depends(get_requester),
    service: NotificationService = Depends(get_notification_service)
):
    """Лента уведомлений пользователя"""
    result = await service.list_for_recipient(requester_id, since=since, page=page, page_size=limit)
    return NotificationListResponse.from_page(result)


@router.get("/check", response_model=NotificationCheckResponse)
async def check_notifications(
    since: Optional[datetime] = Query(None),
    requester_id: uuid.UUID = Depends(get_requester),
    service: NotificationService = Depends(get_notification_service)
):
    """Проверка новых уведомлений для периодического опроса"""
    result = await service.poll_since(requester_id, since)
    return NotificationCheckResponse.from_poll(result)


@router.put("/read-all", response_model=NotificationReadAllResponse)
async def mark_all_notifications_read(
    requester_id: uuid.UUID = Depends(get_requester),
    service: NotificationService = Depends(get_notification_service)
):
    """Отметка всех уведомлений как прочитанных"""
    updated = await service.mark_all_read(requester_id)
    return NotificationReadAllResponse(updated=updated)


@router.put("/{notification_id}/read", response_model=NotificationReadResponse)
async def mark_notification_read(
    notification_id: uuid.UUID,
    requester_id: uuid.UUID = Depends(get_requester),
    service: NotificationService = Depends(get_notification_service)
):
    """Отметка уведомления как прочитанного"""
    notification = await service.mark_read(notification_id, requester_id)
    return NotificationReadResponse(notification=NotificationResponse.model_validate(notification))
