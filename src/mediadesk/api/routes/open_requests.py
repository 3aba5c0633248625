"""Open requests API endpoints.

POST   /api/requests              - Submit a request
GET    /api/requests              - List open requests
POST   /api/requests/{id}/close   - Close, optionally with a status
DELETE /api/requests/{id}         - Close, keeping the current status
POST   /api/move-to-closed        - Close with a required status
POST   /api/update-status         - Relabel an open request
"""

from __future__ import annotations

from fastapi import APIRouter, Body, Depends

from mediadesk.api.app import get_manager
from mediadesk.core.errors import ValidationError
from mediadesk.lifecycle.manager import RequestLifecycleManager
from mediadesk.models.types import (
    MessageResponse,
    RequestDetail,
    RequestSubmission,
    StatusBody,
    StatusUpdate,
)

router = APIRouter()


@router.post("/requests", response_model=RequestDetail, status_code=201)
def submit_request(
    submission: RequestSubmission,
    manager: RequestLifecycleManager = Depends(get_manager),
) -> RequestDetail:
    """Submit a new media request.

    Raises:
        ValidationError: 400 if name, media, title or mediaLink is missing.
    """
    created = manager.submit(submission.to_input())
    return RequestDetail.from_entity(created)


@router.get("/requests", response_model=list[RequestDetail])
def list_open_requests(
    manager: RequestLifecycleManager = Depends(get_manager),
) -> list[RequestDetail]:
    """List open requests, most recently created first."""
    return [RequestDetail.from_entity(r) for r in manager.list_open()]


@router.post("/requests/{request_id}/close", response_model=MessageResponse)
def close_request(
    request_id: int,
    body: StatusBody | None = Body(default=None),
    manager: RequestLifecycleManager = Depends(get_manager),
) -> MessageResponse:
    """Move an open request to the closed set.

    Raises:
        NotFoundError: 404 if no open request has this id.
    """
    closed = manager.close(request_id, body.status if body else None)
    return MessageResponse(
        message=f"Request moved to closed with status: {closed.effective_status}."
    )


@router.delete("/requests/{request_id}", response_model=MessageResponse)
def close_request_keep_status(
    request_id: int,
    manager: RequestLifecycleManager = Depends(get_manager),
) -> MessageResponse:
    """Move an open request to the closed set without touching its status."""
    manager.close(request_id)
    return MessageResponse(message="Request moved to closed successfully.")


@router.post("/move-to-closed", response_model=MessageResponse)
def move_to_closed(
    update: StatusUpdate,
    manager: RequestLifecycleManager = Depends(get_manager),
) -> MessageResponse:
    """Move an open request to the closed set with the given status.

    Raises:
        ValidationError: 400 if id or status is missing.
        NotFoundError: 404 if no open request has this id.
    """
    if update.id is None or not (update.status or "").strip():
        raise ValidationError("Missing request ID or status.")

    closed = manager.close(update.id, update.status)
    return MessageResponse(message=f"Request moved to closed with status: {closed.status}.")


@router.post("/update-status", response_model=MessageResponse)
def update_status(
    update: StatusUpdate,
    manager: RequestLifecycleManager = Depends(get_manager),
) -> MessageResponse:
    """Relabel an open request in place.

    Unknown ids are accepted and leave storage untouched.
    """
    manager.update_status(update.id, update.status)
    return MessageResponse(message="Request status updated successfully.")
