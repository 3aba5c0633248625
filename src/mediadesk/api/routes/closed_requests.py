"""Closed requests API endpoints.

GET    /api/closed-requests        - List closed requests
POST   /api/reopen-request/{id}    - Reopen, optionally with a status
POST   /api/update-closed-status   - Relabel a closed request
DELETE /api/closed-requests/{id}   - Delete permanently
"""

from __future__ import annotations

from fastapi import APIRouter, Body, Depends

from mediadesk.api.app import get_manager
from mediadesk.lifecycle.manager import RequestLifecycleManager
from mediadesk.models.types import MessageResponse, RequestDetail, StatusBody, StatusUpdate

router = APIRouter()


@router.get("/closed-requests", response_model=list[RequestDetail])
def list_closed_requests(
    manager: RequestLifecycleManager = Depends(get_manager),
) -> list[RequestDetail]:
    """List closed requests, most recently closed first."""
    return [RequestDetail.from_entity(r) for r in manager.list_closed()]


@router.post("/reopen-request/{request_id}", response_model=MessageResponse)
def reopen_request(
    request_id: int,
    body: StatusBody | None = Body(default=None),
    manager: RequestLifecycleManager = Depends(get_manager),
) -> MessageResponse:
    """Move a closed request back to the open set.

    Status defaults to "Pending" when the body carries none.

    Raises:
        NotFoundError: 404 if no closed request has this id.
    """
    reopened = manager.reopen(request_id, body.status if body else None)
    return MessageResponse(message=f"Request reopened with status: {reopened.status}")


@router.post("/update-closed-status", response_model=MessageResponse)
def update_closed_status(
    update: StatusUpdate,
    manager: RequestLifecycleManager = Depends(get_manager),
) -> MessageResponse:
    """Relabel a closed request in place."""
    manager.update_closed_status(update.id, update.status)
    return MessageResponse(message="Closed request status updated successfully.")


@router.delete("/closed-requests/{request_id}", response_model=MessageResponse)
def delete_closed_request(
    request_id: int,
    manager: RequestLifecycleManager = Depends(get_manager),
) -> MessageResponse:
    """Permanently delete a closed request. Unknown ids succeed."""
    manager.delete_closed(request_id)
    return MessageResponse(message="Closed request deleted successfully.")
