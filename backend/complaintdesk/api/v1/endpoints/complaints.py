from fastapi import APIRouter, BackgroundTasks, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from complaintdesk.core.database import get_db
from complaintdesk.core.exceptions import ValidationError
from complaintdesk.core.request_body import parse_json_body
from complaintdesk.models.complaint import ComplaintPriority, ComplaintStatus
from complaintdesk.modules.auth.dependencies import get_current_admin, get_current_identity
from complaintdesk.schemas.auth import TokenClaims
from complaintdesk.schemas.complaint import (
    ComplaintCreate,
    ComplaintResponse,
    ComplaintStats,
    ComplaintStatusUpdate,
    MessageResponse,
)
from complaintdesk.services.complaint_service import ComplaintService
from complaintdesk.services.notification_service import NotificationSender, get_notifier

router = APIRouter()


@router.post("", response_model=ComplaintResponse, status_code=status.HTTP_201_CREATED)
async def create_complaint(
    request: Request,
    background_tasks: BackgroundTasks,
    identity: TokenClaims = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
    notifier: NotificationSender = Depends(get_notifier),
):
    """
    Submit a complaint.

    Status starts as Pending and the owner fields come from the session,
    whatever the request body says. The admin mailbox is notified after the
    complaint is stored.
    """
    complaint_data = await parse_json_body(request, ComplaintCreate)

    complaint = await ComplaintService(db).create(
        identity,
        title=complaint_data.title,
        description=complaint_data.description,
        category=complaint_data.category,
        priority=complaint_data.priority,
    )

    snapshot = ComplaintResponse.model_validate(complaint)
    background_tasks.add_task(notifier.complaint_created, snapshot)
    return snapshot


@router.get("", response_model=List[ComplaintResponse])
async def list_complaints(
    status_filter: Optional[ComplaintStatus] = Query(None, alias="status", description="Filter by status"),
    priority: Optional[ComplaintPriority] = Query(None, description="Filter by priority"),
    identity: TokenClaims = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    """
    List complaints, newest first.

    Admins receive every complaint; other users only their own. Filters
    narrow the visible set further.
    """
    complaints = await ComplaintService(db).list_visible(identity, status=status_filter, priority=priority)
    return [ComplaintResponse.model_validate(c) for c in complaints]


@router.get("/stats", response_model=ComplaintStats)
async def complaint_stats(
    identity: TokenClaims = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    """Per-status counts over the complaints the caller can see"""
    by_status = await ComplaintService(db).stats(identity)
    return ComplaintStats(total=sum(by_status.values()), by_status=by_status)


@router.get("/{complaint_id}", response_model=ComplaintResponse)
async def get_complaint(
    complaint_id: str,
    identity: TokenClaims = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    """Get one complaint; someone else's complaint is reported as not found"""
    complaint = await ComplaintService(db).get_visible(identity, complaint_id)
    return ComplaintResponse.model_validate(complaint)


@router.put("/{complaint_id}", response_model=ComplaintResponse)
async def update_complaint_status(
    complaint_id: str,
    request: Request,
    background_tasks: BackgroundTasks,
    admin: TokenClaims = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
    notifier: NotificationSender = Depends(get_notifier),
):
    """
    Change a complaint's status (admin only).

    The admin mailbox and the complaint owner are notified after the change
    is stored.
    """
    update = await parse_json_body(request, ComplaintStatusUpdate)
    if update.status is None:
        raise ValidationError("Status is required", field="status")

    complaint = await ComplaintService(db).update_status(admin, complaint_id, update.status)

    snapshot = ComplaintResponse.model_validate(complaint)
    background_tasks.add_task(notifier.complaint_status_updated, snapshot)
    return snapshot


@router.delete("/{complaint_id}", response_model=MessageResponse)
async def delete_complaint(
    complaint_id: str,
    admin: TokenClaims = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    """Delete a complaint (admin only)"""
    await ComplaintService(db).delete(admin, complaint_id)
    return MessageResponse(message="Complaint deleted successfully")
