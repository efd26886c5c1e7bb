"""
Complaint Service - complaint store operations scoped by the caller's identity

Every read goes through ``owner_scope`` so a non-admin can never receive
another user's complaint, whatever filters are applied on top.
"""

from datetime import datetime
from typing import Dict, List, Optional
from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from complaintdesk.core.config import settings
from complaintdesk.core.exceptions import ComplaintNotFoundError, DependencyError
from complaintdesk.core.logging_config import logger
from complaintdesk.models.complaint import (
    Complaint,
    ComplaintCategory,
    ComplaintPriority,
    ComplaintStatus,
)
from complaintdesk.modules.complaints.policy import (
    INITIAL_STATUS,
    StatusTransitionPolicy,
    can_view,
    owner_scope,
)
from complaintdesk.schemas.auth import TokenClaims


class ComplaintService:

    def __init__(self, db: AsyncSession, transitions: Optional[StatusTransitionPolicy] = None):
        self.db = db
        self.transitions = transitions or StatusTransitionPolicy.from_settings(settings.STRICT_STATUS_TRANSITIONS)

    async def _commit(self, context: str) -> None:
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.log_error_with_context(e, context=context)
            raise DependencyError() from e

    async def _execute(self, statement, context: str):
        try:
            return await self.db.execute(statement)
        except SQLAlchemyError as e:
            logger.log_error_with_context(e, context=context)
            raise DependencyError() from e

    async def create(
        self,
        identity: TokenClaims,
        title: str,
        description: str,
        category: ComplaintCategory,
        priority: ComplaintPriority,
    ) -> Complaint:
        """Store a new complaint owned by ``identity``; status is always Pending"""
        now = datetime.utcnow()
        complaint = Complaint(
            title=title,
            description=description,
            category=category,
            priority=priority,
            status=INITIAL_STATUS,
            date_submitted=now,
            user_id=identity.user_id,
            user_email=identity.email,
            user_name=identity.name,
        )
        self.db.add(complaint)
        await self._commit("complaint create")
        await self.db.refresh(complaint)

        logger.log_complaint_event("created", complaint.id, actor_id=identity.user_id)
        return complaint

    async def list_visible(
        self,
        identity: TokenClaims,
        status: Optional[ComplaintStatus] = None,
        priority: Optional[ComplaintPriority] = None,
    ) -> List[Complaint]:
        """All complaints the identity may see, newest first"""
        query = select(Complaint)

        owner_id = owner_scope(identity)
        if owner_id is not None:
            query = query.where(Complaint.user_id == owner_id)
        if status is not None:
            query = query.where(Complaint.status == status)
        if priority is not None:
            query = query.where(Complaint.priority == priority)

        query = query.order_by(Complaint.date_submitted.desc())

        result = await self._execute(query, "complaint list")
        return list(result.scalars().all())

    async def get(self, complaint_id: str) -> Complaint:
        result = await self._execute(
            select(Complaint).where(Complaint.id == complaint_id),
            "complaint lookup",
        )
        complaint = result.scalar_one_or_none()
        if complaint is None:
            raise ComplaintNotFoundError(complaint_id)
        return complaint

    async def get_visible(self, identity: TokenClaims, complaint_id: str) -> Complaint:
        """Complaints the identity may not see are reported as not found"""
        complaint = await self.get(complaint_id)
        if not can_view(identity, complaint.user_id):
            raise ComplaintNotFoundError(complaint_id)
        return complaint

    async def update_status(
        self,
        identity: TokenClaims,
        complaint_id: str,
        new_status: ComplaintStatus,
    ) -> Complaint:
        """Apply a status change; caller must already have passed the admin check"""
        complaint = await self.get(complaint_id)
        previous = complaint.status

        self.transitions.check(previous, new_status)

        complaint.status = new_status
        await self._commit("complaint status update")
        await self.db.refresh(complaint)

        logger.log_complaint_event(
            "status_updated",
            complaint.id,
            actor_id=identity.user_id,
            previous_status=previous.value,
            new_status=new_status.value,
        )
        return complaint

    async def delete(self, identity: TokenClaims, complaint_id: str) -> None:
        """Delete a complaint; caller must already have passed the admin check"""
        result = await self._execute(
            delete(Complaint).where(Complaint.id == complaint_id),
            "complaint delete",
        )
        if result.rowcount == 0:
            await self.db.rollback()
            raise ComplaintNotFoundError(complaint_id)

        await self._commit("complaint delete")
        logger.log_complaint_event("deleted", complaint_id, actor_id=identity.user_id)

    async def stats(self, identity: TokenClaims) -> Dict[str, int]:
        """Count visible complaints per status (every status present, zero if none)"""
        query = select(Complaint.status, func.count(Complaint.id)).group_by(Complaint.status)

        owner_id = owner_scope(identity)
        if owner_id is not None:
            query = query.where(Complaint.user_id == owner_id)

        result = await self._execute(query, "complaint stats")
        counts = {status.value: 0 for status in ComplaintStatus}
        for status, count in result.all():
            counts[ComplaintStatus(status).value] = count
        return counts
