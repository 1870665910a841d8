"""
Endpoints shared by learning summaries and learning support entries.

Both entry kinds expose the same CRUD and approval workflow; only the schemas
and the URL prefix differ.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
from uuid import UUID

from app.core.database import get_db
from app.core.exceptions import SchedulingError
from app.core.security import get_current_user
from app.models.academic_entry import AcademicTerm, EntryStatus
from app.models.user import User
from app.services.academic_entry_service import AcademicEntryService, EntryKind, WorkflowResult
from app.schemas.academic_entry import ReviewRequest, SideEffectResponse
from .errors import to_http_exception


def build_entry_router(
    kind: EntryKind,
    prefix: str,
    tag: str,
    create_schema,
    update_schema,
    response_schema,
    workflow_schema
) -> APIRouter:
    router = APIRouter(prefix=prefix, tags=[tag])

    def to_workflow_response(result: WorkflowResult):
        return workflow_schema(
            entry=response_schema.model_validate(result.entry),
            side_effects=[
                SideEffectResponse(name=o.name, ok=o.ok, error=o.error) for o in result.side_effects
            ]
        )

    @router.get("", response_model=List[response_schema])
    async def list_entries(
        term: Optional[AcademicTerm] = None,
        week_number: Optional[int] = Query(None, ge=1, le=15),
        class_id: Optional[UUID] = None,
        teacher_id: Optional[UUID] = None,
        entry_status: Optional[EntryStatus] = Query(None, alias="status"),
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(get_current_user)
    ):
        service = AcademicEntryService(db, kind)
        return await service.list_entries(
            term=term,
            week_number=week_number,
            class_id=class_id,
            teacher_id=teacher_id,
            status=entry_status
        )

    @router.post("", response_model=response_schema, status_code=status.HTTP_201_CREATED)
    async def create_entry(
        data: create_schema,
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(get_current_user)
    ):
        service = AcademicEntryService(db, kind)
        try:
            return await service.create_entry(data, current_user)
        except SchedulingError as e:
            raise to_http_exception(e)

    @router.get("/{entry_id}", response_model=response_schema)
    async def get_entry(
        entry_id: UUID,
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(get_current_user)
    ):
        service = AcademicEntryService(db, kind)
        try:
            return await service.get_entry(entry_id)
        except SchedulingError as e:
            raise to_http_exception(e)

    @router.patch("/{entry_id}", response_model=response_schema)
    async def update_entry(
        entry_id: UUID,
        data: update_schema,
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(get_current_user)
    ):
        service = AcademicEntryService(db, kind)
        try:
            return await service.update_entry(entry_id, data, current_user)
        except SchedulingError as e:
            raise to_http_exception(e)

    @router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_entry(
        entry_id: UUID,
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(get_current_user)
    ):
        service = AcademicEntryService(db, kind)
        try:
            await service.delete_entry(entry_id, current_user)
        except SchedulingError as e:
            raise to_http_exception(e)

    @router.post("/{entry_id}/submit", response_model=workflow_schema)
    async def submit_entry(
        entry_id: UUID,
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(get_current_user)
    ):
        service = AcademicEntryService(db, kind)
        try:
            result = await service.submit(entry_id, current_user)
        except SchedulingError as e:
            raise to_http_exception(e)
        return to_workflow_response(result)

    @router.post("/{entry_id}/approve", response_model=workflow_schema)
    async def approve_entry(
        entry_id: UUID,
        review: ReviewRequest = ReviewRequest(),
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(get_current_user)
    ):
        service = AcademicEntryService(db, kind)
        try:
            result = await service.approve(entry_id, current_user, review.comments)
        except SchedulingError as e:
            raise to_http_exception(e)
        return to_workflow_response(result)

    @router.post("/{entry_id}/reject", response_model=workflow_schema)
    async def reject_entry(
        entry_id: UUID,
        review: ReviewRequest = ReviewRequest(),
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(get_current_user)
    ):
        service = AcademicEntryService(db, kind)
        try:
            result = await service.reject(entry_id, current_user, review.comments)
        except SchedulingError as e:
            raise to_http_exception(e)
        return to_workflow_response(result)

    return router
