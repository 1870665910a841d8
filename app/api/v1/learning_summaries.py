from app.services.academic_entry_service import EntryKind
from app.schemas.academic_entry import (
    LearningSummaryCreate, LearningSummaryUpdate, LearningSummaryResponse,
    LearningSummaryWorkflowResponse
)
from .entries import build_entry_router

router = build_entry_router(
    EntryKind.SUMMARY,
    prefix="/learning-summaries",
    tag="learning-summaries",
    create_schema=LearningSummaryCreate,
    update_schema=LearningSummaryUpdate,
    response_schema=LearningSummaryResponse,
    workflow_schema=LearningSummaryWorkflowResponse
)
