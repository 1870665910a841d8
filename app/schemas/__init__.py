# Schemas package
from .booking import BookingCreate, BookingUpdate, BookingResponse, BookingListResponse
from .academic_entry import (
    LearningSummaryCreate, LearningSummaryUpdate, LearningSummaryResponse,
    LearningSupportCreate, LearningSupportUpdate, LearningSupportResponse,
    LearningSummaryWorkflowResponse, LearningSupportWorkflowResponse,
    ReviewRequest, SideEffectResponse,
    AttendanceMark, AttendanceSaveRequest, AttendanceResponse
)
from .notification import BookingNotification
