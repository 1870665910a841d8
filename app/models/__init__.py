# Models package
from .user import User, UserRole
from .class_model import Class
from .subject import Subject
from .student import Student, StudentStatus
from .booking import Booking, BookingKind, BookingStatus
from .academic_entry import (
    AcademicEntryMixin, LearningSummary, LearningSupport,
    AcademicTerm, EntryStatus
)
from .support_attendance import SupportAttendance, AttendanceStatus
