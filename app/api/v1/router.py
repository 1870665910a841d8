from fastapi import APIRouter

from .bookings import router as bookings_router
from .learning_summaries import router as learning_summaries_router
from .learning_support import router as learning_support_router
from .calendar import router as calendar_router

# Create main API router
api_router = APIRouter()

# Include all routers
api_router.include_router(bookings_router, tags=["Bookings"])
api_router.include_router(learning_summaries_router, tags=["Learning Summaries"])
api_router.include_router(learning_support_router, tags=["Learning Support"])
api_router.include_router(calendar_router, tags=["Calendar"])
