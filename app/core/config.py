from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    # Application settings
    SECRET_KEY: str = "your-secret-key-here"
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 9000
    ENVIRONMENT: str = "development"

    # JWT settings
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 480

    # Database settings
    POSTGRES_USER: str = "scheduler"
    POSTGRES_PASSWORD: str = "Passw0rd"
    POSTGRES_DB: str = "bell_scheduler"
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    SQL_ECHO: bool = False  # Set to True for SQL query debugging

    # Email settings
    RESEND_API_KEY: Optional[str] = None
    FROM_EMAIL: str = "scheduler@school.example"
    FRONTEND_URL: str = "http://localhost:5173"
    NOTIFICATIONS_ENABLED: bool = True

    # Rate limiting (production only)
    RATE_LIMIT_STORAGE_URI: str = "memory://"

    # School calendar
    SCHOOL_TIMEZONE: str = "Asia/Dubai"
    SHORT_WEEKDAY: int = 4  # Monday == 0, so Friday
    SHORT_DAY_MAX_PERIOD: int = 4
    MAX_PERIOD: int = 8
    MAX_WEEK_NUMBER: int = 15
    TERM_1_START_MONTH: int = 9
    TERM_2_START_MONTH: int = 1
    TERM_3_START_MONTH: int = 5

    # Workflow switches
    SELF_APPROVE_ON_SUBMIT: bool = True
    REVALIDATE_BOOKING_UPDATES: bool = False
    MATERIALIZE_SUPPORT_SESSIONS: bool = True

    @property
    def DATABASE_URL(self) -> str:
        return f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()
