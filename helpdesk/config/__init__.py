"""
Configuration Module
====================

Application settings and configuration management using Pydantic.

Also hosts the fixed helpdesk policy constants (roles, priorities,
statuses and SLA windows), which are not configurable per deployment.
"""

from datetime import timedelta
from enum import Enum
from functools import lru_cache
from typing import Dict, List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses Pydantic for validation and type safety.
    """

    # ========== Application ==========
    app_name: str = Field(default="helpdesk", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: str = Field(default="development", description="Environment name")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Root log level")

    # ========== Server ==========
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=3000, description="Server port", ge=1, le=65535)

    # ========== Database ==========
    database_url: str = Field(
        default="postgresql+asyncpg://localhost:5432/helpdesk",
        description="Database connection URL (async driver)"
    )
    db_pool_size: int = Field(default=5, description="Database connection pool size", ge=1)
    db_max_overflow: int = Field(default=10, description="Max overflow connections", ge=0)

    # ========== Authentication ==========
    jwt_secret: str = Field(
        default="dev-secret-change-me",
        description="Secret used to sign session tokens"
    )
    jwt_algorithm: str = Field(default="HS256", description="JWT signing algorithm")
    jwt_expire_minutes: int = Field(
        default=480,
        description="Session token lifetime in minutes",
        ge=1
    )
    password_min_length: int = Field(default=6, description="Minimum password length", ge=1)

    # ========== Notifications (Teams incoming webhook) ==========
    teams_webhook_url: Optional[str] = Field(
        default=None,
        description="Incoming webhook URL for ticket notifications"
    )
    notification_timeout_seconds: float = Field(
        default=5.0,
        description="Timeout for webhook calls",
        ge=0.1,
        le=30
    )
    notification_max_attempts: int = Field(
        default=1,
        description="Delivery attempts per notification",
        ge=1,
        le=5
    )
    notification_queue_size: int = Field(
        default=1000,
        description="Max notifications waiting for delivery",
        ge=1
    )
    notification_shutdown_timeout_seconds: float = Field(
        default=10.0,
        description="How long shutdown waits for queued notifications",
        ge=0
    )

    # ========== SLA Watchdog ==========
    sla_watchdog_enabled: bool = Field(
        default=True,
        description="Run the periodic overdue ticket sweep"
    )
    sla_watchdog_interval_seconds: int = Field(
        default=300,
        description="Seconds between overdue ticket sweeps",
        ge=10
    )

    # ========== CORS ==========
    frontend_origin: str = Field(
        default="*",
        description="Allowed CORS origin for the web frontend"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Ensure environment is one of allowed values."""
        allowed = {"development", "test", "staging", "production"}
        if v not in allowed:
            raise ValueError(f"environment must be one of {allowed}")
        return v

    @property
    def cors_origins(self) -> List[str]:
        return [origin.strip() for origin in self.frontend_origin.split(",") if origin.strip()]


@lru_cache()
def get_settings() -> Settings:
    """Returns cached Settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


# ========== Constants ==========

class Role(str, Enum):
    """User roles. The role is the only authorization attribute."""
    REQUESTER = "requester"
    AGENT = "agent"
    ADMIN = "admin"


class Priority(str, Enum):
    """Ticket priority levels."""
    P1 = "P1"
    P2 = "P2"
    P3 = "P3"


class TicketStatus(str, Enum):
    """Ticket lifecycle statuses. Any status may follow any other."""
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    CLOSED = "closed"


SLA_WINDOWS: Dict[Priority, timedelta] = {
    Priority.P1: timedelta(minutes=30),
    Priority.P2: timedelta(minutes=60),
    Priority.P3: timedelta(hours=8),
}

DEFAULT_PRIORITY = Priority.P3
TICKET_LIST_LIMIT = 100


# ========== Lists for validation ==========

VALID_PRIORITIES = [priority.value for priority in Priority]
VALID_STATUSES = [status.value for status in TicketStatus]
ACTIVE_STATUSES = [TicketStatus.OPEN.value, TicketStatus.IN_PROGRESS.value]
