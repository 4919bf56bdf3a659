"""
Configuration Module
====================

Application settings and configuration management using Pydantic.
"""

from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses Pydantic for validation and type safety.
    """

    # ========== Application ==========
    app_name: str = Field(default="crp-routing-engine", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: str = Field(default="development", description="Environment name")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Root logging level")

    # ========== Server ==========
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, description="Server port", ge=1, le=65535)

    # ========== Engineer Roster ==========
    roster_path: Path = Field(
        default=Path("roster.yaml"),
        description="Path to the engineer roster YAML file"
    )
    roster_watch: bool = Field(
        default=True,
        description="Reload the roster when the YAML file changes"
    )

    # ========== Pipeline Pacing ==========
    simulate_processing_delays: bool = Field(
        default=True,
        description="Wait between pipeline stages (disable for batch use)"
    )
    delay_scale: float = Field(
        default=1.0,
        description="Multiplier applied to every stage wait",
        ge=0.0,
        le=10.0
    )
    random_seed: Optional[int] = Field(
        default=None,
        description="Seed for urgency/confidence jitter (None = nondeterministic)"
    )

    # ========== CORS ==========
    cors_origins: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:8080"],
        description="Allowed CORS origins"
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
        allowed = {"development", "staging", "production"}
        if v not in allowed:
            raise ValueError(f"environment must be one of {allowed}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalise and check the logging level name."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"log_level must be one of {allowed}")
        return v.upper()


@lru_cache()
def get_settings() -> Settings:
    """Returns cached Settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


# ========== Constants ==========

class UrgencyLevel(str, Enum):
    """Ticket urgency levels."""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


class ComplexityTier(str, Enum):
    """Complexity estimate derived from the complexity score."""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class TicketStatus(str, Enum):
    """Ticket lifecycle statuses."""
    SUBMITTED = "Submitted"
    CLASSIFIED = "Classified"
    IN_PROGRESS = "In Progress"
    RESOLVED = "Resolved"


class ThreadStatus(str, Enum):
    """Issue thread lifecycle statuses."""
    OPEN = "Open"
    IN_PROGRESS = "In Progress"
    RESOLVED = "Resolved"


class AvailabilityStatus(str, Enum):
    """Engineer availability."""
    AVAILABLE = "Available"
    BUSY = "Busy"
    OFFLINE = "Offline"


class RecommendedAction(str, Enum):
    """Routing recommendation attached to a classification."""
    STANDARD = "Standard"
    CRP = "CRP"


class AffectedSystem(str, Enum):
    """Known SAP systems a ticket can be raised against."""
    ERP = "SAP ERP"
    S4HANA = "SAP S/4HANA"
    SUCCESS_FACTORS = "SAP SuccessFactors"
    ARIBA = "SAP Ariba"
    CONCUR = "SAP Concur"
    FIELDGLASS = "SAP Fieldglass"
    CUSTOMER_EXPERIENCE = "SAP Customer Experience"
    BTP = "SAP Business Technology Platform"


class SkillType(str, Enum):
    """Skill domains, used for ticket requirements and engineer capabilities."""
    DATABASE = "Database"
    FRONTEND = "Frontend"
    BACKEND = "Backend"
    NETWORK = "Network"
    SECURITY = "Security"
    DEVOPS = "DevOps"
    INTEGRATION = "Integration"
    ANALYTICS = "Analytics"
    MOBILE = "Mobile"
    CLOUD = "Cloud"
    UX = "UX"


class LaunchState(str, Enum):
    """CRP launch orchestration states."""
    EVALUATING = "Evaluating"
    REJECTED = "Rejected"
    RUNNING = "Running"
    COMPLETED = "Completed"
    FAILED = "Failed"


class LaunchReasonKind(str, Enum):
    """Closed set of reasons a launch was accepted or refused."""
    NOT_CLASSIFIED = "not_classified"
    CRITERIA_NOT_MET = "criteria_not_met"
    HIGH_COMPLEXITY = "high_complexity"
    AI_RECOMMENDED = "ai_recommended"
    MULTI_DOMAIN = "multi_domain"
    CRITICAL_URGENCY = "critical_urgency"
    SYSTEM_ERROR = "system_error"


# ========== Lists for validation ==========

URGENCY_LEVELS = list(UrgencyLevel)
COMPLEXITY_TIERS = list(ComplexityTier)
SKILL_TYPES = list(SkillType)
AFFECTED_SYSTEMS = list(AffectedSystem)
ACCEPTING_REASON_KINDS = [
    LaunchReasonKind.HIGH_COMPLEXITY,
    LaunchReasonKind.AI_RECOMMENDED,
    LaunchReasonKind.MULTI_DOMAIN,
    LaunchReasonKind.CRITICAL_URGENCY,
]
