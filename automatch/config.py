"""
Configuration and environment handling for AutoMatch.
"""
import math
import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, model_validator

# Load environment variables
load_dotenv()


class ScoringWeights(BaseModel):
    """Weights combining the five factor scores into the overall score."""
    model_config = ConfigDict(frozen=True)

    price: float = Field(default=0.35, ge=0, le=1)
    section: float = Field(default=0.25, ge=0, le=1)
    quantity: float = Field(default=0.20, ge=0, le=1)
    timing: float = Field(default=0.10, ge=0, le=1)
    seller: float = Field(default=0.10, ge=0, le=1)

    @model_validator(mode="after")
    def check_sum(self) -> "ScoringWeights":
        total = self.price + self.section + self.quantity + self.timing + self.seller
        if not math.isclose(total, 1.0, abs_tol=1e-9):
            raise ValueError(f"Scoring weights must sum to 1.0, got {total}")
        return self


class ConfidenceThresholds(BaseModel):
    """Lower bounds (inclusive) of each confidence tier."""
    model_config = ConfigDict(frozen=True)

    high: float = Field(default=0.85, ge=0, le=1)
    medium: float = Field(default=0.65, ge=0, le=1)
    low: float = Field(default=0.45, ge=0, le=1)

    @model_validator(mode="after")
    def check_order(self) -> "ConfidenceThresholds":
        if not (self.high >= self.medium >= self.low):
            raise ValueError("Confidence thresholds must satisfy high >= medium >= low")
        return self


class MatchingConfig(BaseModel):
    """Matching engine configuration. Not buyer-tunable."""
    model_config = ConfigDict(frozen=True)

    weights: ScoringWeights = Field(default_factory=ScoringWeights)
    thresholds: ConfidenceThresholds = Field(default_factory=ConfidenceThresholds)
    candidate_limit: int = Field(default=50, ge=1, description="Max listings pulled from the store per preference")
    top_k: int = Field(default=10, ge=1, description="Final top results to return")
    auto_approve_min_price_fit: float = Field(default=0.9, ge=0, le=1)
    auto_approve_min_seller_fit: float = Field(default=0.8, ge=0, le=1)
    notification_top_n: int = Field(default=3, ge=1, description="Matches carried in a notification")


class MySQLConfig(BaseModel):
    """MySQL database configuration."""
    host: str = Field(default_factory=lambda: os.getenv("MYSQL_HOST", "localhost"))
    port: int = Field(default_factory=lambda: int(os.getenv("MYSQL_PORT", "3306")))
    user: str = Field(default_factory=lambda: os.getenv("MYSQL_USER", "root"))
    password: str = Field(default_factory=lambda: os.getenv("MYSQL_PASSWORD", ""))
    database: str = Field(default_factory=lambda: os.getenv("MYSQL_DATABASE", "automatch"))
    connect_timeout: int = Field(default=10)


class NotifierConfig(BaseModel):
    """Outbound notification configuration."""
    webhook_url: Optional[str] = Field(default_factory=lambda: os.getenv("AUTOMATCH_WEBHOOK_URL") or None)
    timeout_seconds: float = Field(default=5.0)


class SchedulerConfig(BaseModel):
    """Batch scheduler configuration."""
    max_workers: int = Field(
        default_factory=lambda: int(os.getenv("AUTOMATCH_MAX_WORKERS", "1")),
        ge=1,
        description="Preferences evaluated in parallel during a batch run",
    )


class Config(BaseModel):
    """Main configuration."""
    matching: MatchingConfig = Field(default_factory=MatchingConfig)
    mysql: MySQLConfig = Field(default_factory=MySQLConfig)
    notifier: NotifierConfig = Field(default_factory=NotifierConfig)
    scheduler: SchedulerConfig = Field(default_factory=SchedulerConfig)

    log_level: str = Field(default_factory=lambda: os.getenv("AUTOMATCH_LOG_LEVEL", "INFO"))


# Singleton config instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get or create the singleton config instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config
