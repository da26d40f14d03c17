"""
Batch models - per-preference outcomes and run summaries.
"""
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field


class PreferenceOutcome(BaseModel):
    """Result of evaluating one preference during a batch run."""
    preference_id: Optional[str] = None
    user_id: str
    success: bool
    match_count: int = 0
    notified: bool = False
    error: Optional[str] = None


class ScoreStats(BaseModel):
    """Distribution of overall scores across all emitted matches."""
    count: int = 0
    mean: float = 0.0
    median: float = 0.0
    max: float = 0.0


class BatchRunResult(BaseModel):
    """Summary of a scheduled matching run."""
    run_id: str = Field(description="Unique run identifier")
    status: Literal["COMPLETED", "FAILED"] = "COMPLETED"
    started_at: datetime
    completed_at: Optional[datetime] = None

    total_matches: int = 0
    users_processed: int = Field(default=0, description="Preferences evaluated")
    failures: int = 0

    outcomes: list[PreferenceOutcome] = Field(default_factory=list)
    score_stats: ScoreStats = Field(default_factory=ScoreStats)
    error: Optional[str] = None
