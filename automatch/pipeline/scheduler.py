"""
Batch scheduler - re-evaluates every active preference against current inventory.
"""
import logging
import threading
import uuid
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

import numpy as np

from ..config import Config, get_config
from ..errors import SchedulerBusyError
from ..models.batch import BatchRunResult, PreferenceOutcome, ScoreStats
from ..models.matching import MatchResult
from ..models.preferences import BuyerPreference
from ..notify.base import LoggingNotifier, Notifier
from ..store.base import CatalogStore

from .ranker import MatchRanker
from .reasons import build_match_notification


logger = logging.getLogger(__name__)


class SchedulerState(str, Enum):
    IDLE = "IDLE"
    RUNNING = "RUNNING"


def _score_stats(scores: list[float]) -> ScoreStats:
    if not scores:
        return ScoreStats()
    values = np.array(scores)
    return ScoreStats(
        count=len(scores),
        mean=float(np.mean(values)),
        median=float(np.median(values)),
        max=float(np.max(values)),
    )


class BatchScheduler:
    """
    Runs the match ranker for every active, notification-enabled preference.

    One preference failing never stops the others. Triggering is left to an
    external cron or orchestrator.
    """

    def __init__(
        self,
        store: CatalogStore,
        notifier: Optional[Notifier] = None,
        ranker: Optional[MatchRanker] = None,
        config: Optional[Config] = None,
    ):
        config = config or get_config()
        self.store = store
        self.notifier = notifier or LoggingNotifier()
        self.ranker = ranker or MatchRanker(store, config.matching)
        self.notification_top_n = config.matching.notification_top_n
        self.max_workers = config.scheduler.max_workers

        self.state = SchedulerState.IDLE
        self._lock = threading.Lock()

    def run_scheduled_batch(self) -> BatchRunResult:
        """
        Run one batch.

        Returns:
            BatchRunResult with totals and per-preference outcomes

        Raises:
            SchedulerBusyError: A batch is already running on this scheduler
        """
        if not self._lock.acquire(blocking=False):
            raise SchedulerBusyError("A scheduled matching run is already in progress")

        self.state = SchedulerState.RUNNING
        try:
            return self._run()
        finally:
            self.state = SchedulerState.IDLE
            self._lock.release()

    def _run(self) -> BatchRunResult:
        run_id = str(uuid.uuid4())[:8]
        started_at = datetime.now(timezone.utc)
        logger.info(f"Starting scheduled AutoMatch run {run_id}")

        try:
            preferences = self.store.get_active_preferences()
        except Exception as e:
            logger.exception(f"Error in scheduled matching run {run_id}: {e}")
            logger.info(f"Scheduled AutoMatch run {run_id} failed. Found 0 total matches.")
            return BatchRunResult(
                run_id=run_id,
                status="FAILED",
                started_at=started_at,
                completed_at=datetime.now(timezone.utc),
                error=str(e),
            )

        preferences = [p for p in preferences if p.is_active and p.notification_enabled]

        if self.max_workers > 1 and len(preferences) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                results = list(executor.map(self._process_preference, preferences))
        else:
            results = [self._process_preference(p) for p in preferences]

        outcomes = [outcome for outcome, _ in results]
        outcomes.extend(self._rejected_outcomes())
        scores = [score for _, run_scores in results for score in run_scores]

        result = BatchRunResult(
            run_id=run_id,
            started_at=started_at,
            completed_at=datetime.now(timezone.utc),
            total_matches=sum(o.match_count for o in outcomes),
            users_processed=len(outcomes),
            failures=sum(1 for o in outcomes if not o.success),
            outcomes=outcomes,
            score_stats=_score_stats(scores),
        )

        logger.info(
            f"Scheduled AutoMatch run {run_id} completed. Found {result.total_matches} "
            f"total matches across {result.users_processed} users ({result.failures} failed)."
        )
        return result

    def _process_preference(
        self,
        preference: BuyerPreference,
    ) -> tuple[PreferenceOutcome, list[float]]:
        """Evaluate one preference; never raises."""
        try:
            matches = self.ranker.find_matches(preference)
        except Exception as e:
            logger.exception(f"Error processing matches for user {preference.user_id}: {e}")
            return PreferenceOutcome(
                preference_id=preference.preference_id,
                user_id=preference.user_id,
                success=False,
                error=str(e),
            ), []

        scores = [m.match_score for m in matches]
        if matches:
            self._record_history(preference.user_id, matches)

        notified = False
        if matches and preference.notification_enabled:
            notified = self._notify(preference.user_id, matches)

        outcome = PreferenceOutcome(
            preference_id=preference.preference_id,
            user_id=preference.user_id,
            success=True,
            match_count=len(matches),
            notified=notified,
        )

        if preference.preference_id is None:
            logger.warning(f"Preference for user {preference.user_id} has no id; last run not recorded")
            return outcome, scores

        try:
            self.store.update_preference_last_run(
                preference.preference_id, datetime.now(timezone.utc)
            )
        except Exception as e:
            logger.error(f"Could not record last run for preference {preference.preference_id}: {e}")
            outcome.success = False
            outcome.error = str(e)

        return outcome, scores

    def _rejected_outcomes(self) -> list[PreferenceOutcome]:
        """Stored preferences the store could not load count as failed buyers."""
        return [
            PreferenceOutcome(
                preference_id=rejected.preference_id,
                user_id=rejected.user_id,
                success=False,
                error=f"Invalid stored preference: {rejected.reason}",
            )
            for rejected in self.store.get_rejected_preferences()
        ]

    def _record_history(self, buyer_id: str, matches: list[MatchResult]) -> None:
        try:
            self.store.save_match_results(matches)
        except Exception as e:
            logger.warning(f"Could not save match history for buyer {buyer_id}: {e}")

    def _notify(self, buyer_id: str, matches: list[MatchResult]) -> bool:
        notification = build_match_notification(buyer_id, matches, top_n=self.notification_top_n)
        try:
            self.notifier.notify_matches(buyer_id, notification)
        except Exception as e:
            logger.warning(f"Failed to notify buyer {buyer_id} of matches: {e}")
            return False
        return True
