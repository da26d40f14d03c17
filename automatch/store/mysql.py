"""
MySQL catalog store for listings, buyer preferences and match history.
"""
import json
import logging
import math
import uuid
from datetime import datetime
from typing import Any, Optional

import mysql.connector
from mysql.connector.errors import InterfaceError, OperationalError
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)

from ..config import MySQLConfig, get_config
from ..models.filters import CandidateFilters
from ..models.listing import EventInfo, Listing, SectionInfo, SellerInfo
from ..models.matching import MatchResult
from ..models.preferences import BuyerPreference, RejectedPreference

from .base import CatalogStore


logger = logging.getLogger(__name__)


SCHEMA = [
    """
    CREATE TABLE IF NOT EXISTS events (
        id VARCHAR(36) PRIMARY KEY,
        name VARCHAR(255),
        venue VARCHAR(255),
        event_date DATETIME NOT NULL,
        category VARCHAR(64)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS sections (
        id VARCHAR(36) PRIMARY KEY,
        event_id VARCHAR(36) NOT NULL,
        name VARCHAR(255) NOT NULL,
        FOREIGN KEY (event_id) REFERENCES events(id) ON DELETE CASCADE
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS sellers (
        id VARCHAR(36) PRIMARY KEY,
        first_name VARCHAR(255),
        rating DECIMAL(3, 2),
        total_sales INT NOT NULL DEFAULT 0,
        member_since DATETIME
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS listings (
        id VARCHAR(36) PRIMARY KEY,
        event_id VARCHAR(36) NOT NULL,
        section_id VARCHAR(36) NOT NULL,
        seller_id VARCHAR(36) NOT NULL,
        price DECIMAL(10, 2) NOT NULL,
        available_quantity INT NOT NULL,
        status VARCHAR(16) NOT NULL DEFAULT 'ACTIVE',
        KEY idx_listing_match (status, event_id, price),
        FOREIGN KEY (event_id) REFERENCES events(id),
        FOREIGN KEY (section_id) REFERENCES sections(id),
        FOREIGN KEY (seller_id) REFERENCES sellers(id)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS buyer_preferences (
        id VARCHAR(36) PRIMARY KEY,
        user_id VARCHAR(36) NOT NULL,
        event_id VARCHAR(36),
        max_price DECIMAL(10, 2) NOT NULL,
        min_price DECIMAL(10, 2),
        preferred_sections_json TEXT,
        max_quantity INT NOT NULL,
        min_quantity INT NOT NULL DEFAULT 1,
        event_date DATETIME,
        venue VARCHAR(255),
        category VARCHAR(64),
        keywords_json TEXT,
        instant_buy_enabled BOOLEAN NOT NULL DEFAULT FALSE,
        notification_enabled BOOLEAN NOT NULL DEFAULT TRUE,
        is_active BOOLEAN NOT NULL DEFAULT TRUE,
        last_match_run DATETIME,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP,
        KEY idx_pref_user (user_id)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS match_results (
        id VARCHAR(36) PRIMARY KEY,
        buyer_id VARCHAR(36) NOT NULL,
        listing_id VARCHAR(36) NOT NULL,
        seller_id VARCHAR(36) NOT NULL,
        event_id VARCHAR(36) NOT NULL,
        match_score DOUBLE NOT NULL,
        criteria_json TEXT NOT NULL,
        recommended_price DECIMAL(10, 2) NOT NULL,
        confidence VARCHAR(8) NOT NULL,
        reasons_json TEXT,
        auto_approve_eligible BOOLEAN NOT NULL DEFAULT FALSE,
        is_viewed BOOLEAN NOT NULL DEFAULT FALSE,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        KEY idx_match_buyer (buyer_id, created_at)
    )
    """,
]

CANDIDATE_QUERY = """
    SELECT
        l.id AS listing_id, l.price, l.available_quantity, l.status,
        e.id AS event_id, e.name AS event_name, e.venue, e.event_date, e.category,
        s.id AS section_id, s.name AS section_name,
        u.id AS seller_id, u.first_name, u.rating, u.total_sales, u.member_since
    FROM listings l
    JOIN events e ON e.id = l.event_id
    JOIN sections s ON s.id = l.section_id
    JOIN sellers u ON u.id = l.seller_id
    WHERE {where}
    ORDER BY l.id
    LIMIT %s
"""

PREFERENCE_COLUMNS = (
    "id, user_id, event_id, max_price, min_price, preferred_sections_json, "
    "max_quantity, min_quantity, event_date, venue, category, keywords_json, "
    "instant_buy_enabled, notification_enabled, is_active, last_match_run"
)


def _row_to_listing(row: dict[str, Any]) -> Listing:
    return Listing(
        listing_id=row["listing_id"],
        price=row["price"],
        available_quantity=row["available_quantity"],
        status=row["status"],
        event=EventInfo(
            event_id=row["event_id"],
            name=row["event_name"],
            venue=row["venue"],
            event_date=row["event_date"],
            category=row["category"],
        ),
        section=SectionInfo(section_id=row["section_id"], name=row["section_name"]),
        seller=SellerInfo(
            seller_id=row["seller_id"],
            first_name=row["first_name"],
            rating=float(row["rating"]) if row["rating"] is not None else None,
            total_sales=row["total_sales"] or 0,
            member_since=row["member_since"],
        ),
    )


def _row_to_preference(row: dict[str, Any]) -> BuyerPreference:
    return BuyerPreference(
        preference_id=row["id"],
        user_id=row["user_id"],
        event_id=row["event_id"],
        max_price=float(row["max_price"]),
        min_price=float(row["min_price"]) if row["min_price"] is not None else None,
        preferred_sections=json.loads(row["preferred_sections_json"]) if row["preferred_sections_json"] else [],
        max_quantity=row["max_quantity"],
        min_quantity=row["min_quantity"],
        event_date=row["event_date"],
        venue=row["venue"],
        category=row["category"],
        keywords=json.loads(row["keywords_json"]) if row["keywords_json"] else [],
        instant_buy_enabled=bool(row["instant_buy_enabled"]),
        notification_enabled=bool(row["notification_enabled"]),
        is_active=bool(row["is_active"]),
        last_match_run=row["last_match_run"],
    )


class MySQLCatalogStore(CatalogStore):
    """
    Catalog store backed by MySQL.
    Hard filters run in SQL; section names compare byte-exact.
    """

    def __init__(self, config: Optional[MySQLConfig] = None):
        self.config = config or get_config().mysql
        self._rejected: list[RejectedPreference] = []

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=8),
        retry=retry_if_exception_type((InterfaceError, OperationalError)),
        reraise=True,
        before_sleep=lambda retry_state: logger.warning(
            f"MySQL connection retry attempt {retry_state.attempt_number}"
        ),
    )
    def get_connection(self):
        """Get a MySQL database connection."""
        return mysql.connector.connect(
            host=self.config.host,
            port=self.config.port,
            user=self.config.user,
            password=self.config.password,
            database=self.config.database,
            connection_timeout=self.config.connect_timeout,
        )

    def init_db(self) -> None:
        """Create tables if they don't exist."""
        conn = self.get_connection()
        try:
            cursor = conn.cursor()
            for statement in SCHEMA:
                cursor.execute(statement)
            conn.commit()
        finally:
            conn.close()

    # === CatalogStore ===

    def find_candidate_listings(self, filters: CandidateFilters) -> list[Listing]:
        clauses = [
            "l.status = 'ACTIVE'",
            "l.available_quantity > 0",
            "l.available_quantity >= %s",
            "l.price BETWEEN %s AND %s",
        ]
        params: list[Any] = [filters.min_quantity, filters.min_price, filters.max_price]

        if filters.event_id:
            clauses.append("l.event_id = %s")
            params.append(filters.event_id)

        if filters.sections:
            placeholders = ", ".join(["%s"] * len(filters.sections))
            clauses.append(f"BINARY s.name IN ({placeholders})")
            params.extend(filters.sections)

        params.append(filters.limit)
        query = CANDIDATE_QUERY.format(where=" AND ".join(clauses))

        conn = self.get_connection()
        try:
            cursor = conn.cursor(dictionary=True)
            cursor.execute(query, params)
            rows = cursor.fetchall()
        finally:
            conn.close()

        return [_row_to_listing(row) for row in rows]

    def get_active_preferences(self) -> list[BuyerPreference]:
        conn = self.get_connection()
        try:
            cursor = conn.cursor(dictionary=True)
            cursor.execute(
                f"SELECT {PREFERENCE_COLUMNS} FROM buyer_preferences "
                "WHERE is_active = TRUE AND notification_enabled = TRUE ORDER BY created_at"
            )
            rows = cursor.fetchall()
        finally:
            conn.close()

        preferences = []
        rejected = []
        for row in rows:
            try:
                preferences.append(_row_to_preference(row))
            except (ValueError, TypeError) as e:
                logger.error(f"Skipping invalid stored preference {row['id']}: {e}")
                rejected.append(RejectedPreference(
                    preference_id=row["id"], user_id=row["user_id"] or "", reason=str(e),
                ))
        self._rejected = rejected
        return preferences

    def get_rejected_preferences(self) -> list[RejectedPreference]:
        return list(self._rejected)

    def update_preference_last_run(self, preference_id: str, timestamp: datetime) -> None:
        conn = self.get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "UPDATE buyer_preferences SET last_match_run = %s WHERE id = %s",
                (timestamp, preference_id),
            )
            conn.commit()
        finally:
            conn.close()

    # === Preference management ===

    def create_preference(self, preference: BuyerPreference) -> BuyerPreference:
        """
        Insert a new preference.

        Returns:
            The stored preference with its generated id
        """
        preference_id = preference.preference_id or str(uuid.uuid4())
        conn = self.get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO buyer_preferences (
                    id, user_id, event_id, max_price, min_price, preferred_sections_json,
                    max_quantity, min_quantity, event_date, venue, category, keywords_json,
                    instant_buy_enabled, notification_enabled, is_active
                )
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                """,
                (
                    preference_id,
                    preference.user_id,
                    preference.event_id,
                    preference.max_price,
                    preference.min_price,
                    json.dumps(preference.preferred_sections),
                    preference.max_quantity,
                    preference.min_quantity,
                    preference.event_date,
                    preference.venue,
                    preference.category,
                    json.dumps(preference.keywords),
                    preference.instant_buy_enabled,
                    preference.notification_enabled,
                    preference.is_active,
                ),
            )
            conn.commit()
        finally:
            conn.close()

        logger.info(f"Buyer preferences created for user: {preference.user_id}")
        return preference.model_copy(update={"preference_id": preference_id})

    def get_preferences_for_buyer(self, user_id: str) -> list[BuyerPreference]:
        """Get all of a buyer's preferences, newest first."""
        conn = self.get_connection()
        try:
            cursor = conn.cursor(dictionary=True)
            cursor.execute(
                f"SELECT {PREFERENCE_COLUMNS} FROM buyer_preferences "
                "WHERE user_id = %s ORDER BY created_at DESC",
                (user_id,),
            )
            rows = cursor.fetchall()
        finally:
            conn.close()
        return [_row_to_preference(row) for row in rows]

    def deactivate_preference(self, preference_id: str, user_id: str) -> bool:
        """Soft-delete a buyer's preference. Returns False if not found."""
        conn = self.get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "UPDATE buyer_preferences SET is_active = FALSE WHERE id = %s AND user_id = %s",
                (preference_id, user_id),
            )
            updated = cursor.rowcount > 0
            conn.commit()
        finally:
            conn.close()
        return updated

    # === Match history ===

    def save_match_results(self, matches: list[MatchResult]) -> int:
        """
        Persist matches as history.

        Returns:
            Number of rows written
        """
        if not matches:
            return 0

        rows = [
            (
                str(uuid.uuid4()),
                m.buyer_id,
                m.listing_id,
                m.seller_id,
                m.event_id,
                m.match_score,
                m.match_criteria.model_dump_json(),
                m.recommended_price,
                m.confidence,
                json.dumps(m.reasons),
                m.auto_approve_eligible,
            )
            for m in matches
        ]

        conn = self.get_connection()
        try:
            cursor = conn.cursor()
            cursor.executemany(
                """
                INSERT INTO match_results (
                    id, buyer_id, listing_id, seller_id, event_id, match_score, criteria_json,
                    recommended_price, confidence, reasons_json, auto_approve_eligible
                )
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                """,
                rows,
            )
            conn.commit()
        finally:
            conn.close()
        return len(rows)

    def get_match_history(
        self,
        buyer_id: str,
        page: int = 1,
        limit: int = 20,
    ) -> dict[str, Any]:
        """Page through a buyer's stored matches, newest first."""
        offset = (max(page, 1) - 1) * limit
        conn = self.get_connection()
        try:
            cursor = conn.cursor(dictionary=True)
            cursor.execute(
                """
                SELECT id, listing_id, seller_id, event_id, match_score, criteria_json,
                       recommended_price, confidence, reasons_json, auto_approve_eligible,
                       is_viewed, created_at
                FROM match_results
                WHERE buyer_id = %s
                ORDER BY created_at DESC
                LIMIT %s OFFSET %s
                """,
                (buyer_id, limit, offset),
            )
            rows = cursor.fetchall()
            cursor.execute("SELECT COUNT(*) AS total FROM match_results WHERE buyer_id = %s", (buyer_id,))
            total = cursor.fetchone()["total"]
        finally:
            conn.close()

        matches = []
        for row in rows:
            matches.append({
                "id": row["id"],
                "listing_id": row["listing_id"],
                "seller_id": row["seller_id"],
                "event_id": row["event_id"],
                "match_score": float(row["match_score"]),
                "match_criteria": json.loads(row["criteria_json"]),
                "recommended_price": float(row["recommended_price"]),
                "confidence": row["confidence"],
                "reasons": json.loads(row["reasons_json"]) if row["reasons_json"] else [],
                "auto_approve_eligible": bool(row["auto_approve_eligible"]),
                "is_viewed": bool(row["is_viewed"]),
                "created_at": row["created_at"].isoformat() if row["created_at"] else None,
            })

        return {
            "matches": matches,
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "total_pages": math.ceil(total / limit) if limit else 0,
            },
        }

    def mark_match_viewed(self, match_id: str, buyer_id: str) -> bool:
        """Flag a stored match as seen by its buyer."""
        conn = self.get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "UPDATE match_results SET is_viewed = TRUE WHERE id = %s AND buyer_id = %s",
                (match_id, buyer_id),
            )
            updated = cursor.rowcount > 0
            conn.commit()
        finally:
            conn.close()
        return updated
