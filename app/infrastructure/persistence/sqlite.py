import logging
import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterator, List, Optional
from uuid import UUID

from ...domain.errors import StoreError
from ...domain.models import Subscription
from ...domain.ports.persistence import PersistenceGateway

logger = logging.getLogger(__name__)


class SQLitePersistence(PersistenceGateway):
    """SQLite-backed implementation of the persistence gateway.

    Timestamps are stored as second-precision ISO-8601 UTC text, so string
    comparison in SQL orders them chronologically.
    """

    def __init__(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        try:
            self._conn = sqlite3.connect(path, check_same_thread=False)
        except sqlite3.Error as exc:
            raise StoreError(f"Unable to open database at {path}: {exc}") from exc
        self._conn.row_factory = sqlite3.Row
        self._lock = threading.Lock()
        self._path = path
        self._initialize()

    def _initialize(self) -> None:
        with self._transaction():
            self._conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS subscriptions (
                    id TEXT PRIMARY KEY,
                    service_name TEXT NOT NULL,
                    price INTEGER NOT NULL CHECK (price >= 1),
                    user_id TEXT NOT NULL,
                    start_date TEXT NOT NULL,
                    end_date TEXT,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );

                CREATE INDEX IF NOT EXISTS idx_subscriptions_user_id
                    ON subscriptions(user_id);

                CREATE INDEX IF NOT EXISTS idx_subscriptions_start_date
                    ON subscriptions(start_date);
                """
            )
        self._apply_migrations()
        logger.info("SQLite store ready at %s", self._path)

    def _apply_migrations(self) -> None:
        with self._transaction():
            cur = self._conn.execute("PRAGMA table_info(subscriptions)")
            columns = {row[1] for row in cur.fetchall()}
        # Databases created before audit columns existed.
        for column in ("created_at", "updated_at"):
            if column not in columns:
                with self._transaction():
                    self._conn.execute(f"ALTER TABLE subscriptions ADD COLUMN {column} TEXT")

    @contextmanager
    def _transaction(self) -> Iterator[None]:
        try:
            with self._lock, self._conn:
                yield
        except (sqlite3.Error, OverflowError) as exc:
            # OverflowError: an int beyond 64 bits bound as a parameter.
            raise StoreError(f"Subscription store failure: {exc}") from exc

    def close(self) -> None:
        self._conn.close()

    def ping(self) -> bool:
        try:
            with self._transaction():
                self._conn.execute("SELECT 1").fetchone()
        except StoreError:
            logger.warning("SQLite store ping failed", exc_info=True)
            return False
        return True

    # SubscriptionRepository API --------------------------------------------
    def insert(self, subscription: Subscription) -> Subscription:
        now = self._now()
        with self._transaction():
            self._conn.execute(
                """
                INSERT INTO subscriptions (
                    id, service_name, price, user_id, start_date, end_date,
                    created_at, updated_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    str(subscription.id),
                    subscription.service_name,
                    subscription.price,
                    str(subscription.user_id),
                    self._format_datetime(subscription.start_date),
                    self._format_optional(subscription.end_date),
                    now,
                    now,
                ),
            )
            cur = self._conn.execute(
                "SELECT * FROM subscriptions WHERE id = ?", (str(subscription.id),)
            )
            row = cur.fetchone()
        if not row:
            raise StoreError("Failed to persist subscription.")
        return self._row_to_subscription(row)

    def select_by_id(self, subscription_id: UUID) -> Optional[Subscription]:
        with self._transaction():
            cur = self._conn.execute(
                "SELECT * FROM subscriptions WHERE id = ?", (str(subscription_id),)
            )
            row = cur.fetchone()
        return self._row_to_subscription(row) if row else None

    def update_by_id(self, subscription: Subscription) -> int:
        with self._transaction():
            cur = self._conn.execute(
                """
                UPDATE subscriptions
                SET service_name = ?, price = ?, start_date = ?, end_date = ?,
                    updated_at = ?
                WHERE id = ?
                """,
                (
                    subscription.service_name,
                    subscription.price,
                    self._format_datetime(subscription.start_date),
                    self._format_optional(subscription.end_date),
                    self._now(),
                    str(subscription.id),
                ),
            )
            return cur.rowcount

    def delete_by_id(self, subscription_id: UUID) -> int:
        with self._transaction():
            cur = self._conn.execute(
                "DELETE FROM subscriptions WHERE id = ?", (str(subscription_id),)
            )
            return cur.rowcount

    def select_by_user(self, user_id: UUID) -> List[Subscription]:
        with self._transaction():
            cur = self._conn.execute(
                """
                SELECT * FROM subscriptions
                WHERE user_id = ?
                ORDER BY start_date DESC, created_at DESC
                """,
                (str(user_id),),
            )
            rows = cur.fetchall()
        return [self._row_to_subscription(row) for row in rows]

    def sum_by_overlap(
        self,
        window_start: datetime,
        window_end: datetime,
        user_id: Optional[UUID] = None,
        service_name: Optional[str] = None,
    ) -> int:
        query = """
            SELECT COALESCE(SUM(price), 0) AS total
            FROM subscriptions
            WHERE start_date <= ?
              AND (end_date IS NULL OR end_date >= ?)
        """
        params: List[Any] = [
            self._format_datetime(window_end),
            self._format_datetime(window_start),
        ]
        if user_id is not None:
            query += " AND user_id = ?"
            params.append(str(user_id))
        if service_name is not None:
            query += " AND service_name = ?"
            params.append(service_name)
        with self._transaction():
            cur = self._conn.execute(query, params)
            row = cur.fetchone()
        return int(row["total"]) if row else 0

    # Helpers ----------------------------------------------------------------
    @staticmethod
    def _now() -> str:
        return datetime.now(timezone.utc).replace(microsecond=0).isoformat()

    @staticmethod
    def _format_datetime(value: datetime) -> str:
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc).replace(microsecond=0).isoformat()

    def _format_optional(self, value: Optional[datetime]) -> Optional[str]:
        return self._format_datetime(value) if value is not None else None

    @staticmethod
    def _parse_datetime(value: Optional[str]) -> Optional[datetime]:
        if not value:
            return None
        result = datetime.fromisoformat(value)
        if result.tzinfo is None:
            return result.replace(tzinfo=timezone.utc)
        return result.astimezone(timezone.utc)

    def _row_to_subscription(self, row: sqlite3.Row) -> Subscription:
        return Subscription(
            id=UUID(row["id"]),
            service_name=row["service_name"],
            price=row["price"],
            user_id=UUID(row["user_id"]),
            start_date=self._parse_datetime(row["start_date"]),
            end_date=self._parse_datetime(row["end_date"]),
            created_at=self._parse_datetime(row["created_at"]),
            updated_at=self._parse_datetime(row["updated_at"]),
        )
