"""
PostgreSQL repository implementations.

Raw SQL data mappers over psycopg2. Every public method runs in its own
transaction borrowed from ``Database.connection()``.
"""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime

import psycopg2
import psycopg2.errors
from psycopg2.extras import RealDictCursor, execute_values

from eventmaster.schemas.event import Event, Image
from eventmaster.schemas.participant import Participant, RegistrationsPerDay
from eventmaster.schemas.user import User

from .base import (
    SORTABLE_FIELDS,
    DuplicateExternalIDError,
    EventRepository,
    ImageRepository,
    ParticipantRepository,
    RepositoryError,
    UserRepository,
)
from .database import Database

logger = logging.getLogger(__name__)

_EVENT_COLUMNS = (
    "id, title, description, organizer, event_date, latitude, longitude, "
    "user_id, location, external_id, external_url, event_type, is_external, "
    "created_at, updated_at"
)


def _new_id() -> str:
    return str(uuid.uuid4())


def _is_uuid(value: str) -> bool:
    try:
        uuid.UUID(value)
    except (TypeError, ValueError):
        return False
    return True


def _row_to_event(row: dict) -> Event:
    data = dict(row)
    data["id"] = str(data["id"])
    if data.get("user_id") is not None:
        data["user_id"] = str(data["user_id"])
    data["latitude"] = float(data["latitude"])
    data["longitude"] = float(data["longitude"])
    return Event(**data)


class _PostgresRepository:
    def __init__(self, database: Database):
        self.db = database

    def _fetchone(self, sql: str, params: tuple) -> dict | None:
        try:
            with self.db.connection() as conn, conn.cursor(
                cursor_factory=RealDictCursor
            ) as cur:
                cur.execute(sql, params)
                return cur.fetchone()
        except psycopg2.Error as e:
            raise RepositoryError(str(e)) from e

    def _fetchall(self, sql: str, params: tuple) -> list[dict]:
        try:
            with self.db.connection() as conn, conn.cursor(
                cursor_factory=RealDictCursor
            ) as cur:
                cur.execute(sql, params)
                return cur.fetchall()
        except psycopg2.Error as e:
            raise RepositoryError(str(e)) from e


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


class PostgresEventRepository(_PostgresRepository, EventRepository):
    """Events table plus the event_images association."""

    def create(self, event: Event) -> Event:
        event_id = _new_id()
        try:
            with self.db.connection() as conn, conn.cursor(
                cursor_factory=RealDictCursor
            ) as cur:
                cur.execute(
                    f"""
                    INSERT INTO events (
                        id, title, description, organizer, event_date,
                        latitude, longitude, user_id, location, external_id,
                        external_url, event_type, is_external
                    )
                    VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                    RETURNING {_EVENT_COLUMNS}
                    """,
                    (
                        event_id,
                        event.title,
                        event.description,
                        event.organizer,
                        event.event_date,
                        event.latitude,
                        event.longitude,
                        event.user_id,
                        event.location,
                        event.external_id,
                        event.external_url,
                        event.event_type,
                        event.is_external,
                    ),
                )
                row = cur.fetchone()

                image_ids = [img.id for img in event.images if img.id]
                if image_ids:
                    execute_values(
                        cur,
                        "INSERT INTO event_images (event_id, image_id) VALUES %s "
                        "ON CONFLICT DO NOTHING",
                        [(event_id, image_id) for image_id in image_ids],
                    )
        except psycopg2.errors.UniqueViolation as e:
            raise DuplicateExternalIDError(event.external_id) from e
        except psycopg2.Error as e:
            raise RepositoryError(f"Failed to create event '{event.title}': {e}") from e

        created = _row_to_event(row)
        created.images = list(event.images)
        return created

    def find_by_id(self, event_id: str) -> Event | None:
        if not _is_uuid(event_id):
            return None
        row = self._fetchone(
            f"SELECT {_EVENT_COLUMNS} FROM events WHERE id = %s", (event_id,)
        )
        if row is None:
            return None
        event = _row_to_event(row)
        image_rows = self._fetchall(
            """
            SELECT i.id, i.link, i.created_at, i.updated_at
            FROM images i
            JOIN event_images ei ON ei.image_id = i.id
            WHERE ei.event_id = %s
            ORDER BY i.created_at
            """,
            (event_id,),
        )
        event.images = [Image(**{**r, "id": str(r["id"])}) for r in image_rows]
        return event

    def find_by_external_id(self, external_id: str) -> Event | None:
        if not external_id:
            return None
        row = self._fetchone(
            f"SELECT {_EVENT_COLUMNS} FROM events WHERE external_id = %s LIMIT 1",
            (external_id,),
        )
        return _row_to_event(row) if row else None

    def find_paginated(
        self,
        page: int = 1,
        limit: int = 10,
        sort_by: str = "eventDate",
        sort_order: str = "ASC",
    ) -> tuple[list[Event], int]:
        column = SORTABLE_FIELDS.get(sort_by)
        if column is None:
            raise ValueError(f"Unsupported sort field: {sort_by}")
        direction = sort_order.upper()
        if direction not in ("ASC", "DESC"):
            raise ValueError(f"Unsupported sort order: {sort_order}")
        if page < 1 or limit < 1:
            raise ValueError("page and limit must be positive")

        # column and direction are whitelisted above
        rows = self._fetchall(
            f"SELECT {_EVENT_COLUMNS} FROM events "
            f"ORDER BY {column} {direction}, id "
            "LIMIT %s OFFSET %s",
            (limit, (page - 1) * limit),
        )
        total = self._fetchone("SELECT COUNT(*) AS total FROM events", ())
        return [_row_to_event(r) for r in rows], int(total["total"]) if total else 0


# ---------------------------------------------------------------------------
# Images
# ---------------------------------------------------------------------------


class PostgresImageRepository(_PostgresRepository, ImageRepository):
    def find_by_link(self, link: str) -> Image | None:
        row = self._fetchone(
            "SELECT id, link, created_at, updated_at FROM images "
            "WHERE link = %s ORDER BY created_at LIMIT 1",
            (link,),
        )
        return Image(**{**row, "id": str(row["id"])}) if row else None

    def create(self, image: Image) -> Image:
        row = self._fetchone(
            "INSERT INTO images (id, link) VALUES (%s, %s) "
            "RETURNING id, link, created_at, updated_at",
            (_new_id(), image.link),
        )
        return Image(**{**row, "id": str(row["id"])})

    def attach_to_event(self, event_id: str, image_ids: list[str]) -> None:
        if not image_ids:
            return
        try:
            with self.db.connection() as conn, conn.cursor() as cur:
                execute_values(
                    cur,
                    "INSERT INTO event_images (event_id, image_id) VALUES %s "
                    "ON CONFLICT DO NOTHING",
                    [(event_id, image_id) for image_id in image_ids],
                )
        except psycopg2.Error as e:
            raise RepositoryError(f"Failed to attach images to {event_id}: {e}") from e

    def find_by_event_id(self, event_id: str) -> list[Image]:
        rows = self._fetchall(
            """
            SELECT i.id, i.link, i.created_at, i.updated_at
            FROM images i
            JOIN event_images ei ON ei.image_id = i.id
            WHERE ei.event_id = %s
            ORDER BY i.created_at
            """,
            (event_id,),
        )
        return [Image(**{**r, "id": str(r["id"])}) for r in rows]


# ---------------------------------------------------------------------------
# Participants
# ---------------------------------------------------------------------------


class PostgresParticipantRepository(_PostgresRepository, ParticipantRepository):
    def create_in_batches(
        self, participants: list[Participant], batch_size: int
    ) -> list[Participant]:
        if not participants:
            return []
        now = datetime.now(UTC)
        created = [
            p.model_copy(update={"id": _new_id(), "created_at": now, "updated_at": now})
            for p in participants
        ]
        rows = [
            (
                p.id,
                p.full_name,
                p.email,
                p.date_of_birth,
                p.source_of_discovery.value,
                p.event_id,
                p.created_at,
                p.updated_at,
            )
            for p in created
        ]
        try:
            with self.db.connection() as conn, conn.cursor() as cur:
                execute_values(
                    cur,
                    """
                    INSERT INTO participants (
                        id, full_name, email, date_of_birth,
                        source_of_discovery, event_id, created_at, updated_at
                    ) VALUES %s
                    """,
                    rows,
                    page_size=batch_size,
                )
        except psycopg2.Error as e:
            raise RepositoryError(f"Failed to insert participants: {e}") from e
        return created

    def find_by_event_id(self, event_id: str) -> list[Participant]:
        rows = self._fetchall(
            """
            SELECT id, full_name, email, date_of_birth, source_of_discovery,
                   event_id, created_at, updated_at
            FROM participants
            WHERE event_id = %s
            ORDER BY created_at, full_name
            """,
            (event_id,),
        )
        return [
            Participant(**{**r, "id": str(r["id"]), "event_id": str(r["event_id"])})
            for r in rows
        ]

    def count_by_event_id(self, event_id: str) -> int:
        row = self._fetchone(
            "SELECT COUNT(*) AS total FROM participants WHERE event_id = %s",
            (event_id,),
        )
        return int(row["total"]) if row else 0

    def registrations_per_day(self, event_id: str) -> list[RegistrationsPerDay]:
        rows = self._fetchall(
            """
            SELECT DATE(created_at) AS day, COUNT(*) AS count
            FROM participants
            WHERE event_id = %s
            GROUP BY DATE(created_at)
            ORDER BY day
            """,
            (event_id,),
        )
        return [RegistrationsPerDay(day=r["day"], count=int(r["count"])) for r in rows]


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


class PostgresUserRepository(_PostgresRepository, UserRepository):
    def find_by_email(self, email: str) -> User | None:
        row = self._fetchone(
            "SELECT id, email, created_at, updated_at FROM users WHERE email = %s",
            (email,),
        )
        return User(**{**row, "id": str(row["id"])}) if row else None

    def create(self, user: User) -> User:
        row = self._fetchone(
            "INSERT INTO users (id, email) VALUES (%s, %s) "
            "RETURNING id, email, created_at, updated_at",
            (_new_id(), user.email),
        )
        return User(**{**row, "id": str(row["id"])})
