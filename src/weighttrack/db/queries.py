"""Database queries for weight entries and goals."""

from __future__ import annotations

import logging
import sqlite3
from datetime import date, datetime, timedelta
from typing import Optional

from weighttrack.errors import NotFoundError
from weighttrack.tracking.models import (
    GoalSpec,
    GoalStatus,
    WeightEntry,
    WeightGoal,
    WeightSample,
)

logger = logging.getLogger(__name__)


def _row_to_entry(row: sqlite3.Row) -> WeightEntry:
    return WeightEntry(
        entry_id=row["entry_id"],
        entry_date=date.fromisoformat(row["entry_date"]),
        weight_kg=row["weight_kg"],
        created_at=datetime.fromisoformat(row["created_at"]) if row["created_at"] else None,
    )


def _row_to_goal(row: sqlite3.Row) -> WeightGoal:
    return WeightGoal(
        goal_id=row["goal_id"],
        target_weight_kg=row["target_weight_kg"],
        goal_type=row["goal_type"],
        status=row["status"],
        description=row["description"],
        target_date=date.fromisoformat(row["target_date"]) if row["target_date"] else None,
        starting_weight_kg=row["starting_weight_kg"],
        created_date=date.fromisoformat(row["created_date"]),
    )


class WeightQueries:
    """Database queries for weight log entries."""

    @staticmethod
    def add_entry(
        conn: sqlite3.Connection,
        weight_kg: float,
        entry_date: date,
    ) -> WeightEntry:
        """Add a weight entry. Entries on an existing date are kept alongside it."""
        cursor = conn.execute(
            "INSERT INTO weight_entries (entry_date, weight_kg) VALUES (?, ?)",
            (entry_date.isoformat(), weight_kg),
        )
        conn.commit()
        logger.info("Logged %.2f kg on %s", weight_kg, entry_date)

        return WeightEntry(
            entry_id=cursor.lastrowid,
            entry_date=entry_date,
            weight_kg=weight_kg,
        )

    @staticmethod
    def get_entry(conn: sqlite3.Connection, entry_id: int) -> WeightEntry:
        """Get an entry by ID. Raises NotFoundError if it does not exist."""
        row = conn.execute(
            """
            SELECT entry_id, entry_date, weight_kg, created_at
            FROM weight_entries WHERE entry_id = ?
            """,
            (entry_id,),
        ).fetchone()

        if row is None:
            raise NotFoundError(f"Weight entry {entry_id} not found")
        return _row_to_entry(row)

    @staticmethod
    def delete_entry(conn: sqlite3.Connection, entry_id: int) -> WeightEntry:
        """Delete an entry and return what was removed."""
        entry = WeightQueries.get_entry(conn, entry_id)
        conn.execute("DELETE FROM weight_entries WHERE entry_id = ?", (entry_id,))
        conn.commit()
        logger.info("Deleted weight entry %d", entry_id)
        return entry

    @staticmethod
    def get_history(
        conn: sqlite3.Connection,
        days: Optional[int] = None,
        end_date: Optional[date] = None,
    ) -> list[WeightEntry]:
        """
        Get weight history in chronological order.

        Args:
            days: If set, only entries within this many days of end_date
            end_date: Reference date for ``days`` (default: latest entry date)
        """
        query = """
            SELECT entry_id, entry_date, weight_kg, created_at
            FROM weight_entries
        """
        params: list = []

        if days is not None:
            if end_date is None:
                latest = WeightQueries.get_latest_entry(conn)
                end_date = latest.entry_date if latest else date.today()
            query += " WHERE entry_date >= ?"
            params.append((end_date - timedelta(days=days)).isoformat())

        query += " ORDER BY entry_date, entry_id"

        rows = conn.execute(query, params).fetchall()
        return [_row_to_entry(row) for row in rows]

    @staticmethod
    def get_samples(conn: sqlite3.Connection) -> list[WeightSample]:
        """All entries as prediction samples, ordered by date."""
        return [entry.to_sample() for entry in WeightQueries.get_history(conn)]

    @staticmethod
    def get_latest_entry(conn: sqlite3.Connection) -> Optional[WeightEntry]:
        """Get the most recent weight entry."""
        row = conn.execute(
            """
            SELECT entry_id, entry_date, weight_kg, created_at
            FROM weight_entries
            ORDER BY entry_date DESC, entry_id DESC LIMIT 1
            """
        ).fetchone()

        return _row_to_entry(row) if row else None


class GoalQueries:
    """Database queries for weight goals."""

    @staticmethod
    def create_goal(
        conn: sqlite3.Connection,
        target_weight_kg: float,
        goal_type: str = "lose",
        description: Optional[str] = None,
        target_date: Optional[date] = None,
        starting_weight_kg: Optional[float] = None,
        created_date: Optional[date] = None,
    ) -> WeightGoal:
        """
        Create an active goal and return it.

        The starting weight defaults to the latest logged weight.
        """
        if starting_weight_kg is None:
            latest = WeightQueries.get_latest_entry(conn)
            starting_weight_kg = latest.weight_kg if latest else None

        goal = WeightGoal(
            goal_id=None,
            target_weight_kg=target_weight_kg,
            goal_type=goal_type,
            description=description,
            target_date=target_date,
            starting_weight_kg=starting_weight_kg,
            created_date=created_date or date.today(),
        )

        cursor = conn.execute(
            """
            INSERT INTO weight_goals (target_weight_kg, target_date, goal_type, status,
                                      description, starting_weight_kg, created_date)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                goal.target_weight_kg,
                goal.target_date.isoformat() if goal.target_date else None,
                goal.goal_type,
                goal.status,
                goal.description,
                goal.starting_weight_kg,
                goal.created_date.isoformat(),  # type: ignore[union-attr]
            ),
        )
        conn.commit()
        goal.goal_id = cursor.lastrowid
        logger.info("Created %s goal %d: %.2f kg", goal.goal_type, goal.goal_id, target_weight_kg)
        return goal

    @staticmethod
    def get_goal(conn: sqlite3.Connection, goal_id: int) -> WeightGoal:
        """Get a goal by ID. Raises NotFoundError if it does not exist."""
        row = conn.execute(
            "SELECT * FROM weight_goals WHERE goal_id = ?",
            (goal_id,),
        ).fetchone()

        if row is None:
            raise NotFoundError(f"Goal {goal_id} not found")
        return _row_to_goal(row)

    @staticmethod
    def list_goals(
        conn: sqlite3.Connection,
        include_inactive: bool = False,
    ) -> list[WeightGoal]:
        """List goals, newest first. Only active goals unless include_inactive."""
        query = "SELECT * FROM weight_goals"
        params: list = []
        if not include_inactive:
            query += " WHERE status = ?"
            params.append(GoalStatus.ACTIVE.value)
        query += " ORDER BY created_date DESC, goal_id DESC"

        rows = conn.execute(query, params).fetchall()
        return [_row_to_goal(row) for row in rows]

    @staticmethod
    def get_active_specs(conn: sqlite3.Connection) -> list[GoalSpec]:
        """Active goals as prediction engine inputs, oldest first."""
        goals = GoalQueries.list_goals(conn)
        return [goal.to_spec() for goal in reversed(goals)]

    @staticmethod
    def set_status(conn: sqlite3.Connection, goal_id: int, status: str) -> WeightGoal:
        """Mark a goal active, achieved or abandoned."""
        valid = tuple(s.value for s in GoalStatus)
        if status not in valid:
            raise ValueError(f"status must be one of {valid}, got '{status}'")

        goal = GoalQueries.get_goal(conn, goal_id)
        conn.execute(
            "UPDATE weight_goals SET status = ? WHERE goal_id = ?",
            (status, goal_id),
        )
        conn.commit()
        goal.status = status
        logger.info("Goal %d marked %s", goal_id, status)
        return goal

    @staticmethod
    def delete_goal(conn: sqlite3.Connection, goal_id: int) -> None:
        """Delete a goal. Raises NotFoundError if it does not exist."""
        GoalQueries.get_goal(conn, goal_id)
        conn.execute("DELETE FROM weight_goals WHERE goal_id = ?", (goal_id,))
        conn.commit()
        logger.info("Deleted goal %d", goal_id)
