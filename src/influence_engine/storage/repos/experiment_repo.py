from __future__ import annotations

from influence_engine.models.experiment import ExperimentAssignment
from influence_engine.storage.database import Database


class ExperimentRepo:
    """Write-once storage for experiment bucket assignments."""

    def __init__(self, db: Database) -> None:
        self.db = db

    def get(self, uid: str, experiment_name: str) -> ExperimentAssignment | None:
        with self.db.get_connection() as conn:
            row = conn.execute(
                "SELECT * FROM experiment_assignments WHERE uid = ? AND experiment_name = ?",
                (uid, experiment_name),
            ).fetchone()
        return ExperimentAssignment.model_validate(dict(row)) if row else None

    def insert_if_absent(self, assignment: ExperimentAssignment) -> ExperimentAssignment:
        """Store the assignment unless one exists; return whichever is stored."""
        with self.db.get_connection() as conn:
            conn.execute(
                "INSERT OR IGNORE INTO experiment_assignments "
                "(uid, experiment_name, bucket, assigned_at) VALUES (?, ?, ?, ?)",
                (
                    assignment.uid,
                    assignment.experiment_name,
                    assignment.bucket.value,
                    assignment.assigned_at.isoformat(),
                ),
            )
            row = conn.execute(
                "SELECT * FROM experiment_assignments WHERE uid = ? AND experiment_name = ?",
                (assignment.uid, assignment.experiment_name),
            ).fetchone()
        return ExperimentAssignment.model_validate(dict(row))

    def bucket_counts(self, experiment_name: str) -> dict[str, int]:
        with self.db.get_connection() as conn:
            rows = conn.execute(
                "SELECT bucket, COUNT(*) as cnt FROM experiment_assignments "
                "WHERE experiment_name = ? GROUP BY bucket",
                (experiment_name,),
            ).fetchall()
        return {row["bucket"]: row["cnt"] for row in rows}
