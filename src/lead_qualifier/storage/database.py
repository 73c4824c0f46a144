"""SQLite storage for computed lead scores."""

import json
import sqlite3
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Generator, List, Optional

from ..core.models import Classification
from ..core.scorer import ScoreFactor, ScoreResult


class ScoreDatabase:
    """SQLite database of score results keyed by lead identifier."""

    def __init__(self, db_path: Optional[Path] = None):
        """Initialize database connection."""
        if db_path is None:
            db_path = Path.home() / ".lead-qualifier" / "scores.db"

        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        self._init_db()

    @contextmanager
    def _get_connection(self) -> Generator[sqlite3.Connection, None, None]:
        """Get a database connection with row factory."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_db(self):
        """Initialize database schema."""
        with self._get_connection() as conn:
            cursor = conn.cursor()

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS lead_scores (
                    id TEXT PRIMARY KEY,
                    lead_id TEXT NOT NULL,

                    total_score INTEGER NOT NULL,
                    classification TEXT NOT NULL,
                    confidence INTEGER NOT NULL,

                    company_score REAL,
                    budget_score REAL,
                    timeline_score REAL,
                    pain_point_score REAL,
                    tech_compatibility_score REAL,
                    engagement_score REAL,

                    completeness REAL,
                    consistency REAL,

                    factors TEXT,
                    version TEXT,
                    calculated_at TIMESTAMP NOT NULL
                )
            """)

            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_lead_scores_lead ON lead_scores(lead_id, calculated_at DESC)
            """)
            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_lead_scores_classification ON lead_scores(classification)
            """)

    def _row_to_result(self, row: sqlite3.Row) -> ScoreResult:
        """Convert a database row to a ScoreResult."""
        factors = [ScoreFactor(**f) for f in json.loads(row["factors"] or "[]")]
        return ScoreResult(
            id=row["id"],
            lead_id=row["lead_id"],
            total_score=row["total_score"],
            classification=Classification(row["classification"]),
            confidence=row["confidence"],
            company_score=row["company_score"],
            budget_score=row["budget_score"],
            timeline_score=row["timeline_score"],
            pain_point_score=row["pain_point_score"],
            tech_compatibility_score=row["tech_compatibility_score"],
            engagement_score=row["engagement_score"],
            completeness=row["completeness"],
            consistency=row["consistency"],
            factors=factors,
            version=row["version"],
            calculated_at=datetime.fromisoformat(row["calculated_at"]),
        )

    def save_score(self, result: ScoreResult) -> ScoreResult:
        """Store a score result. The caller must have set ``lead_id``."""
        if not result.lead_id:
            raise ValueError("ScoreResult.lead_id must be set before saving")

        with self._get_connection() as conn:
            conn.execute("""
                INSERT OR REPLACE INTO lead_scores (
                    id, lead_id, total_score, classification, confidence,
                    company_score, budget_score, timeline_score, pain_point_score,
                    tech_compatibility_score, engagement_score,
                    completeness, consistency, factors, version, calculated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """, (
                result.id,
                result.lead_id,
                result.total_score,
                result.classification.value,
                result.confidence,
                result.company_score,
                result.budget_score,
                result.timeline_score,
                result.pain_point_score,
                result.tech_compatibility_score,
                result.engagement_score,
                result.completeness,
                result.consistency,
                json.dumps([f.to_dict() for f in result.factors]),
                result.version,
                result.calculated_at.isoformat(),
            ))

        return result

    def get_latest_score(self, lead_id: str) -> Optional[ScoreResult]:
        """Get the most recent score for a lead."""
        scores = self.get_scores_for_lead(lead_id, limit=1)
        return scores[0] if scores else None

    def get_scores_for_lead(self, lead_id: str, limit: int = 50) -> List[ScoreResult]:
        """Get a lead's score history, newest first."""
        with self._get_connection() as conn:
            cursor = conn.execute("""
                SELECT * FROM lead_scores
                WHERE lead_id = ?
                ORDER BY calculated_at DESC
                LIMIT ?
            """, (lead_id, limit))
            return [self._row_to_result(row) for row in cursor.fetchall()]

    def list_scores(
        self,
        classification: Optional[Classification] = None,
        min_score: Optional[int] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> List[ScoreResult]:
        """List stored scores with optional filters, highest score first."""
        query = "SELECT * FROM lead_scores WHERE 1=1"
        params: List[Any] = []

        if classification:
            query += " AND classification = ?"
            params.append(Classification(classification).value)

        if min_score is not None:
            query += " AND total_score >= ?"
            params.append(min_score)

        query += " ORDER BY total_score DESC, calculated_at DESC LIMIT ? OFFSET ?"
        params.extend([limit, offset])

        with self._get_connection() as conn:
            cursor = conn.execute(query, params)
            return [self._row_to_result(row) for row in cursor.fetchall()]

    def delete_scores(self, lead_id: str) -> int:
        """Delete all scores for a lead. Returns count deleted."""
        with self._get_connection() as conn:
            cursor = conn.execute("DELETE FROM lead_scores WHERE lead_id = ?", (lead_id,))
            return cursor.rowcount

    def get_stats(self) -> Dict[str, Any]:
        """Get score counts by classification and averages."""
        with self._get_connection() as conn:
            cursor = conn.cursor()

            cursor.execute("SELECT COUNT(*), AVG(total_score), AVG(confidence) FROM lead_scores")
            total, avg_score, avg_confidence = cursor.fetchone()

            cursor.execute("""
                SELECT classification, COUNT(*) FROM lead_scores GROUP BY classification
            """)
            by_classification = {row[0]: row[1] for row in cursor.fetchall()}

            cursor.execute("SELECT COUNT(DISTINCT lead_id) FROM lead_scores")
            leads = cursor.fetchone()[0]

        return {
            "total_scores": total,
            "leads": leads,
            "by_classification": by_classification,
            "average_score": round(avg_score, 1) if avg_score is not None else None,
            "average_confidence": round(avg_confidence, 1) if avg_confidence is not None else None,
        }
