"""
Service layer for diseases.

``DiseaseService`` owns persistence of the ``diseases`` table and keeps
the search index in step with it: every write to a disease row and to
its search document happens in one SQLite transaction, so a deleted
disease can never be returned by a search.

All queries use parameterized statements.  Sort fields coming from
the request are checked against ``SORTABLE_FIELDS`` before they are
placed in ``ORDER BY``.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from typing import Optional

from ..core.db import get_connection
from ..core.pagination import Page, PageRequest
from ..schemas.disease import DiseaseDTO
from .search_index import DiseaseSearchIndex

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = {"id", "name", "description"}


class DiseaseNotFoundError(ValueError):
    """Raised when an update targets a disease that does not exist."""


class DiseaseService:
    """Persistence and search operations for diseases."""

    def __init__(self, search_index: Optional[DiseaseSearchIndex] = None) -> None:
        self.search_index = search_index or DiseaseSearchIndex()

    def save(self, disease: DiseaseDTO) -> DiseaseDTO:
        """Insert a new disease or update an existing one.

        A disease without ``id`` is inserted and receives a generated
        identifier.  A disease with ``id`` replaces the stored
        attributes; ``DiseaseNotFoundError`` is raised if no such row
        exists.
        """
        conn = get_connection()
        try:
            cursor = conn.cursor()
            if disease.id is None:
                cursor.execute(
                    "INSERT INTO diseases (name, description) VALUES (?, ?)",
                    (disease.name, disease.description),
                )
                saved = disease.model_copy(update={"id": cursor.lastrowid})
                action = "Created"
            else:
                cursor.execute(
                    """
                    UPDATE diseases
                    SET name = ?, description = ?, updated_at = CURRENT_TIMESTAMP
                    WHERE id = ?
                    """,
                    (disease.name, disease.description, disease.id),
                )
                if cursor.rowcount == 0:
                    conn.rollback()
                    raise DiseaseNotFoundError(f"Disease {disease.id} not found")
                saved = disease
                action = "Updated"
            self.search_index.index(cursor, saved)
            conn.commit()
            logger.info("%s disease %s", action, saved.id)
            return saved
        finally:
            conn.close()

    def find_all(self, page_request: PageRequest) -> Page[DiseaseDTO]:
        """Return one page of diseases ordered by the requested sort."""
        conn = get_connection()
        try:
            total = conn.execute("SELECT COUNT(*) AS total FROM diseases").fetchone()["total"]
            order_by = page_request.order_by(SORTABLE_FIELDS)
            rows = conn.execute(
                f"SELECT id, name, description FROM diseases ORDER BY {order_by} LIMIT ? OFFSET ?",
                (page_request.size, page_request.offset),
            ).fetchall()
            return Page.of([self._row_to_dto(row) for row in rows], page_request, total)
        finally:
            conn.close()

    def find_one(self, disease_id: int) -> Optional[DiseaseDTO]:
        conn = get_connection()
        try:
            row = conn.execute(
                "SELECT id, name, description FROM diseases WHERE id = ?",
                (disease_id,),
            ).fetchone()
            return self._row_to_dto(row) if row else None
        finally:
            conn.close()

    def delete(self, disease_id: int) -> None:
        """Delete a disease and its search document.

        Deleting an identifier that does not exist is not an error.
        """
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM diseases WHERE id = ?", (disease_id,))
            affected = cursor.rowcount
            self.search_index.remove(cursor, disease_id)
            conn.commit()
            if affected:
                logger.info("Deleted disease %s", disease_id)
            else:
                logger.debug("Disease %s already absent", disease_id)
        finally:
            conn.close()

    def search(self, query: str, page_request: PageRequest) -> Page[DiseaseDTO]:
        """Return one page of diseases matching ``query``.

        Results are ranked by relevance unless the page request carries
        an explicit sort on a sortable field.
        """
        ranked = self.search_index.search(query)
        total = len(ranked)
        if not ranked:
            return Page.of([], page_request, 0)
        ids = [disease_id for disease_id, _ in ranked]

        conn = get_connection()
        try:
            if any(name in SORTABLE_FIELDS for name, _ in page_request.sort):
                order_by = page_request.order_by(SORTABLE_FIELDS)
                rows = conn.execute(
                    f"""
                    SELECT id, name, description FROM diseases
                    WHERE id IN (SELECT value FROM json_each(?))
                    ORDER BY {order_by} LIMIT ? OFFSET ?
                    """,
                    (json.dumps(ids), page_request.size, page_request.offset),
                ).fetchall()
                content = [self._row_to_dto(row) for row in rows]
            else:
                page_ids = ids[page_request.offset : page_request.offset + page_request.size]
                rows = conn.execute(
                    """
                    SELECT id, name, description FROM diseases
                    WHERE id IN (SELECT value FROM json_each(?))
                    """,
                    (json.dumps(page_ids),),
                ).fetchall()
                by_id = {row["id"]: self._row_to_dto(row) for row in rows}
                content = [by_id[disease_id] for disease_id in page_ids if disease_id in by_id]
            return Page.of(content, page_request, total)
        finally:
            conn.close()

    @staticmethod
    def _row_to_dto(row: sqlite3.Row) -> DiseaseDTO:
        return DiseaseDTO(id=row["id"], name=row["name"], description=row["description"])


def get_disease_service() -> DiseaseService:
    """FastAPI dependency returning the service used by the REST layer."""
    return DiseaseService()
