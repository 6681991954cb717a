"""
Full‑text search index for diseases.

Each disease owns one row in ``disease_search_index`` holding its
lower‑cased tokens separated by single spaces and padded with a space
on both sides, so that ``LIKE '% flu %'`` matches the whole token
``flu`` and ``LIKE '% flu%'`` matches tokens starting with ``flu``.

Queries are split into tokens the same way.  A token ending in ``*``
is a prefix match; tokens are OR‑ed together.  The score of a document
is the number of occurrences of the query terms it contains.
"""

from __future__ import annotations

import logging
import re
import sqlite3
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from ..core.db import get_connection
from ..schemas.disease import DiseaseDTO

logger = logging.getLogger(__name__)

_TOKEN_RE = re.compile(r"\w+", re.UNICODE)
_QUERY_TERM_RE = re.compile(r"\w+\*?", re.UNICODE)


def tokenize(*texts: Optional[str]) -> List[str]:
    tokens: list[str] = []
    for text in texts:
        if text:
            tokens.extend(token.lower() for token in _TOKEN_RE.findall(text))
    return tokens


@dataclass(frozen=True)
class QueryTerm:
    text: str
    prefix: bool = False

    def like_pattern(self) -> str:
        escaped = self.text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        return f"% {escaped}%" if self.prefix else f"% {escaped} %"

    def count_in(self, tokens: Iterable[str]) -> int:
        if self.prefix:
            return sum(1 for token in tokens if token.startswith(self.text))
        return sum(1 for token in tokens if token == self.text)


def parse_query(query: str) -> List[QueryTerm]:
    terms: list[QueryTerm] = []
    seen: set[QueryTerm] = set()
    for raw in _QUERY_TERM_RE.findall(query or ""):
        term = QueryTerm(text=raw.rstrip("*").lower(), prefix=raw.endswith("*"))
        if term.text and term not in seen:
            seen.add(term)
            terms.append(term)
    return terms


def build_document(disease: DiseaseDTO) -> str:
    return " " + " ".join(tokenize(disease.name, disease.description)) + " "


class DiseaseSearchIndex:
    """Keeps search documents in step with the ``diseases`` table.

    ``index`` and ``remove`` take the caller's cursor so that the
    document is written in the same transaction as the row it mirrors.
    """

    TABLE = "disease_search_index"
    # SQLite caps expression depth at 1000, so long queries are split.
    TERMS_PER_QUERY = 100

    def index(self, cursor: sqlite3.Cursor, disease: DiseaseDTO) -> None:
        cursor.execute(
            f"INSERT OR REPLACE INTO {self.TABLE} (disease_id, document) VALUES (?, ?)",
            (disease.id, build_document(disease)),
        )

    def remove(self, cursor: sqlite3.Cursor, disease_id: int) -> None:
        cursor.execute(f"DELETE FROM {self.TABLE} WHERE disease_id = ?", (disease_id,))

    def rebuild(self) -> int:
        """Re‑index every disease; returns the number of documents written."""
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(f"DELETE FROM {self.TABLE}")
            rows = cursor.execute("SELECT id, name, description FROM diseases").fetchall()
            for row in rows:
                self.index(cursor, DiseaseDTO(id=row["id"], name=row["name"], description=row["description"]))
            conn.commit()
            logger.info("Rebuilt disease search index with %s documents", len(rows))
            return len(rows)
        finally:
            conn.close()

    def search(self, query: str) -> List[Tuple[int, int]]:
        """Return ``(disease_id, score)`` pairs, best match first.

        Ties are broken by ascending id.  A query without any token
        matches nothing.
        """
        terms = parse_query(query)
        if not terms:
            return []
        documents: dict[int, str] = {}
        conn = get_connection()
        try:
            for start in range(0, len(terms), self.TERMS_PER_QUERY):
                batch = terms[start:start + self.TERMS_PER_QUERY]
                where = " OR ".join("document LIKE ? ESCAPE '\\'" for _ in batch)
                rows = conn.execute(
                    f"SELECT disease_id, document FROM {self.TABLE} WHERE {where}",
                    tuple(term.like_pattern() for term in batch),
                ).fetchall()
                for row in rows:
                    documents[row["disease_id"]] = row["document"]
        finally:
            conn.close()
        scored = []
        for disease_id, document in documents.items():
            tokens = document.split()
            score = sum(term.count_in(tokens) for term in terms)
            if score:
                scored.append((disease_id, score))
        scored.sort(key=lambda item: (-item[1], item[0]))
        return scored
