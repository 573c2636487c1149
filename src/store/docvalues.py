from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

import duckdb

from store.sql import (
    COUNT_FIELD_SQL,
    CREATE_DOC_VALUES_TABLE_SQL,
    DELETE_DOC_SQL,
    SELECT_DOC_VALUE_SQL,
    SELECT_FIELD_SQL,
    UPSERT_DOC_VALUE_SQL,
)
from strategy.encode import EncodedField
from strategy.filters import ConstantScoreQuery, GeometryOperationFilter


@dataclass
class DocValuesStore:
    """
    Reference per-document binary values, one WKB blob per (doc_id, field).

    Enough to exercise encoded fields and filters end to end; not an index.
    """

    conn: duckdb.DuckDBPyConnection
    path: Path | None = None

    def ensure_schema(self) -> None:
        self.conn.execute(CREATE_DOC_VALUES_TABLE_SQL)

    def add(self, doc_id: int, field: EncodedField) -> None:
        self.conn.execute(
            UPSERT_DOC_VALUE_SQL, [int(doc_id), field.name, bool(field.sorted), field.value]
        )

    def get(self, doc_id: int, name: str) -> EncodedField | None:
        row = self.conn.execute(SELECT_DOC_VALUE_SQL, [int(doc_id), name]).fetchone()
        if row is None:
            return None
        return EncodedField(name=name, value=bytes(row[0]), sorted=bool(row[1]))

    def delete(self, doc_id: int) -> None:
        self.conn.execute(DELETE_DOC_SQL, [int(doc_id)])

    def iter_field(self, name: str) -> Iterator[tuple[int, bytes]]:
        for doc_id, value in self.conn.execute(SELECT_FIELD_SQL, [name]).fetchall():
            yield int(doc_id), bytes(value)

    def count(self, name: str) -> int:
        return int(self.conn.execute(COUNT_FIELD_SQL, [name]).fetchone()[0])

    def search(self, f: GeometryOperationFilter) -> list[int]:
        return [int(d) for d in f.apply(self.iter_field(f.field_name))]

    def search_scored(self, q: ConstantScoreQuery) -> list[tuple[int, float]]:
        return [(int(d), s) for d, s in q.apply(self.iter_field(q.field_name))]

    def close(self) -> None:
        self.conn.close()


def open_store(path: Path | str | None = None) -> DocValuesStore:
    """
    Open a store on `path`, or in memory when no path is given.
    """
    if path is None:
        conn = duckdb.connect(":memory:")
        store = DocValuesStore(conn=conn)
    else:
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        conn = duckdb.connect(str(p))
        store = DocValuesStore(conn=conn, path=p)
    store.ensure_schema()
    return store
