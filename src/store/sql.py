from __future__ import annotations

CREATE_DOC_VALUES_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS doc_values (
  doc_id BIGINT,
  field TEXT,
  sorted BOOLEAN,
  wkb BLOB,
  PRIMARY KEY (doc_id, field)
);
"""

UPSERT_DOC_VALUE_SQL = """
INSERT OR REPLACE INTO doc_values (doc_id, field, sorted, wkb) VALUES (?, ?, ?, ?)
"""

SELECT_DOC_VALUE_SQL = """
SELECT wkb, sorted FROM doc_values WHERE doc_id = ? AND field = ?
"""

SELECT_FIELD_SQL = """
SELECT doc_id, wkb FROM doc_values WHERE field = ? ORDER BY doc_id
"""

COUNT_FIELD_SQL = """
SELECT COUNT(*) FROM doc_values WHERE field = ?
"""

DELETE_DOC_SQL = """
DELETE FROM doc_values WHERE doc_id = ?
"""
