"""
Record store schema.

Four attributes per author:

============  ========  =========================================
attribute     type      notes
============  ========  =========================================
identifier    TEXT      unique, required; identity for upserts
name          TEXT      full-text indexed (FTS5, external content)
revision      INTEGER
modified      TEXT      ISO 8601, UTC
============  ========  =========================================

The FTS table is kept in sync by triggers, so writers only touch ``authors``.
"""

SCHEMA_STATEMENTS: tuple[str, ...] = (
    """
    CREATE TABLE IF NOT EXISTS authors (
        identifier TEXT PRIMARY KEY NOT NULL,
        name TEXT,
        revision INTEGER,
        modified TEXT
    )
    """,
    """
    CREATE VIRTUAL TABLE IF NOT EXISTS authors_fts USING fts5(
        name,
        content='authors',
        content_rowid='rowid'
    )
    """,
    """
    CREATE TRIGGER IF NOT EXISTS authors_ai AFTER INSERT ON authors BEGIN
        INSERT INTO authors_fts(rowid, name) VALUES (new.rowid, new.name);
    END
    """,
    """
    CREATE TRIGGER IF NOT EXISTS authors_ad AFTER DELETE ON authors BEGIN
        INSERT INTO authors_fts(authors_fts, rowid, name)
        VALUES ('delete', old.rowid, old.name);
    END
    """,
    """
    CREATE TRIGGER IF NOT EXISTS authors_au AFTER UPDATE ON authors BEGIN
        INSERT INTO authors_fts(authors_fts, rowid, name)
        VALUES ('delete', old.rowid, old.name);
        INSERT INTO authors_fts(rowid, name) VALUES (new.rowid, new.name);
    END
    """,
)

UPSERT_AUTHOR = """
    INSERT INTO authors (identifier, name, revision, modified)
    VALUES (?, ?, ?, ?)
    ON CONFLICT(identifier) DO UPDATE SET
        name = excluded.name,
        revision = excluded.revision,
        modified = excluded.modified
"""

SELECT_AUTHOR = """
    SELECT identifier, name, revision, modified
    FROM authors
    WHERE identifier = ?
"""

SEARCH_AUTHORS = """
    SELECT a.identifier, a.name, a.revision, a.modified
    FROM authors_fts
    JOIN authors AS a ON a.rowid = authors_fts.rowid
    WHERE authors_fts MATCH ?
    ORDER BY rank
    LIMIT ?
"""

COUNT_AUTHORS = "SELECT COUNT(*) FROM authors"
