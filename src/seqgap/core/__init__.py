"""seqgap core -- gap detection primitives and database plumbing.

Architecture::

    Layer 1 -- Pure
        gaps.py            find_gaps / iter_gaps / gap_ranges / summarize
        identifiers.py     Identifier coercion + SQL name validation
        errors.py          Structured error hierarchy (SeqgapError)
        backfill.py        BackfillPlan lifecycle

    Layer 2 -- Database
        protocols.py       Connection protocol
        dialect.py         SQLite / PostgreSQL gap SQL
        sqlite_conn.py     sqlite3 adapter
        session.py         SQLAlchemy engine + Connection bridge
        connection.py      create_connection(url)
        scripts.py         .sql script runner (+ bundled demo schema)

    Layer 3 -- Ambient
        settings.py        SEQGAP_* settings (pydantic-settings)
        logging.py         structlog configuration
"""
