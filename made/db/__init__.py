"""Database Infrastructure — SQLAlchemy Base and table metadata.

Invariants:
    - One engine per DatabaseSessionManager instance (no module-level engine)
"""
