"""Services — thin protocols layered on the Ledger Store.

Invariants:
    - Services depend on LedgerRepository, never on SQLAlchemy
    - A service operation that touches several entities does so in one store cycle
    - Core decides legality; services load, call core, and hand the result to the store
"""
