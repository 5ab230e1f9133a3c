"""Infrastructure — database sessions, the Ledger Store, logging setup."""
