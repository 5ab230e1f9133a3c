"""MADE Ledger — composition root.

Invariants:
    - One DatabaseSessionManager and one LedgerStore per Ledger, created
      explicitly and passed to every service (no module-level singleton)
    - ledger_lifespan sets up logging, creates missing tables, yields the
      Ledger, and disposes the engine on exit

Design Decisions:
    - Context manager lifespan: the same startup/shutdown shape as an
      application lifespan, without a web framework
    - Services are plain attributes: UI collaborators call them directly
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from made.config import Settings, get_settings
from made.infrastructure.database import DatabaseSessionManager
from made.infrastructure.ledger_store import LedgerStore
from made.infrastructure.observability import setup_logging
from made.services.artifacts import ArtifactService
from made.services.exchange_engine import ExchangeEngine
from made.services.invite_gate import InviteGate
from made.services.messaging_channel import MessagingChannel
from made.services.onboarding import OnboardingService
from made.services.operator_access import OperatorAccess
from made.services.profiles import ProfileReader

logger = logging.getLogger(__name__)


@dataclass
class Ledger:
    """Everything a UI collaborator needs, wired to one store."""
    db: DatabaseSessionManager
    store: LedgerStore
    exchange: ExchangeEngine
    messaging: MessagingChannel
    invites: InviteGate
    onboarding: OnboardingService
    artifacts: ArtifactService
    profiles: ProfileReader
    operator: OperatorAccess

    def close(self) -> None:
        self.db.dispose()


def build_ledger(settings: Settings | None = None) -> Ledger:
    """Wire the store and services. Creates missing tables."""
    settings = settings or get_settings()
    db = DatabaseSessionManager(settings.database_url, echo=settings.database_echo)
    db.create_schema()
    store = LedgerStore(
        db,
        document_key=settings.ledger_document_key,
        seed_invites=settings.seed_invites,
    )
    return Ledger(
        db=db,
        store=store,
        exchange=ExchangeEngine(store),
        messaging=MessagingChannel(store),
        invites=InviteGate(store),
        onboarding=OnboardingService(store),
        artifacts=ArtifactService(store),
        profiles=ProfileReader(store),
        operator=OperatorAccess(store, settings),
    )


@contextmanager
def ledger_lifespan(settings: Settings | None = None) -> Iterator[Ledger]:
    """Startup/shutdown lifecycle."""
    settings = settings or get_settings()
    handler = setup_logging(settings.log_level, settings.log_format)
    ledger = build_ledger(settings)
    logger.info("MADE ledger started")
    try:
        yield ledger
    finally:
        logger.info("MADE ledger shutting down")
        ledger.close()
        logging.root.removeHandler(handler)
