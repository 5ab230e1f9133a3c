"""Exchange Engine — the MicroContract lifecycle on top of the Ledger Store.

Invariants:
    - Legality is decided by core/enforce_exchange.py against the freshly
      loaded contract inside the same store cycle that saves the result
    - complete() increments the seller's sessions_completed by exactly one,
      in the same cycle as the status change (no partial application)
    - Rejected actions leave the store unchanged and raise a MadeError

Design Decisions:
    - Actors are passed in explicitly (seller_id / buyer_id / actor_id): the
      "current session user" is a UI collaborator concern
    - Buyer and seller names are snapshots taken from the user records at
      list/book time
"""

import logging

from made.core import enforce_exchange
from made.core.domain_types import ContractStatus
from made.core.entities import LedgerDocument, MicroContract
from made.core.errors import MadeError
from made.core.repository_protocols import LedgerRepository
from made.core.validation import build_record, require_text
from made.services.stamps import new_id

logger = logging.getLogger(__name__)


class ExchangeEngine:
    """Offer -> escrow -> delivery -> completion for paid micro-sessions."""

    def __init__(self, store: LedgerRepository):
        self.store = store

    def list_contract(
        self,
        seller_id: str,
        title: str,
        price: float,
        delivery_days: int = 2,
        description: str = "",
    ) -> MicroContract:
        """Create an AVAILABLE listing owned by seller_id."""
        title = require_text(title, "title")

        def _list(doc: LedgerDocument) -> MicroContract:
            seller = doc.find_user(seller_id)
            contract = build_record(MicroContract, {
                "id": new_id(),
                "user_id": seller.id,
                "user_name": seller.name,
                "title": title,
                "description": description,
                "price": price,
                "delivery_days": delivery_days,
                "status": ContractStatus.AVAILABLE,
            })
            return doc.add_contract(contract)

        contract = self.store.apply(_list)
        logger.info(
            f"Contract listed at {contract.price}",
            extra={"contract_id": contract.id, "user_id": seller_id},
        )
        return contract

    def book(self, contract_id: str, buyer_id: str) -> MicroContract:
        """AVAILABLE -> ESCROW."""
        def _book(doc: LedgerDocument) -> MicroContract:
            buyer = doc.find_user(buyer_id)
            booked = enforce_exchange.book(doc.find_contract(contract_id), buyer)
            doc.replace_contract(booked)
            return booked

        return self._transition("book", contract_id, buyer_id, _book)

    def deliver(self, contract_id: str, seller_id: str, note: str) -> MicroContract:
        """ESCROW -> DELIVERED."""
        def _deliver(doc: LedgerDocument) -> MicroContract:
            delivered = enforce_exchange.deliver(
                doc.find_contract(contract_id), seller_id, note,
            )
            doc.replace_contract(delivered)
            return delivered

        return self._transition("deliver", contract_id, seller_id, _deliver)

    def complete(self, contract_id: str, actor_id: str) -> MicroContract:
        """DELIVERED -> COMPLETED, crediting the seller with one session."""
        def _complete(doc: LedgerDocument) -> MicroContract:
            completed = enforce_exchange.complete(
                doc.find_contract(contract_id), actor_id,
            )
            seller = doc.find_user(completed.user_id)
            doc.replace_contract(completed)
            doc.replace_user(seller.model_copy(
                update={"sessions_completed": seller.sessions_completed + 1},
            ))
            return completed

        return self._transition("complete", contract_id, actor_id, _complete)

    def revise_listing(
        self, contract_id: str, seller_id: str, **updates,
    ) -> MicroContract:
        """Change title, description, price or delivery_days while AVAILABLE."""
        def _revise(doc: LedgerDocument) -> MicroContract:
            revised = enforce_exchange.revise_listing(
                doc.find_contract(contract_id), seller_id, updates,
            )
            doc.replace_contract(revised)
            return revised

        return self._transition("revise", contract_id, seller_id, _revise)

    def contracts_for(self, user_id: str) -> list[MicroContract]:
        """Contracts where user_id is seller or buyer, newest first."""
        return [
            c for c in self.store.list_contracts()
            if user_id in (c.user_id, c.buyer_id)
        ]

    def _transition(self, action, contract_id, actor_id, mutation) -> MicroContract:
        try:
            contract = self.store.apply(mutation)
        except MadeError as e:
            logger.warning(
                f"Exchange {action} rejected: {e.message}",
                extra={
                    "contract_id": contract_id,
                    "user_id": actor_id,
                    "error_code": e.code,
                },
            )
            raise
        logger.info(
            f"Exchange {action} applied",
            extra={
                "contract_id": contract_id,
                "user_id": actor_id,
                "status": contract.status.value,
            },
        )
        return contract
