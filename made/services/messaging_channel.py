"""Messaging Channel — append-only two-party chat keyed by a canonical pairing id.

Invariants:
    - One Conversation per unordered pair: id = sorted ids joined by the pairing delimiter
    - Messages are appended oldest-first and never edited
    - send() and history() are gated on a COMPLETED contract between the two
      users; the gate is checked in the same cycle as the append
    - The store itself never enforces the gate (append_message stays policy-free)
"""

import logging

from made.core.entities import Conversation, LedgerDocument, Message
from made.core.errors import MessagingLockedError, NotFoundError
from made.core.pairing import (
    canonical_participants,
    conversation_id,
    has_completed_exchange,
)
from made.core.repository_protocols import LedgerRepository
from made.core.validation import require_text
from made.services.stamps import new_id, now_ms

logger = logging.getLogger(__name__)


class MessagingChannel:
    """Chat between users who have completed an exchange together."""

    def __init__(self, store: LedgerRepository):
        self.store = store

    def can_message(self, user_a: str, user_b: str) -> bool:
        if user_a == user_b:
            return False
        return has_completed_exchange(self.store.list_contracts(), user_a, user_b)

    def send(self, sender_id: str, recipient_id: str, text: str) -> Message:
        """Append a message from sender to the pair's conversation."""
        body = require_text(text, "text")
        participants = canonical_participants(sender_id, recipient_id)
        conv_id = conversation_id(sender_id, recipient_id)
        message = Message(
            id=new_id(), sender_id=sender_id, text=body, timestamp=now_ms(),
        )

        def _send(doc: LedgerDocument) -> Message:
            doc.find_user(recipient_id)
            if not has_completed_exchange(doc.contracts, sender_id, recipient_id):
                raise MessagingLockedError(sender_id, recipient_id)
            doc.add_message(conv_id, participants, message)
            return message

        try:
            result = self.store.apply(_send)
        except MessagingLockedError as e:
            logger.warning(
                "Message blocked by exchange policy",
                extra={"conversation_id": conv_id, "error_code": e.code},
            )
            raise
        logger.info(
            "Message sent",
            extra={"conversation_id": conv_id, "user_id": sender_id},
        )
        return result

    def history(self, viewer_id: str, other_id: str) -> list[Message]:
        """Messages between the pair, oldest first. Empty before the first send."""
        conv_id = conversation_id(viewer_id, other_id)
        doc = self.store.load()
        if not has_completed_exchange(doc.contracts, viewer_id, other_id):
            raise MessagingLockedError(viewer_id, other_id)
        try:
            conversation: Conversation = doc.find_conversation(conv_id)
        except NotFoundError:
            return []
        return list(conversation.messages)
