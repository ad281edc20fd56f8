"""
Assignment Store module for BillChat
Session state: the receipt, the roster and who has what
"""

import logging
import threading
from typing import List, Optional, Tuple

from data_models import (
    AnalysisErr,
    AnalysisOk,
    AnalysisResult,
    AssignedItem,
    ConversationMessage,
    Person,
    Receipt,
    ReceiptItem,
    SessionState,
)

logger = logging.getLogger(__name__)


class AssignmentStore:
    """Single source of truth for "who has what" in one bill-splitting session.

    One store is one session: it owns the roster and the conversation log.
    Callers that run read-then-write sequences against the store from more
    than one thread should hold ``lock`` for the whole sequence.
    """

    def __init__(self, receipt: Optional[Receipt] = None):
        self.lock = threading.RLock()
        self.receipt: Optional[Receipt] = receipt
        self._people: List[Person] = []
        self._conversation: List[ConversationMessage] = []
        self.selected_item: Optional[ReceiptItem] = None
        self.error_message: Optional[str] = None

    @property
    def people(self) -> Tuple[Person, ...]:
        with self.lock:
            return tuple(self._people)

    @property
    def conversation(self) -> Tuple[ConversationMessage, ...]:
        with self.lock:
            return tuple(self._conversation)

    def set_receipt(self, receipt: Receipt):
        """Start assigning a freshly analyzed receipt"""
        with self.lock:
            self.reset()
            self.receipt = receipt
            logger.info("Receipt %s loaded with %d items", receipt.id, len(receipt.items))

    def apply_analysis(self, result: AnalysisResult) -> bool:
        """Accept the outcome of receipt analysis"""
        if isinstance(result, AnalysisOk):
            self.set_receipt(result.receipt)
            return True
        if isinstance(result, AnalysisErr):
            with self.lock:
                self.error_message = result.message
            logger.warning("Receipt analysis failed: %s", result.message)
            return False
        raise TypeError(f"Unexpected analysis result: {result!r}")

    def find_person(self, name: str) -> Optional[Person]:
        with self.lock:
            for person in self._people:
                if person.matches(name):
                    return person
            return None

    def add_person(self, name: str):
        """Add someone to the roster unless the name is blank or taken"""
        trimmed = name.strip()
        if not trimmed:
            return
        with self.lock:
            if self.find_person(trimmed) is not None:
                return
            self._people.append(Person(name=trimmed))
            logger.debug("Added person %s", trimmed)

    def find_or_create_person(self, name: str) -> Person:
        with self.lock:
            person = self.find_person(name)
            if person is None:
                person = Person(name=name.strip())
                self._people.append(person)
                logger.debug("Created person %s", person.name)
            return person

    def assign_item(self, item: ReceiptItem, person_name: str,
                    quantity: int = 1, share_percentage: float = 1.0) -> Optional[AssignedItem]:
        """Give ``person_name`` a claim on ``item``.

        Nothing happens if nobody by that name is on the roster. Assigning an
        item that someone else already has is allowed: that is how shared
        items are modelled.
        """
        with self.lock:
            person = self.find_person(person_name)
            if person is None:
                logger.debug("No person named %r, %s left as is", person_name, item.name)
                return None
            assignment = AssignedItem(
                receipt_item=item,
                quantity=quantity,
                share_percentage=share_percentage,
            )
            person.assignments.append(assignment)
            logger.debug("Assigned %s to %s", item.name, person.name)
            return assignment

    def unassign_item(self, item_id: str, person_name: str) -> int:
        """Drop a person's assignments of one item; returns how many went"""
        with self.lock:
            person = self.find_person(person_name)
            if person is None:
                return 0
            kept = [
                a for a in person.assignments
                if a.receipt_item.id != item_id and a.id != item_id
            ]
            removed = len(person.assignments) - len(kept)
            person.assignments[:] = kept
            return removed

    @property
    def unassigned_items(self) -> List[ReceiptItem]:
        with self.lock:
            if self.receipt is None:
                return []
            assigned_ids = {
                assignment.receipt_item.id
                for person in self._people
                for assignment in person.assignments
            }
            return [item for item in self.receipt.items if item.id not in assigned_ids]

    @property
    def is_complete(self) -> bool:
        with self.lock:
            return not self.unassigned_items and bool(self._people)

    @property
    def state(self) -> SessionState:
        with self.lock:
            if self.receipt is None:
                return SessionState.AWAITING_RECEIPT
            if self.is_complete:
                return SessionState.COMPLETE
            return SessionState.AWAITING_ASSIGNMENT

    def select_item(self, item: ReceiptItem):
        with self.lock:
            self.selected_item = item

    def clear_selection(self):
        with self.lock:
            self.selected_item = None

    def append_message(self, text: str, is_user: bool) -> ConversationMessage:
        message = ConversationMessage(text=text, is_user=is_user)
        with self.lock:
            self._conversation.append(message)
        return message

    def reset(self):
        """Back to an empty session"""
        with self.lock:
            self.receipt = None
            self._people = []
            self._conversation = []
            self.selected_item = None
            self.error_message = None
