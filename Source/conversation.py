"""
Conversation module for BillChat
Turns free-text descriptions of who ate what into item assignments
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence

from assignment_store import AssignmentStore
from constants import COMPLETE_RESPONSE, UNASSIGNED_RESPONSE, WELCOME_MESSAGE
from data_models import ReceiptItem

logger = logging.getLogger(__name__)


class EmptyUtteranceError(ValueError):
    """Raised for blank input, before anything is logged or changed"""


@dataclass
class TurnResult:
    """What one utterance did to the session"""
    detected_names: List[str] = field(default_factory=list)
    assignments: Dict[str, str] = field(default_factory=dict)
    response: str = ""


def tokenize(text: str) -> List[str]:
    return text.split()


def is_name_candidate(token: str) -> bool:
    """Capitalized tokens are taken to be people"""
    return len(token) > 1 and token[0].isupper()


def detect_names(tokens: Sequence[str]) -> List[str]:
    return [token for token in tokens if is_name_candidate(token)]


def item_mentioned(text_lower: str, item: ReceiptItem) -> bool:
    """Whole item name or any single word of it appears in the text"""
    item_name = item.name.lower()
    if item_name in text_lower:
        return True
    return any(word in text_lower for word in item_name.split())


# Assignee matchers, tried in order; each returns a name or None
Matcher = Callable[[Sequence[str], ReceiptItem, Sequence[str]], Optional[str]]


def name_before_item(tokens: Sequence[str], item: ReceiptItem, names: Sequence[str]) -> Optional[str]:
    """Nearest capitalized token preceding a token that names the item"""
    item_name = item.name.lower()
    item_words = item_name.split()
    for index, token in enumerate(tokens):
        word = token.lower()
        if word != item_name and word not in item_words:
            continue
        for candidate in reversed(tokens[:index]):
            if is_name_candidate(candidate):
                return candidate
    return None


def last_mentioned_name(tokens: Sequence[str], item: ReceiptItem, names: Sequence[str]) -> Optional[str]:
    return names[-1] if names else None


MATCHERS: Sequence[Matcher] = (name_before_item, last_mentioned_name)


def resolve_assignee(tokens: Sequence[str], item: ReceiptItem, names: Sequence[str],
                     matchers: Sequence[Matcher] = MATCHERS) -> Optional[str]:
    for matcher in matchers:
        name = matcher(tokens, item, names)
        if name is not None:
            return name
    return None


def build_response(unassigned: Sequence[ReceiptItem]) -> str:
    if unassigned:
        return UNASSIGNED_RESPONSE.format(items=", ".join(item.name for item in unassigned))
    return COMPLETE_RESPONSE


class ConversationEngine:
    """Processes utterances against one session's store"""

    def __init__(self, store: AssignmentStore, matchers: Sequence[Matcher] = MATCHERS):
        self.store = store
        self.matchers = matchers

    def ensure_welcome(self):
        """Seed the welcome message the first time an empty log is shown"""
        with self.store.lock:
            if not self.store.conversation:
                self.store.append_message(WELCOME_MESSAGE, is_user=False)

    def process(self, text: str) -> TurnResult:
        text = (text or "").strip()
        if not text:
            raise EmptyUtteranceError("Utterance is empty")

        with self.store.lock:
            self.store.append_message(text, is_user=True)

            tokens = tokenize(text)
            names = detect_names(tokens)
            for name in names:
                self.store.add_person(name)

            result = TurnResult(detected_names=names)
            receipt = self.store.receipt
            if receipt is not None:
                text_lower = text.lower()
                for item in receipt.items:
                    if not item_mentioned(text_lower, item):
                        continue
                    assignee = resolve_assignee(tokens, item, names, self.matchers)
                    if assignee is None:
                        logger.debug("No one to give %s to in %r", item.name, text)
                        continue
                    if self.store.assign_item(item, assignee) is not None:
                        result.assignments[item.name] = assignee

            result.response = build_response(self.store.unassigned_items)
            self.store.append_message(result.response, is_user=False)

        logger.info("Processed utterance: %d names, %d assignments",
                    len(result.detected_names), len(result.assignments))
        return result
