"""Tests for turning utterances into assignments."""

import pytest

from assignment_store import AssignmentStore
from bill_splitter import calculated_total, receipt_subtotal, reconcile, tax_share
from constants import COMPLETE_RESPONSE, WELCOME_MESSAGE
from conversation import (
    ConversationEngine,
    EmptyUtteranceError,
    detect_names,
    is_name_candidate,
    item_mentioned,
    last_mentioned_name,
    name_before_item,
    resolve_assignee,
    tokenize,
)
from data_models import Receipt, ReceiptItem


def _names(store):
    return [p.name for p in store.people]


def _items_of(store, name):
    return [a.receipt_item.name for a in store.find_person(name).assignments]


def test_is_name_candidate():
    assert is_name_candidate("Julia")
    assert is_name_candidate("Al")
    assert not is_name_candidate("I")
    assert not is_name_candidate("julia")
    assert not is_name_candidate("42")


def test_tokenize_keeps_punctuation():
    assert tokenize("Julia got\nthe  burger, thanks") == ["Julia", "got", "the", "burger,", "thanks"]


def test_detect_names_in_order():
    assert detect_names(tokenize("Julia and Peter shared, then Max paid")) == ["Julia", "Peter", "Max"]


def test_item_mentioned_by_whole_name_or_word():
    item = ReceiptItem(name="Caesar Salad", price=9.0)
    assert item_mentioned("ana had the caesar salad", item)
    assert item_mentioned("ana had a salad", item)
    assert not item_mentioned("ana had soup", item)


def test_name_before_item():
    item = ReceiptItem(name="Fries", price=4.99)
    tokens = tokenize("Julia got the burger and Peter got the fries")
    assert name_before_item(tokens, item, ["Julia", "Peter"]) == "Peter"


def test_name_before_item_needs_exact_token():
    item = ReceiptItem(name="Fries", price=4.99)
    assert name_before_item(tokenize("Peter got fries."), item, ["Peter"]) is None


def test_last_mentioned_name():
    item = ReceiptItem(name="Nachos", price=8.0)
    assert last_mentioned_name([], item, ["Julia", "Peter"]) == "Peter"
    assert last_mentioned_name([], item, []) is None


def test_resolve_assignee_tries_matchers_in_order():
    item = ReceiptItem(name="Nachos", price=8.0)
    tokens = tokenize("we all split the nachos with Sam")
    assert resolve_assignee(tokens, item, detect_names(tokens)) == "Sam"
    assert resolve_assignee(tokens, item, [], matchers=()) is None


def test_scenario_single_assignment(engine, store, burger, fries, receipt):
    engine.process("Julia got the burger")

    assert _names(store) == ["Julia"]
    assert _items_of(store, "Julia") == ["Burger"]
    assert store.unassigned_items == [fries]

    julia = store.find_person("Julia")
    assert tax_share(julia, receipt) == pytest.approx((12.99 / 17.98) * 2.99, abs=1e-9)
    assert tax_share(julia, receipt) == pytest.approx(2.16, abs=0.01)


def test_scenario_two_utterances_complete(engine, store, receipt):
    engine.process("Julia got the burger")
    turn = engine.process("Peter got the fries")

    assert turn.assignments == {"Fries": "Peter"}
    assert store.is_complete
    assert calculated_total(store.people, receipt) == pytest.approx(25.47, abs=0.01)
    assert turn.response == COMPLETE_RESPONSE
    assert store.conversation[-1].text == COMPLETE_RESPONSE


def test_scenario_nothing_recognised(engine, store):
    turn = engine.process("nothing to see here")

    assert store.people == ()
    assert turn.detected_names == []
    assert turn.assignments == {}
    assert [m.is_user for m in store.conversation] == [True, False]
    assert "Burger, Fries" in store.conversation[-1].text
    assert "Please clarify" in turn.response


def test_scenario_double_assignment(engine, store, burger, fries, receipt):
    engine.process("Julia got the burger")
    engine.process("Peter got the burger")

    assert _items_of(store, "Julia") == ["Burger"]
    assert _items_of(store, "Peter") == ["Burger"]
    assert store.unassigned_items == [fries]

    subtotal = sum(a.total_price for p in store.people for a in p.assignments)
    assert subtotal > receipt_subtotal(receipt)
    result = reconcile(store.people, receipt)
    assert not result.is_match
    assert result.difference > 0


def test_two_people_in_one_utterance(engine, store):
    turn = engine.process("Julia got the burger and Peter got the fries")
    assert _items_of(store, "Julia") == ["Burger"]
    assert _items_of(store, "Peter") == ["Fries"]
    assert turn.assignments == {"Burger": "Julia", "Fries": "Peter"}
    assert store.is_complete


def test_falls_back_to_last_name(store):
    nachos = ReceiptItem(name="Nachos", price=8.0)
    store.set_receipt(Receipt(items=(nachos,), total=8.0))
    ConversationEngine(store).process("we all split the nachos with Sam")
    assert _items_of(store, "Sam") == ["Nachos"]


def test_item_without_any_name_stays_unassigned(engine, store, burger, fries):
    engine.process("someone had the burger")
    assert store.people == ()
    assert store.unassigned_items == [burger, fries]


def test_names_without_items_are_still_added(engine, store):
    engine.process("Julia and Peter are here")
    assert _names(store) == ["Julia", "Peter"]
    assert store.unassigned_items == list(store.receipt.items)


def test_repeated_names_are_absorbed(engine, store):
    engine.process("Julia got the burger")
    engine.process("julia is hungry, Julia got the fries")
    assert _names(store) == ["Julia"]
    assert _items_of(store, "Julia") == ["Burger", "Fries"]


def test_word_of_multiword_item_matches(store):
    salad = ReceiptItem(name="Caesar Salad", price=9.0)
    store.set_receipt(Receipt(items=(salad,), total=9.0))
    ConversationEngine(store).process("Anna had a salad")
    assert _items_of(store, "Anna") == ["Caesar Salad"]


def test_substring_match_over_matches(store):
    """Short item names match inside longer words."""
    ham = ReceiptItem(name="Ham", price=6.0)
    store.set_receipt(Receipt(items=(ham,), total=6.0))
    ConversationEngine(store).process("Graham had the soup")
    assert _items_of(store, "Graham") == ["Ham"]


def test_no_receipt_only_adds_names():
    store = AssignmentStore()
    turn = ConversationEngine(store).process("Julia got the burger")
    assert _names(store) == ["Julia"]
    assert turn.assignments == {}
    assert turn.response == COMPLETE_RESPONSE


@pytest.mark.parametrize("text", ["", "   ", "\n\t"])
def test_empty_utterance_is_rejected(engine, store, text):
    with pytest.raises(EmptyUtteranceError):
        engine.process(text)
    assert store.conversation == ()
    assert store.people == ()


def test_transcript_records_both_sides(engine, store):
    engine.process("Julia got the burger")
    messages = store.conversation
    assert messages[0].text == "Julia got the burger"
    assert messages[0].is_user
    assert not messages[1].is_user
    assert "Fries" in messages[1].text


def test_utterance_is_trimmed_before_logging(engine, store, burger):
    turn = engine.process("  Julia got the burger  \n")
    assert store.conversation[0].text == "Julia got the burger"
    assert turn.assignments == {"Burger": "Julia"}
    assert store.find_person("Julia").has_item(burger.id)


def test_single_letter_tokens_are_not_names(engine, store):
    turn = engine.process("I think A got the burger")
    assert turn.detected_names == []
    assert store.people == ()


def test_welcome_is_seeded_once(engine, store):
    engine.ensure_welcome()
    engine.ensure_welcome()
    assert [m.text for m in store.conversation] == [WELCOME_MESSAGE]
    assert store.people == ()


def test_welcome_not_added_to_existing_log(engine, store):
    engine.process("Julia got the burger")
    engine.ensure_welcome()
    assert WELCOME_MESSAGE not in [m.text for m in store.conversation]
