from support_bot.indexer.classifier import classify, classify_messages
from support_bot.indexer.models import Category, IndexSnapshot


def test_keywords_are_case_insensitive_substrings():
    assert classify("The app CRASHES on launch") == {Category.BUG}
    assert classify("Would be nice to have themes") == {Category.FEATURE}
    assert classify("Resolved after reinstall") == {Category.SOLUTION}


def test_categories_are_not_exclusive():
    assert classify("thanks, the crash is fixed") == {Category.BUG, Category.SOLUTION}


def test_empty_and_unmatched_text():
    assert classify("") == frozenset()
    assert classify(None) == frozenset()
    assert classify("hello everyone") == frozenset()


def test_classify_messages_records_each_matching_category(msg):
    snapshot = IndexSnapshot()
    messages = [
        msg(1, 100, "bug: app crashes on launch", author="bob"),
        msg(2, 200, "feature: please add dark mode"),
        msg(3, 300, "good morning"),
    ]

    added = classify_messages("support", messages, snapshot)

    assert added == 2
    assert [r.id for r in snapshot.bugs] == ["1"]
    assert [r.id for r in snapshot.features] == ["2"]
    assert snapshot.solutions == []
    bug = snapshot.bugs[0]
    assert (bug.channel, bug.author, bug.timestamp) == ("support", "bob", 100)
    assert bug.message == "bug: app crashes on launch"


def test_classify_messages_skips_already_recorded_ids(msg):
    snapshot = IndexSnapshot()
    messages = [msg(1, 100, "error when saving, fixed by restart")]

    assert classify_messages("support", messages, snapshot) == 2
    assert classify_messages("support", messages, snapshot) == 0
    assert len(snapshot.bugs) == 1 and len(snapshot.solutions) == 1
