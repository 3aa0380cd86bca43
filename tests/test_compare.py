import logging
from datetime import datetime

from jazz_scm_client.processing.compare import CompareParser, compare_args


def test_parse_single_line():
    changesets = CompareParser().parse(["(1001)|Alice|alice@x.test|Fix bug|2024-01-02-03:04:05|"])

    assert list(changesets) == ["1001"]
    changeset = changesets["1001"]
    assert changeset.user == "Alice"
    assert changeset.email == "alice@x.test"
    assert changeset.msg == "Fix bug"
    assert changeset.date == datetime(2024, 1, 2, 3, 4, 5)
    assert changeset.date_str == "2024-01-02-03:04:05"
    assert changeset.items == []
    assert changeset.work_items == []


def test_fields_are_trimmed():
    changeset = CompareParser().parse_line(" (1002) | Bob | bob@x.test |  Refactor  | 2024-02-03-04:05:06 |")

    assert changeset.rev == "1002"
    assert changeset.user == "Bob"
    assert changeset.email == "bob@x.test"
    assert changeset.msg == "Refactor"


def test_rev_strips_one_bracket_on_each_side():
    changeset = CompareParser().parse_line("((7))|A|a@x|m|2024-01-02-03:04:05|")
    assert changeset.rev == "(7)"


def test_bad_date_is_logged_and_left_empty(caplog):
    with caplog.at_level(logging.WARNING):
        changeset = CompareParser().parse_line("(1003)|Carol|carol@x.test|Oops|not-a-date|")

    assert changeset.date is None
    assert changeset.date_str == ""
    assert "not-a-date" in caplog.text
    assert "1003" in caplog.text


def test_message_keeps_xml_characters_and_pipes():
    changeset = CompareParser().parse_line("(1004)|D|d@x|a<b & c>d | more|2024-01-02-03:04:05|")

    assert changeset.msg == "a<b & c>d | more"
    assert changeset.date == datetime(2024, 1, 2, 3, 4, 5)


def test_blank_and_short_lines_are_skipped(caplog):
    with caplog.at_level(logging.WARNING):
        changesets = CompareParser().parse(["", "   ", "garbage", "(1)|A|a@x|m|2024-01-02-03:04:05|"])

    assert list(changesets) == ["1"]
    assert "garbage" in caplog.text


def test_insertion_order_is_kept():
    lines = [f"({rev})|A|a@x|m|2024-01-02-03:04:05|" for rev in ("30", "10", "20")]
    assert list(CompareParser().parse(lines)) == ["30", "10", "20"]


def test_compare_args():
    args = compare_args("ws1", "stream1", "https://repo", ["-u", "bob", "-P", "secret"])

    assert args == [
        "compare", "ws", "ws1", "stream", "stream1",
        "-u", "bob", "-P", "secret",
        "-r", "https://repo",
        "-I", "s",
        "-C", "|{name}|{email}|",
        "-D", "|yyyy-MM-dd-HH:mm:ss|",
    ]
