"""Tests for boilerplate_context.content.search."""

from __future__ import annotations

from boilerplate_context.content.search import Match, search

DOCUMENT = "alpha\nbeta\nGAMMA\ndelta\n"


def test_search_is_case_insensitive_and_clips_trailing_context() -> None:
    matches = search(DOCUMENT, "gamma")

    assert matches == [Match(line_number=3, context="alpha\nbeta\nGAMMA\ndelta")]


def test_search_without_matches_returns_empty_list() -> None:
    assert search(DOCUMENT, "zzz") == []


def test_search_clips_context_at_document_start() -> None:
    matches = search(DOCUMENT, "alpha")

    assert len(matches) == 1
    assert matches[0].line_number == 1
    assert matches[0].context == "alpha\nbeta\nGAMMA"


def test_search_clips_context_at_document_end() -> None:
    matches = search(DOCUMENT, "DELTA")

    assert len(matches) == 1
    assert matches[0].line_number == 4
    assert matches[0].context == "beta\nGAMMA\ndelta"


def test_search_reports_overlapping_windows_independently() -> None:
    text = "\n".join(["one", "hit a", "hit b", "four", "five", "six", "seven"])

    matches = search(text, "hit")

    assert [match.line_number for match in matches] == [2, 3]
    assert matches[0].context == "one\nhit a\nhit b\nfour"
    assert matches[1].context == "one\nhit a\nhit b\nfour\nfive"


def test_search_returns_full_two_line_window_in_the_middle() -> None:
    text = "\n".join(f"line {index}" for index in range(1, 10))

    matches = search(text, "line 5")

    assert matches == [
        Match(line_number=5, context="line 3\nline 4\nline 5\nline 6\nline 7")
    ]


def test_empty_query_matches_every_line() -> None:
    matches = search(DOCUMENT, "")

    assert [match.line_number for match in matches] == [1, 2, 3, 4]


def test_search_on_empty_document_returns_nothing() -> None:
    assert search("", "anything") == []
    assert search("", "") == []


def test_search_lowercases_instead_of_case_folding() -> None:
    assert search("Straße\n", "SS") == []
    assert search("Straße\n", "STRASSE") == []
    assert search("Straße\n", "STRAßE") == [Match(line_number=1, context="Straße")]


def test_only_newlines_separate_lines() -> None:
    matches = search("a\x0cb\nneedle tail\r\nlast\n", "needle")

    assert matches == [Match(line_number=2, context="a\x0cb\nneedle tail\nlast")]


def test_blank_lines_inside_the_document_are_counted() -> None:
    matches = search("first\n\n\nhit\n\n", "hit")

    assert [match.line_number for match in matches] == [4]
    assert matches[0].context == "\n\nhit\n"
