"""Tests for keyword scanning, windows and merging."""

from txt_search_tool.core.matching import count_occurrences, extract_window, find_occurrences
from txt_search_tool.core.services.search_engine import SearchEngine


def test_empty_query_yields_nothing():
    assert SearchEngine().search(["anything"], "") == []


def test_find_occurrences_is_case_insensitive_and_non_overlapping():
    assert find_occurrences("Hello hello HELLO", "hello") == [0, 6, 12]
    assert find_occurrences("aaaa", "aa") == [0, 2]
    assert count_occurrences("aaa", "aa") == 1
    assert find_occurrences("a.b", ".") == [1]


def test_window_is_clamped_to_line_bounds():
    assert extract_window("XY", 0, 1, 3) == "XY"
    assert SearchEngine().search(["XY"], "X", context_size=3)[0].display_text == "XY"


def test_distinct_windows_are_separate_results():
    results = SearchEngine().search(["aXb", "cXd", "eXf"], "X", context_size=1)

    assert [r.display_text for r in results] == ["aXb", "cXd", "eXf"]
    assert [r.line_numbers for r in results] == [(1,), (2,), (3,)]


def test_identical_windows_merge_with_neighbour_lines():
    results = SearchEngine().search(["foo bar", "foo baz", "qux"], "foo", context_size=2)

    assert len(results) == 1
    result = results[0]
    assert result.display_text == "foo b"
    assert result.line_numbers == (1, 2)
    assert result.match_lines == ("foo bar", "foo baz")
    assert result.previous_lines == ("", "foo bar")
    assert result.next_lines == ("foo baz", "qux")
    assert result.match_position == 0
    assert result.primary_line_number == 1
    assert result.match_count == 2


def test_windows_keep_original_case():
    results = SearchEngine().search(["Hello hello HELLO"], "hello", context_size=0)

    assert [r.display_text for r in results] == ["Hello", "hello", "HELLO"]
    assert [r.match_position for r in results] == [0, 6, 12]


def test_same_text_from_different_clamping_is_merged():
    # "a" at 0 is clamped on the left, "a" at 1 on the right; both render "aa".
    results = SearchEngine().search(["aa"], "a", context_size=1)

    assert len(results) == 1
    assert results[0].display_text == "aa"
    assert results[0].line_numbers == (1, 1)
    assert results[0].match_position == 0


def test_results_follow_first_encounter_order():
    results = SearchEngine().search(["xQ1", "yQ2", "xQ1"], "Q", context_size=1)

    assert [r.display_text for r in results] == ["xQ1", "yQ2"]
    assert results[0].line_numbers == (1, 3)


def test_ignored_windows_are_skipped_entirely():
    results = SearchEngine().search(
        ["aXb", "cXd", "eXf"], "X", context_size=1, ignored_windows={"cXd"}
    )

    assert [r.display_text for r in results] == ["aXb", "eXf"]
    assert all(2 not in r.line_numbers for r in results)


def test_repeated_search_is_identical():
    engine = SearchEngine(context_size=2)
    lines = ["one foo", "Foo two", "three foo four", "foo"]

    assert engine.search(lines, "foo", ignored_windows={"o foo"}) == engine.search(
        lines, "foo", ignored_windows={"o foo"}
    )


def test_default_context_size_comes_from_engine():
    engine = SearchEngine(context_size=1)

    assert engine.context_size == 1
    assert engine.search(["abXcd"], "X")[0].display_text == "bXc"


def test_stop_request_halts_emission():
    engine = SearchEngine(context_size=1)
    emitted = []

    for result in engine.iter_search(
        ["aXb", "cXd", "eXf"], "X", should_stop=lambda: len(emitted) >= 1
    ):
        emitted.append(result)

    assert [r.display_text for r in emitted] == ["aXb"]


def test_stop_before_scan_emits_nothing():
    engine = SearchEngine()

    assert list(engine.iter_search(["X"], "X", should_stop=lambda: True)) == []


def test_occurrences_pair_numbers_with_lines():
    result = SearchEngine().search(["foo bar", "foo baz"], "foo", context_size=2)[0]

    assert [(line.number, line.text) for line in result.occurrences] == [
        (1, "foo bar"),
        (2, "foo baz"),
    ]
