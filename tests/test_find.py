from codepad.find import FindBar, FindFocus


def type_query(bar: FindBar, query: str, text: str) -> None:
    for c in query:
        bar.push_char(c, text)


def test_new_has_no_matches():
    f = FindBar()
    assert f.match_count() == 0
    assert f.current_match() is None


def test_empty_query_clears_matches():
    f = FindBar()
    f.push_char("a", "abc abc")
    assert f.match_count() > 0
    f.backspace("abc abc")
    assert f.match_count() == 0


def test_collects_every_non_overlapping_match():
    f = FindBar()
    f.push_char("a", "ababab")
    assert f.matches == [range(0, 1), range(2, 3), range(4, 5)]
    f.push_char("b", "ababab")
    assert f.matches == [range(0, 2), range(2, 4), range(4, 6)]


def test_overlapping_candidates_are_skipped():
    f = FindBar()
    type_query(f, "aa", "aaaa")
    assert f.matches == [range(0, 2), range(2, 4)]


def test_ranges_are_char_indices_not_bytes():
    text = "สวัสดี"
    f = FindBar()
    type_query(f, "วั", text)
    assert f.matches == [range(1, 3)]


def test_next_prev_wrap_around():
    f = FindBar()
    f.push_char("a", "a a a")
    assert f.current_index == 0
    f.next_match()
    f.next_match()
    assert f.current_index == 2
    assert f.current_match() == range(4, 5)
    f.next_match()
    assert f.current_index == 0
    f.prev_match()
    assert f.current_index == 2


def test_navigation_on_empty_matches_is_a_noop():
    f = FindBar()
    f.push_char("z", "abc")
    assert f.match_count() == 0
    f.next_match()
    f.prev_match()
    assert f.current_index == 0
    assert f.current_match() is None


def test_focus_toggles_between_query_and_replacement():
    f = FindBar()
    assert f.focus is FindFocus.QUERY
    f.toggle_focus()
    assert f.focus is FindFocus.REPLACEMENT
    f.toggle_focus()
    assert f.focus is FindFocus.QUERY


def test_push_char_routes_to_focused_input():
    f = FindBar()
    text = "abc abc"
    f.push_char("a", text)
    assert f.query == "a"
    assert f.replacement == ""
    assert f.match_count() > 0
    f.toggle_focus()
    f.push_char("X", text)
    f.push_char("Y", text)
    assert f.query == "a"
    assert f.replacement == "XY"
    assert f.match_count() > 0


def test_backspace_routes_to_focused_input():
    f = FindBar()
    f.push_char("a", "abc")
    f.toggle_focus()
    f.push_char("X", "abc")
    f.push_char("Y", "abc")
    f.backspace("abc")
    assert f.query == "a"
    assert f.replacement == "X"
    f.toggle_focus()
    f.backspace("abc")
    assert f.query == ""
    assert f.replacement == "X"


def test_case_insensitive_is_default_and_finds_mixed_case():
    f = FindBar()
    assert f.case_sensitive is False
    type_query(f, "abc", "ABC abc Abc")
    assert f.match_count() == 3


def test_toggling_case_sensitive_filters_to_exact_case():
    text = "ABC abc Abc"
    f = FindBar()
    type_query(f, "abc", text)
    f.toggle_case_sensitive(text)
    assert f.case_sensitive is True
    assert f.matches == [range(4, 7)]
    f.toggle_case_sensitive(text)
    assert f.match_count() == 3


def test_whole_word_rejects_inner_matches():
    text = "foo foobar barfoo foo_bar baz foo"
    f = FindBar()
    type_query(f, "foo", text)
    assert f.match_count() == 5
    f.toggle_whole_word(text)
    assert f.whole_word is True
    assert f.matches == [range(0, 3), range(30, 33)]


def test_case_and_whole_word_combine():
    text = "Foo foo foo Foo"
    f = FindBar()
    type_query(f, "foo", text)
    assert f.match_count() == 4
    f.toggle_case_sensitive(text)
    assert f.matches == [range(4, 7), range(8, 11)]
    f.toggle_whole_word(text)
    assert f.matches == [range(4, 7), range(8, 11)]


def test_refresh_picks_up_buffer_changes():
    f = FindBar()
    f.push_char("x", "no match here")
    assert f.match_count() == 0
    f.refresh("xxx")
    assert f.match_count() == 3


def test_query_longer_than_text_has_no_matches():
    f = FindBar()
    type_query(f, "abcd", "abc")
    assert f.match_count() == 0


def test_toggle_resets_current_index():
    text = "a a a"
    f = FindBar()
    f.push_char("a", text)
    f.next_match()
    assert f.current_index == 1
    f.toggle_whole_word(text)
    assert f.current_index == 0