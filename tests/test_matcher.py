"""Tests for regex_engine.matcher, the regex-library backed matcher."""

import pytest

from regex_engine.errors import MatchError, PatternCompileError
from regex_engine.matcher import RegexMatcher, compile_matcher
from regex_engine.options import ANCHORED, NOT_EMPTY_AT_START, CompileOptions
from scanning.records import UNMATCHED
from scanning.scan_driver import scan_all


class TestCompile:
    def test_invalid_pattern(self):
        with pytest.raises(PatternCompileError) as excinfo:
            compile_matcher("(unclosed")
        assert excinfo.value.pattern == "(unclosed"
        assert isinstance(excinfo.value.__cause__, Exception)

    def test_bytes_pattern_is_decoded(self):
        assert compile_matcher(b"h\xc3\xa9").pattern == "hé"

    def test_capture_count_and_names(self):
        matcher = compile_matcher(r"(?P<first>\w+) (\w+) (?P<last>\w+)")
        assert matcher.capture_count() == 3
        assert matcher.name_table() == ["", "first", "", "last"]

    def test_no_groups(self):
        matcher = compile_matcher("abc")
        assert matcher.capture_count() == 0
        assert matcher.name_table() == [""]

    def test_duplicate_names_share_a_group(self):
        matcher = compile_matcher(r"(?P<x>a)|(?P<x>b)")
        assert matcher.name_table() == ["", "x"]


class TestExec:
    def test_first_match_after_offset(self):
        matcher = compile_matcher("o")
        assert matcher.exec("foo boo", 0).spans == ((1, 2),)
        assert matcher.exec("foo boo", 3).spans == ((5, 6),)

    def test_no_match(self):
        assert compile_matcher("z").exec("abc", 0) is None

    def test_unmatched_group_sentinel(self):
        record = compile_matcher("(a)|(b)").exec("b", 0)
        assert record.spans == ((0, 1), UNMATCHED, (0, 1))

    def test_not_empty_at_start_moves_on(self):
        matcher = compile_matcher("")
        assert matcher.exec("ab", 0).spans == ((0, 0),)
        assert matcher.exec("ab", 0, NOT_EMPTY_AT_START).spans == ((1, 1),)
        assert matcher.exec("ab", 2, NOT_EMPTY_AT_START) is None

    def test_not_empty_at_start_prefers_nonempty_alternative(self):
        matcher = compile_matcher("a??")
        assert matcher.exec("a", 0).spans == ((0, 0),)
        assert matcher.exec("a", 0, NOT_EMPTY_AT_START).spans == ((0, 1),)

    def test_not_empty_at_start_with_verbose_comment(self):
        matcher = compile_matcher("x* # any run of x", CompileOptions(verbose=True))
        assert matcher.exec("ax", 0, NOT_EMPTY_AT_START).spans == ((1, 2),)

    def test_anchored(self):
        matcher = compile_matcher("b")
        assert matcher.exec("ab", 0, ANCHORED) is None
        assert matcher.exec("ab", 1, ANCHORED).spans == ((1, 2),)

    def test_ignore_case_option(self):
        matcher = compile_matcher("abc", CompileOptions(ignore_case=True))
        assert matcher.exec("xABC", 0).spans == ((1, 4),)

    def test_offset_out_of_range(self):
        with pytest.raises(MatchError):
            compile_matcher("a").exec("abc", 4)

    def test_timeout_becomes_match_error(self):
        matcher = compile_matcher("a")

        class Exploding:
            groups = 0

            def search(self, *args, **kwargs):
                raise TimeoutError("regex timed out")

        matcher._compiled = Exploding()
        with pytest.raises(MatchError, match="timed out"):
            matcher.exec("aaa", 0)

    def test_timeout_is_forwarded(self):
        matcher = compile_matcher("a", CompileOptions(timeout=2.5))
        seen = {}

        class Recording:
            groups = 0

            def search(self, subject, pos, timeout=None):
                seen['timeout'] = timeout
                return None

        matcher._compiled = Recording()
        assert matcher.exec("b", 0) is None
        assert seen['timeout'] == 2.5


class TestLifetime:
    def test_context_manager_closes(self):
        with compile_matcher("a") as matcher:
            assert matcher.exec("a", 0) is not None
        assert matcher.closed
        with pytest.raises(MatchError, match="closed"):
            matcher.exec("a", 0)

    def test_close_twice(self):
        matcher = RegexMatcher("a")
        matcher.close()
        matcher.close()
        assert matcher.closed

    def test_metadata_survives_close(self):
        matcher = compile_matcher("(?P<n>a)")
        matcher.close()
        assert matcher.capture_count() == 1
        assert matcher.name_table() == ["", "n"]


class TestSubjectType:
    def test_bytes_subject_is_a_type_error(self):
        matcher = compile_matcher(b"a")
        with pytest.raises(TypeError, match="must be str"):
            matcher.exec(b"aa", 0)

    def test_scan_all_rejects_bytes_with_real_matcher(self):
        with pytest.raises(TypeError):
            scan_all(b"aa", compile_matcher(b"a"))

    def test_scan_all_text_with_real_matcher(self):
        records = scan_all("aa", compile_matcher(b"a"))
        assert [r.spans[0] for r in records] == [(0, 1), (1, 2)]


class TestReverseSearch:
    def test_inline_reverse_flag_rejected(self):
        with pytest.raises(PatternCompileError, match="reverse"):
            compile_matcher("(?r)a")
