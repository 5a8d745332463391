"""Tests for scanning.scan_driver."""

import pytest

from scanning.records import NOT_EMPTY_AT_START, MatchRecord
from scanning.scan_driver import UNBOUNDED, ScanState, iter_matches, scan_all


class TestScanState:
    def test_fresh_state_has_no_constraint(self):
        state = ScanState()
        assert state.exec_options() == 0
        assert state.can_continue(0)

    def test_advance_sets_guard_at_vacated_offset(self):
        state = ScanState(budget=3)
        state.advance(MatchRecord(((1, 4),)))
        assert state.cursor == 4
        assert state.budget == 2
        assert state.exec_options() == NOT_EMPTY_AT_START

    def test_guard_only_applies_at_its_offset(self):
        state = ScanState(cursor=5, not_empty_at=4)
        assert state.exec_options() == 0

    def test_unbounded_budget_never_runs_out(self):
        state = ScanState()
        for i in range(5):
            state.advance(MatchRecord(((i, i),)))
        assert state.budget == UNBOUNDED
        assert state.can_continue(10)

    def test_stops_past_end(self):
        assert not ScanState(cursor=4).can_continue(3)

    def test_stops_when_budget_spent(self):
        assert not ScanState(budget=0).can_continue(10)


class TestScanAll:
    def test_empty_everywhere_terminates(self, empty_matcher):
        records = scan_all("abcd", empty_matcher, -1)
        assert [r.spans[0] for r in records] == [(0, 0), (1, 1), (2, 2), (3, 3), (4, 4)]

    def test_empty_everywhere_count_is_length_plus_one(self, empty_matcher):
        subject = "x" * 37
        records = scan_all(subject, empty_matcher, -1)
        assert len(records) == len(subject) + 1
        starts = [r.start for r in records]
        assert starts == sorted(set(starts))

    def test_empty_subject(self, empty_matcher):
        assert [r.spans for r in scan_all("", empty_matcher)] == [((0, 0),)]

    def test_first_exec_unconstrained_then_guarded(self, empty_matcher):
        scan_all("ab", empty_matcher)
        options = [opts for _, opts in empty_matcher.calls]
        assert options[0] == 0
        assert all(opt == NOT_EMPTY_AT_START for opt in options[1:])

    def test_budget_limits_matches(self, empty_matcher):
        assert len(scan_all("abcdef", empty_matcher, 2)) == 2

    def test_zero_budget_does_not_call_matcher(self, empty_matcher):
        assert scan_all("abc", empty_matcher, 0) == []
        assert empty_matcher.calls == []

    def test_negative_budget_is_unbounded(self, scripted):
        matcher = scripted([((0, 1),), ((1, 2),), ((2, 3),)])
        assert len(scan_all("aaa", matcher, -5)) == 3

    def test_non_overlapping_order(self, scripted):
        matcher = scripted([((0, 2),), ((1, 3),), ((3, 4),)])
        records = scan_all("abcd", matcher)
        # (1, 3) starts before the cursor left by (0, 2) and is never offered
        assert [r.spans[0] for r in records] == [(0, 2), (3, 4)]
        for previous, current in zip(records, records[1:]):
            assert current.start >= previous.end

    def test_empty_match_after_nonempty_is_skipped(self, scripted):
        # Like a* on "baaa": empty at 0, "aaa" at 1, then empty at 4 is refused
        matcher = scripted([((0, 0),), ((1, 4),), ((4, 4),)])
        records = scan_all("baaa", matcher)
        assert [r.spans[0] for r in records] == [(0, 0), (1, 4)]

    def test_no_match_ends_scan(self, scripted):
        matcher = scripted([])
        assert scan_all("abc", matcher) == []
        assert matcher.calls == [(0, 0)]

    def test_matcher_error_propagates(self, scripted):
        matcher = scripted([((0, 1),), ((2, 3),)], fail_at=1)
        with pytest.raises(RuntimeError, match="engine failure"):
            scan_all("abc", matcher)

    def test_backward_match_is_rejected(self):
        class Backwards:
            def exec(self, subject, start, options=0):
                return MatchRecord(((0, 1),))

        matches = iter_matches("aaa", Backwards())
        assert next(matches).spans[0] == (0, 1)
        with pytest.raises(ValueError):
            next(matches)

    def test_iter_matches_is_lazy(self, empty_matcher):
        matches = iter_matches("abc", empty_matcher)
        next(matches)
        assert len(empty_matcher.calls) == 1

    def test_bytes_subject(self, empty_matcher):
        assert len(scan_all(b"ab", empty_matcher)) == 3
