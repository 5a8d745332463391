"""Shared fixtures: scripted matchers for driving the core without the regex library."""

import pytest

from scanning.records import NOT_EMPTY_AT_START, MatchRecord, NameTable


class ScriptedMatcher:
    """
    Matcher that replays a fixed list of candidate records.

    exec() returns the first candidate starting at or after the offset,
    skipping empty candidates at the offset when NOT_EMPTY_AT_START is set.
    """

    def __init__(self, records, names=None, fail_at=None):
        self.records = [r if isinstance(r, MatchRecord) else MatchRecord.from_spans(r) for r in records]
        width = len(self.records[0]) if self.records else 1
        self.names = NameTable(names) if names is not None else NameTable.unnamed(width - 1)
        self.fail_at = fail_at
        self.calls = []

    def exec(self, subject, start, options=0):
        self.calls.append((start, options))
        if self.fail_at is not None and start >= self.fail_at:
            raise RuntimeError(f"engine failure at {start}")
        for record in self.records:
            if record.start < start:
                continue
            if options & NOT_EMPTY_AT_START and record.start == start and record.is_empty:
                continue
            return record
        return None

    def capture_count(self):
        return self.names.capture_count

    def name_table(self):
        return self.names


class EmptyEverywhereMatcher:
    """Behaves like the pattern '' : an empty match at every offset."""

    def __init__(self):
        self.calls = []

    def exec(self, subject, start, options=0):
        self.calls.append((start, options))
        if options & NOT_EMPTY_AT_START:
            start += 1
        if start > len(subject):
            return None
        return MatchRecord(((start, start),))

    def capture_count(self):
        return 0

    def name_table(self):
        return NameTable([""])


@pytest.fixture
def empty_matcher():
    return EmptyEverywhereMatcher()


@pytest.fixture
def scripted():
    return ScriptedMatcher


@pytest.fixture
def john_smith():
    """Subject, record and names for "(?P<first>\\w+) (?P<last>\\w+)" on "John Smith"."""
    subject = "John Smith"
    record = MatchRecord(((0, 10), (0, 4), (5, 10)))
    names = NameTable(["", "first", "last"])
    return subject, record, names
