"""
Scan driver: enumerates all non-overlapping matches of a matcher in a subject.

Zero-width matches are handled the way PCRE's NOTEMPTY_ATSTART option
handles them: once a match has ended at the cursor, the next match may not
be empty at that same offset, so every scan makes forward progress.
"""

import logging
from dataclasses import dataclass
from typing import AnyStr, Iterator, List, Optional, Protocol

from .records import NOT_EMPTY_AT_START, MatchRecord, NameTable

logger = logging.getLogger(__name__)

UNBOUNDED = -1


class Matcher(Protocol):
    """Capability the scan driver needs from a compiled pattern."""

    def exec(self, subject, start: int, options: int = 0) -> Optional[MatchRecord]:
        ...

    def capture_count(self) -> int:
        ...

    def name_table(self) -> NameTable:
        ...


@dataclass
class ScanState:
    """Cursor, remaining budget and the empty-match guard of one scan."""
    cursor: int = 0
    budget: int = UNBOUNDED
    # Offset at which the next match must not be empty, None = no constraint
    not_empty_at: Optional[int] = None

    def can_continue(self, length: int) -> bool:
        return self.cursor <= length and self.budget != 0

    def exec_options(self) -> int:
        if self.not_empty_at is not None and self.not_empty_at == self.cursor:
            return NOT_EMPTY_AT_START
        return 0

    def advance(self, record: MatchRecord):
        """Move past `record` and charge it to the budget."""
        self.cursor = record.end
        self.not_empty_at = record.end
        if self.budget > 0:
            self.budget -= 1


def iter_matches(subject: AnyStr, matcher: Matcher, max_matches: int = UNBOUNDED) -> Iterator[MatchRecord]:
    """
    Yield the non-overlapping matches of `matcher` in `subject`, in order.

    Args:
        subject: Text or bytes to scan
        matcher: Compiled pattern exposing exec()
        max_matches: Negative for no limit, 0 for none, otherwise at most that many

    Errors raised by the matcher propagate; "no match" simply ends the scan.
    """
    state = ScanState(budget=max_matches if max_matches >= 0 else UNBOUNDED)
    length = len(subject)

    while state.can_continue(length):
        record = matcher.exec(subject, state.cursor, state.exec_options())
        if record is None:
            break
        if record.start < state.cursor:
            raise ValueError(
                f"matcher returned a match at {record.start}, before the cursor at {state.cursor}")
        yield record
        state.advance(record)


def scan_all(subject: AnyStr, matcher: Matcher, max_matches: int = UNBOUNDED) -> List[MatchRecord]:
    """Collect every match iter_matches() yields."""
    records = list(iter_matches(subject, matcher, max_matches))
    logger.debug("scan of %d units found %d matches", len(subject), len(records))
    return records
