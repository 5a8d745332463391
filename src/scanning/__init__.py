"""Match records and the scan driver."""

from .records import (
    ANCHORED,
    NOT_EMPTY_AT_START,
    UNMATCHED,
    MatchRecord,
    NameTable,
)
from .scan_driver import UNBOUNDED, Matcher, ScanState, iter_matches, scan_all

__all__ = [
    'ANCHORED', 'NOT_EMPTY_AT_START', 'UNMATCHED', 'UNBOUNDED',
    'MatchRecord', 'NameTable', 'Matcher', 'ScanState', 'iter_matches', 'scan_all',
]
