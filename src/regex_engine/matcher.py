"""
Matcher backed by the `regex` library.

Exposes the small capability the scan driver and the template expander need:
exec() from a start offset, the capture count and the name table.
"""

import logging
from typing import Optional, Union

import regex

from scanning.records import ANCHORED, NOT_EMPTY_AT_START, MatchRecord, NameTable
from .errors import MatchError, PatternCompileError
from .options import CompileOptions

logger = logging.getLogger(__name__)


class RegexMatcher:
    """
    A compiled pattern.

    The handle is released with close() (or by leaving a `with` block);
    exec() on a closed matcher raises MatchError.
    """

    def __init__(self, pattern: str, options: Optional[CompileOptions] = None):
        self.pattern = pattern
        self.options = options or CompileOptions()
        flags = self.options.to_flags()
        try:
            self._compiled = regex.compile(pattern, flags)
        except regex.error as e:
            raise PatternCompileError(pattern, getattr(e, 'msg', str(e)), getattr(e, 'pos', None)) from e
        if self._compiled.flags & regex.REVERSE:
            raise PatternCompileError(pattern, "reverse searching (?r) is not supported by forward scans")
        self._not_empty = None
        self._names = self._build_name_table()
        self._closed = False
        logger.debug("compiled %r with %d capture groups", pattern, self.capture_count())

    def __enter__(self) -> 'RegexMatcher':
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"RegexMatcher({self.pattern!r}, {state})"

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self):
        """Release the compiled pattern. Calling it twice is harmless."""
        if not self._closed:
            self._closed = True
            self._compiled = None
            self._not_empty = None
            logger.debug("closed matcher for %r", self.pattern)

    def capture_count(self) -> int:
        return len(self._names) - 1

    def name_table(self) -> NameTable:
        return self._names

    def _build_name_table(self) -> NameTable:
        names = [""] * (self._compiled.groups + 1)
        for name, index in self._compiled.groupindex.items():
            names[index] = name
        return NameTable(names)

    def _not_empty_at_start(self):
        """
        Variant of the pattern that cannot end where the search started.

        Since a match never starts before the search position, this is exactly
        "no empty match at the start offset": alternatives that match something
        there are still tried, then later positions.
        """
        if self._not_empty is None:
            separator = "\n" if self._compiled.flags & regex.VERBOSE else ""
            try:
                self._not_empty = regex.compile(
                    f"(?:{self.pattern}{separator})(?!\\G)", self.options.to_flags())
            except regex.error as e:
                raise MatchError(f"cannot exclude empty matches for {self.pattern!r}: {e}") from e
        return self._not_empty

    def exec(self, subject: str, start: int = 0, options: int = 0) -> Optional[MatchRecord]:
        """
        Find the first match at or after `start`.

        The subject must be text; Regexp handles bytes by decoding them first.

        Returns:
            The match spans, or None when there is no match

        Raises:
            MatchError: the matcher is closed, the offset is invalid or the
                match could not be completed (e.g. timeout)
            TypeError: `subject` is not a str
        """
        if not isinstance(subject, str):
            raise TypeError(f"subject must be str, not {type(subject).__name__}")
        if self._closed:
            raise MatchError(f"matcher for {self.pattern!r} is closed", start)
        if not 0 <= start <= len(subject):
            raise MatchError(f"start offset {start} outside subject of length {len(subject)}", start)

        compiled = self._not_empty_at_start() if options & NOT_EMPTY_AT_START else self._compiled
        try:
            if options & ANCHORED:
                m = compiled.match(subject, start, timeout=self.options.timeout)
            else:
                m = compiled.search(subject, start, timeout=self.options.timeout)
        except TimeoutError as e:
            raise MatchError(f"matching {self.pattern!r} from offset {start} timed out", start) from e

        if m is None:
            return None
        return MatchRecord.from_spans([m.span(i) for i in range(self._compiled.groups + 1)])


def compile_matcher(pattern: Union[str, bytes], options: Optional[CompileOptions] = None) -> RegexMatcher:
    """Compile `pattern`; bytes patterns are taken as UTF-8."""
    if isinstance(pattern, (bytes, bytearray)):
        pattern = bytes(pattern).decode('utf-8', 'surrogateescape')
    return RegexMatcher(pattern, options)
