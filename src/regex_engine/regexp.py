"""
Public regular expression API.

Every operation comes in a text form (str in, str out, offsets in code
points) and a byte-buffer form (bytes in, bytes out, offsets in bytes). The
byte form decodes its input as UTF-8 with surrogateescape, runs the text
form, and encodes the result back, so invalid UTF-8 survives untouched and
the two forms always agree.
"""

import logging
from typing import AnyStr, Callable, List, Optional, Sequence, Tuple, Union

from replacing.replace_assembler import assemble, literal_policy, template_policy, transform_policy
from scanning.records import MatchRecord
from scanning.scan_driver import UNBOUNDED, scan_all
from templates.template_expander import expand as expand_template
from .matcher import RegexMatcher, compile_matcher
from .options import CompileOptions

logger = logging.getLogger(__name__)

ENCODING = 'utf-8'
ERRORS = 'surrogateescape'


def _decode(data: bytes) -> str:
    return bytes(data).decode(ENCODING, ERRORS)


def _encode(text: str) -> bytes:
    return text.encode(ENCODING, ERRORS)


def _byte_offsets(text: str) -> Optional[List[int]]:
    """
    Byte offset of every code point offset in `text` (len(text) + 1 entries).
    None when the text is pure ASCII and the offsets are identical.
    """
    if text.isascii():
        return None
    offsets = [0]
    total = 0
    for ch in text:
        total += len(ch.encode(ENCODING, ERRORS))
        offsets.append(total)
    return offsets


class Regexp:
    """
    A compiled regular expression.

    Use compile() to build one. The underlying matcher is released by
    close() or when leaving a `with` block.
    """

    def __init__(self, matcher: RegexMatcher):
        self._matcher = matcher

    def __enter__(self) -> 'Regexp':
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def __str__(self) -> str:
        return self._matcher.pattern

    def __repr__(self) -> str:
        return f"Regexp({self._matcher.pattern!r})"

    def close(self):
        self._matcher.close()

    @property
    def pattern(self) -> str:
        return self._matcher.pattern

    def num_subexp(self) -> int:
        """Number of capture groups."""
        return self._matcher.capture_count()

    def subexp_names(self) -> List[str]:
        """Group names by index; index 0 and unnamed groups are ""."""
        return list(self._matcher.name_table())

    # Scanning

    def find_all(self, subject: Union[str, bytes], n: int = UNBOUNDED) -> List[MatchRecord]:
        """
        All non-overlapping matches in `subject`.

        Args:
            subject: str (code point offsets) or bytes (byte offsets)
            n: Negative for all matches, 0 for none, otherwise at most n

        Returns:
            List of MatchRecord in ascending order
        """
        if isinstance(subject, str):
            return scan_all(subject, self._matcher, n)

        text = _decode(subject)
        records = scan_all(text, self._matcher, n)
        offsets = _byte_offsets(text)
        if offsets is None:
            return records
        return [record.shifted(offsets) for record in records]

    def find_all_index(self, b: bytes, n: int = UNBOUNDED) -> List[Tuple[int, int]]:
        return [(r.start, r.end) for r in self.find_all(b, n)]

    def find_all_string_index(self, s: str, n: int = UNBOUNDED) -> List[Tuple[int, int]]:
        return [(r.start, r.end) for r in self.find_all(s, n)]

    def find_all_submatch_index(self, b: bytes, n: int = UNBOUNDED) -> List[List[int]]:
        return [r.flat() for r in self.find_all(b, n)]

    def find_all_string_submatch_index(self, s: str, n: int = UNBOUNDED) -> List[List[int]]:
        return [r.flat() for r in self.find_all(s, n)]

    def find_all_bytes(self, b: bytes, n: int = UNBOUNDED) -> List[bytes]:
        """Text of every match."""
        return [b[r.start:r.end] for r in self.find_all(b, n)]

    def find_all_strings(self, s: str, n: int = UNBOUNDED) -> List[str]:
        return [s[r.start:r.end] for r in self.find_all(s, n)]

    def find_all_submatch(self, b: bytes, n: int = UNBOUNDED) -> List[List[bytes]]:
        """Text of every group of every match; non-participating groups give b''."""
        return [_groups(b, r) for r in self.find_all(b, n)]

    def find_all_string_submatch(self, s: str, n: int = UNBOUNDED) -> List[List[str]]:
        return [_groups(s, r) for r in self.find_all(s, n)]

    def find_first(self, subject: Union[str, bytes]) -> Optional[MatchRecord]:
        """Leftmost match, or None."""
        records = self.find_all(subject, 1)
        return records[0] if records else None

    def find(self, b: bytes) -> Optional[bytes]:
        record = self.find_first(b)
        return None if record is None else b[record.start:record.end]

    def find_string(self, s: str) -> Optional[str]:
        record = self.find_first(s)
        return None if record is None else s[record.start:record.end]

    def find_index(self, b: bytes) -> Optional[Tuple[int, int]]:
        record = self.find_first(b)
        return None if record is None else (record.start, record.end)

    def find_string_index(self, s: str) -> Optional[Tuple[int, int]]:
        record = self.find_first(s)
        return None if record is None else (record.start, record.end)

    def find_submatch(self, b: bytes) -> Optional[List[bytes]]:
        record = self.find_first(b)
        return None if record is None else _groups(b, record)

    def find_string_submatch(self, s: str) -> Optional[List[str]]:
        record = self.find_first(s)
        return None if record is None else _groups(s, record)

    def find_submatch_index(self, b: bytes) -> Optional[List[int]]:
        record = self.find_first(b)
        return None if record is None else record.flat()

    def find_string_submatch_index(self, s: str) -> Optional[List[int]]:
        record = self.find_first(s)
        return None if record is None else record.flat()

    def match(self, b: bytes) -> bool:
        """True if the pattern matches anywhere in `b`."""
        return self.match_string(_decode(b))

    def match_string(self, s: str) -> bool:
        return self._matcher.exec(s, 0) is not None

    def split(self, s: AnyStr, n: int = UNBOUNDED) -> List[AnyStr]:
        """
        Slice `s` into the pieces between matches.

        n > 0 returns at most n pieces (the last one holds the unsplit
        remainder), n == 0 returns an empty list, n < 0 returns all pieces.
        """
        if n == 0:
            return []
        if self.pattern and len(s) == 0:
            return [s]

        pieces = []
        beg = end = 0
        for record in self.find_all(s, n):
            if n > 0 and len(pieces) == n - 1:
                break
            end = record.start
            if record.end != 0:
                pieces.append(s[beg:end])
            beg = record.end

        if end != len(s):
            pieces.append(s[beg:])
        return pieces

    # Replacing

    def _replace_text(self, text: str, policy_for: Callable[[str], Callable], n: int) -> str:
        records = scan_all(text, self._matcher, n)
        logger.debug("replacing %d matches of %r", len(records), self.pattern)
        return assemble(text, records, policy_for(text))

    def replace_all_string(self, src: str, repl: str, n: int = UNBOUNDED) -> str:
        """
        Replace matches with the template `repl` ($1, ${name}, $$ ...).
        n limits the number of replacements as in find_all().
        """
        names = self._matcher.name_table()
        return self._replace_text(src, lambda text: template_policy(repl, text, names), n)

    def replace_all(self, src: bytes, repl: bytes, n: int = UNBOUNDED) -> bytes:
        return _encode(self.replace_all_string(_decode(src), _decode(repl), n))

    def replace_all_literal_string(self, src: str, repl: str, n: int = UNBOUNDED) -> str:
        """Replace matches with `repl` taken verbatim; '$' has no meaning."""
        return self._replace_text(src, lambda text: literal_policy(repl), n)

    def replace_all_literal(self, src: bytes, repl: bytes, n: int = UNBOUNDED) -> bytes:
        return _encode(self.replace_all_literal_string(_decode(src), _decode(repl), n))

    def replace_all_string_func(self, src: str, repl: Callable[[str], str], n: int = UNBOUNDED) -> str:
        """Replace each match with repl(matched_text)."""
        return self._replace_text(src, lambda text: transform_policy(text, repl), n)

    def replace_all_func(self, src: bytes, repl: Callable[[bytes], bytes], n: int = UNBOUNDED) -> bytes:
        def text_repl(matched: str) -> str:
            return _decode(repl(_encode(matched)))

        return _encode(self.replace_all_string_func(_decode(src), text_repl, n))

    # Expanding

    def expand(self, dst: bytes, template: bytes, src: bytes,
               match: Union[MatchRecord, Sequence[int]]) -> bytes:
        """
        Append `template` expanded against `match` to `dst`.

        `match` is a MatchRecord or flat offsets as returned by
        find_submatch_index(), indexing into `src`.
        """
        return expand_template(dst, template, src, _as_record(match), self._matcher.name_table())

    def expand_string(self, dst: str, template: str, src: str,
                      match: Union[MatchRecord, Sequence[int]]) -> str:
        return expand_template(dst, template, src, _as_record(match), self._matcher.name_table())


def _groups(subject: AnyStr, record: MatchRecord) -> List[AnyStr]:
    return [subject[s:e] if s >= 0 else subject[:0] for s, e in record]


def _as_record(match: Union[MatchRecord, Sequence[int]]) -> MatchRecord:
    if isinstance(match, MatchRecord):
        return match
    return MatchRecord.from_flat(list(match))


def compile(pattern: Union[str, bytes], options: Optional[CompileOptions] = None, **flags) -> Regexp:
    """
    Compile a pattern.

    Args:
        pattern: Pattern source (bytes are decoded as UTF-8)
        options: CompileOptions; keyword flags (ignore_case=True, ...) are
            accepted instead for convenience

    Raises:
        PatternCompileError: the pattern is invalid
    """
    if options is None:
        options = CompileOptions(**flags)
    elif flags:
        raise TypeError("pass either options or keyword flags, not both")
    return Regexp(compile_matcher(pattern, options))


def match_string(pattern: str, s: str) -> bool:
    """True if `pattern` matches anywhere in `s`."""
    with compile(pattern) as compiled:
        return compiled.match_string(s)
