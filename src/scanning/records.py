"""
Match records and capture-group name tables.
"""

from dataclasses import dataclass
from typing import AnyStr, Iterator, List, Optional, Sequence, Tuple


Span = Tuple[int, int]

# Span of a capture group that did not take part in the match
UNMATCHED: Span = (-1, -1)

# Exec option bits understood by matchers
NOT_EMPTY_AT_START = 0x1  # an empty match at the start offset is not a match
ANCHORED = 0x2            # the match must begin exactly at the start offset


@dataclass(frozen=True)
class MatchRecord:
    """
    Offsets produced by one successful match.

    spans[0] is the whole match, spans[1..N] are the capture groups in
    declaration order. A group that did not participate has the span
    UNMATCHED.
    """
    spans: Tuple[Span, ...]

    def __post_init__(self):
        if not self.spans:
            raise ValueError("a match record needs at least the whole-match span")
        if self.spans[0] == UNMATCHED:
            raise ValueError("the whole-match span must participate")
        for start, end in self.spans:
            if (start, end) != UNMATCHED and not 0 <= start <= end:
                raise ValueError(f"invalid span ({start}, {end})")

    @classmethod
    def from_spans(cls, spans: Sequence[Span]) -> 'MatchRecord':
        return cls(tuple((int(s), int(e)) for s, e in spans))

    @classmethod
    def from_flat(cls, offsets: Sequence[int]) -> 'MatchRecord':
        """Build a record from a flat [start0, end0, start1, end1, ...] list."""
        if len(offsets) % 2:
            raise ValueError("flat offsets must come in (start, end) pairs")
        pairs = []
        for i in range(0, len(offsets), 2):
            start, end = offsets[i], offsets[i + 1]
            pairs.append(UNMATCHED if start < 0 or end < 0 else (start, end))
        return cls(tuple(pairs))

    @property
    def start(self) -> int:
        return self.spans[0][0]

    @property
    def end(self) -> int:
        return self.spans[0][1]

    @property
    def is_empty(self) -> bool:
        """True for a zero-width match."""
        return self.start == self.end

    def __len__(self) -> int:
        return len(self.spans)

    def __iter__(self) -> Iterator[Span]:
        return iter(self.spans)

    def span(self, index: int) -> Span:
        """Span of group `index`, UNMATCHED when out of range."""
        if 0 <= index < len(self.spans):
            return self.spans[index]
        return UNMATCHED

    def participated(self, index: int) -> bool:
        return self.span(index) != UNMATCHED

    def group(self, subject: AnyStr, index: int = 0) -> Optional[AnyStr]:
        """Text of group `index` in `subject`, None if it did not participate."""
        start, end = self.span(index)
        if start < 0:
            return None
        return subject[start:end]

    def flat(self) -> List[int]:
        """Flat offsets, indexed 2*group + {0, 1}."""
        offsets = []
        for start, end in self.spans:
            offsets.extend((start, end))
        return offsets

    def shifted(self, mapping: Sequence[int]) -> 'MatchRecord':
        """Translate every offset through `mapping`, keeping UNMATCHED as is."""
        return MatchRecord(tuple(
            span if span == UNMATCHED else (mapping[span[0]], mapping[span[1]])
            for span in self.spans
        ))


class NameTable:
    """
    Names of the capture groups, indexed 0..capture_count.

    Index 0 is the whole match and has no name; unnamed groups map to "".
    The same name may appear at several indices.
    """

    def __init__(self, names: Sequence[str]):
        self.names: List[str] = list(names)
        if not self.names:
            self.names = [""]

    @classmethod
    def unnamed(cls, capture_count: int) -> 'NameTable':
        return cls([""] * (capture_count + 1))

    def __len__(self) -> int:
        return len(self.names)

    def __getitem__(self, index: int) -> str:
        return self.names[index]

    def __iter__(self) -> Iterator[str]:
        return iter(self.names)

    def __eq__(self, other) -> bool:
        if isinstance(other, NameTable):
            return self.names == other.names
        if isinstance(other, (list, tuple)):
            return self.names == list(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"NameTable({self.names!r})"

    @property
    def capture_count(self) -> int:
        return len(self.names) - 1

    def indices_of(self, name: str) -> List[int]:
        """All indices declared with `name`, ascending."""
        if not name:
            return []
        return [i for i, n in enumerate(self.names) if n == name]

    def resolve(self, name: str, record: MatchRecord) -> Optional[int]:
        """
        First index, in ascending order, named `name` whose span participated
        in `record`. None when nothing matches.
        """
        for index in self.indices_of(name):
            if record.participated(index):
                return index
        return None
