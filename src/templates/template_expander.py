"""
Replacement templates.

A template is literal text with group references:

    $name     reference ends at the first non-identifier character
    ${name}   reference delimited by braces
    $$        a literal dollar sign

Identifier characters are letters, decimal digits and '_' (Unicode letters
and digits included). A name made of ASCII digits without a leading zero, or
exactly "0", refers to a group by position (0 = whole match); anything else
refers to a group by its declared name.

Malformed references are copied as a literal '$' and scanning resumes right
after it. References that cannot be resolved expand to nothing.
"""

from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import AnyStr, List, Optional, Sequence, Tuple, Union

from scanning.records import MatchRecord, NameTable


ENCODING = 'utf-8'
ERRORS = 'surrogateescape'


@dataclass(frozen=True)
class NumericRef:
    """Reference to a capture group by position."""
    index: int

    def __str__(self) -> str:
        return f"${{{self.index}}}"


@dataclass(frozen=True)
class NamedRef:
    """Reference to a capture group by declared name."""
    name: str

    def __str__(self) -> str:
        return f"${{{self.name}}}"


Reference = Union[NumericRef, NamedRef]
Piece = Union[str, NumericRef, NamedRef]


class _State(Enum):
    LITERAL = 'literal'
    DOLLAR_SEEN = 'dollar_seen'
    NAME = 'name'
    BRACE_NAME = 'brace_name'


def is_identifier_char(ch: str) -> bool:
    return ch == '_' or ch.isalpha() or ch.isdecimal()


def make_reference(name: str) -> Reference:
    """Classify a reference name as positional or named."""
    if all('0' <= c <= '9' for c in name) and (name == '0' or name[0] != '0'):
        return NumericRef(int(name))
    return NamedRef(name)


def resolve_reference(ref: Reference, record: MatchRecord, names: NameTable) -> Optional[int]:
    """Group index a reference points to in `record`, None if it has no text there."""
    if isinstance(ref, NumericRef):
        if record.participated(ref.index):
            return ref.index
        return None
    return names.resolve(ref.name, record)


def _as_name_table(names) -> NameTable:
    if isinstance(names, NameTable):
        return names
    return NameTable(list(names or []))


class Template:
    """A parsed replacement template: literal pieces and references."""

    def __init__(self, pieces: Sequence[Piece], source: str = ""):
        self.pieces: Tuple[Piece, ...] = tuple(pieces)
        self.source = source
        self._encoded = None

    def __repr__(self) -> str:
        return f"Template({self.source!r})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Template):
            return NotImplemented
        return self.pieces == other.pieces

    def __hash__(self) -> int:
        return hash(self.pieces)

    def references(self) -> List[Reference]:
        return [p for p in self.pieces if not isinstance(p, str)]

    def is_literal(self) -> bool:
        """True when the template contains no references."""
        return not self.references()

    def _byte_pieces(self) -> Tuple[Union[bytes, Reference], ...]:
        if self._encoded is None:
            self._encoded = tuple(
                p.encode(ENCODING, ERRORS) if isinstance(p, str) else p
                for p in self.pieces
            )
        return self._encoded

    def render(self, subject: AnyStr, record: MatchRecord, names=None) -> AnyStr:
        """
        Render the template against one match.

        Args:
            subject: The text (or bytes) the match offsets index into
            record: Spans of the match
            names: NameTable (or plain list of names) of the pattern

        Returns:
            Rendered text, of the same type as `subject`
        """
        table = _as_name_table(names)
        if isinstance(subject, str):
            pieces = self.pieces
        else:
            pieces = self._byte_pieces()

        parts = []
        for piece in pieces:
            if isinstance(piece, (str, bytes)):
                parts.append(piece)
                continue
            index = resolve_reference(piece, record, table)
            if index is not None:
                start, end = record.span(index)
                parts.append(subject[start:end])
        return subject[:0].join(parts)


@lru_cache(maxsize=256)
def _parse(text: str) -> Template:
    pieces: List[Piece] = []
    literal: List[str] = []

    def flush():
        text_run = ''.join(literal)
        literal.clear()
        if text_run:
            pieces.append(text_run)

    state = _State.LITERAL
    length = len(text)
    i = 0
    dollar = 0
    name_start = 0

    while True:
        ch = text[i] if i < length else None

        if state is _State.LITERAL:
            j = text.find('$', i)
            if j < 0:
                literal.append(text[i:])
                break
            literal.append(text[i:j])
            dollar = j
            i = j + 1
            state = _State.DOLLAR_SEEN

        elif state is _State.DOLLAR_SEEN:
            if ch == '$':
                literal.append('$')
                i += 1
                state = _State.LITERAL
            elif ch == '{':
                i += 1
                name_start = i
                state = _State.BRACE_NAME
            elif ch is not None and is_identifier_char(ch):
                name_start = i
                state = _State.NAME
            else:
                # Malformed: keep the '$', rescan what follows it
                literal.append('$')
                state = _State.LITERAL

        elif state is _State.NAME:
            if ch is not None and is_identifier_char(ch):
                i += 1
            else:
                flush()
                pieces.append(make_reference(text[name_start:i]))
                state = _State.LITERAL

        else:  # BRACE_NAME
            if ch is not None and is_identifier_char(ch):
                i += 1
            elif ch == '}' and i > name_start:
                flush()
                pieces.append(make_reference(text[name_start:i]))
                i += 1
                state = _State.LITERAL
            else:
                literal.append('$')
                i = dollar + 1
                state = _State.LITERAL

    flush()
    return Template(pieces, text)


def parse_template(template: Union[str, bytes, Template]) -> Template:
    """
    Parse a template. Bytes are decoded as UTF-8 (undecodable bytes survive
    through surrogateescape and are restored when rendering into bytes).
    """
    if isinstance(template, Template):
        return template
    if isinstance(template, (bytes, bytearray)):
        template = bytes(template).decode(ENCODING, ERRORS)
    return _parse(template)


def expand(output, template, subject: AnyStr, record: MatchRecord, names=None):
    """
    Append `template` rendered against `record` to `output`.

    A bytearray output is extended in place; str and bytes outputs are
    returned as a new object.
    """
    rendered = parse_template(template).render(subject, record, names)
    if isinstance(output, bytearray):
        output.extend(rendered)
        return output
    return output + rendered


def unresolved_references(template, capture_count: int, names=None) -> List[Reference]:
    """
    References that can never produce text for a pattern with `capture_count`
    groups and the given name table. Expansion silently skips these; callers
    wanting strict templates can reject them up front.
    """
    table = _as_name_table(names)
    unresolved = []
    for ref in parse_template(template).references():
        if isinstance(ref, NumericRef):
            if ref.index > capture_count:
                unresolved.append(ref)
        elif not table.indices_of(ref.name):
            unresolved.append(ref)
    return unresolved
