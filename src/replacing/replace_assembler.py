"""
Replace assembler: rebuilds a subject with every match swapped for the
output of a per-match policy.
"""

from typing import AnyStr, Callable, Iterable

from scanning.records import MatchRecord
from templates.template_expander import parse_template


PerMatch = Callable[[MatchRecord], AnyStr]


def assemble(subject: AnyStr, records: Iterable[MatchRecord], per_match: PerMatch) -> AnyStr:
    """
    Splice replacements between the literal gaps of `subject`.

    Args:
        subject: Original text or bytes
        records: Matches in ascending, non-overlapping order
        per_match: Called once per record, returns its replacement

    Returns:
        The rebuilt subject, same type as `subject`
    """
    result_parts = []
    last_end = 0

    for record in records:
        if record.start < last_end:
            raise ValueError(f"match at {record.start} overlaps the previous match ending at {last_end}")
        result_parts.append(subject[last_end:record.start])
        result_parts.append(per_match(record))
        last_end = record.end

    # Add remaining text
    result_parts.append(subject[last_end:])

    return subject[:0].join(result_parts)


def template_policy(template, subject: AnyStr, names=None) -> PerMatch:
    """Replacement policy expanding `template` for each match."""
    parsed = parse_template(template)

    def replace(record: MatchRecord):
        return parsed.render(subject, record, names)

    return replace


def literal_policy(replacement: AnyStr) -> PerMatch:
    """Replacement policy returning `replacement` unchanged for every match."""

    def replace(_record: MatchRecord):
        return replacement

    return replace


def transform_policy(subject: AnyStr, func: Callable[[AnyStr], AnyStr]) -> PerMatch:
    """Replacement policy applying `func` to the matched text."""

    def replace(record: MatchRecord):
        return func(subject[record.start:record.end])

    return replace
