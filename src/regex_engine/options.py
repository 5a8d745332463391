"""
Compile and exec options for the regex engine.
"""

from dataclasses import dataclass, asdict
from typing import Optional

import regex

from scanning.records import ANCHORED, NOT_EMPTY_AT_START

__all__ = ['CompileOptions', 'ANCHORED', 'NOT_EMPTY_AT_START']


@dataclass
class CompileOptions:
    """Flags used when compiling a pattern."""
    ignore_case: bool = False
    multiline: bool = False
    dotall: bool = False
    verbose: bool = False
    ascii: bool = False
    timeout: Optional[float] = None  # seconds per exec call, None = no limit

    def to_flags(self) -> int:
        """Build the regex library flag word."""
        flags = regex.ASCII if self.ascii else regex.UNICODE
        if self.ignore_case:
            flags |= regex.IGNORECASE
        if self.multiline:
            flags |= regex.MULTILINE
        if self.dotall:
            flags |= regex.DOTALL
        if self.verbose:
            flags |= regex.VERBOSE
        return flags

    def to_dict(self) -> dict:
        return asdict(self)
