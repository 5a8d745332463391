"""Regex engine: matcher adapter and the public find/replace API."""

from .errors import MatchError, PatternCompileError, RegexEngineError
from .matcher import RegexMatcher, compile_matcher
from .options import ANCHORED, NOT_EMPTY_AT_START, CompileOptions
from .regexp import Regexp, compile, match_string

__all__ = [
    'MatchError', 'PatternCompileError', 'RegexEngineError',
    'RegexMatcher', 'compile_matcher',
    'ANCHORED', 'NOT_EMPTY_AT_START', 'CompileOptions',
    'Regexp', 'compile', 'match_string',
]
