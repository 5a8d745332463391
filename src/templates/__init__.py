"""Replacement template parsing and expansion."""

from .template_expander import (
    NamedRef,
    NumericRef,
    Template,
    expand,
    parse_template,
    unresolved_references,
)

__all__ = ['NamedRef', 'NumericRef', 'Template', 'expand', 'parse_template', 'unresolved_references']
