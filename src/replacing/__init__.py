"""Splicing replacement output into a subject."""

from .replace_assembler import assemble, literal_policy, template_policy, transform_policy

__all__ = ['assemble', 'literal_policy', 'template_policy', 'transform_policy']
