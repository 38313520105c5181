"""Classification, type rendering and header assembly."""

from .classifier import classify, classify_position, declaration_kind, file_declarations, find_deepest_node
from .header_builder import HeaderBuilder, header_description, indentation_at
from .type_renderer import TypeRenderer, canonical_type, is_compound

__all__ = [
    'HeaderBuilder',
    'TypeRenderer',
    'canonical_type',
    'classify',
    'classify_position',
    'declaration_kind',
    'file_declarations',
    'find_deepest_node',
    'header_description',
    'indentation_at',
    'is_compound',
]
