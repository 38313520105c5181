"""Parser modules for building syntax trees from source text."""

from .base_parser import BaseParser
from .type_oracle import SyntaxTreeTypeOracle, TypeOracle
from .typescript_parser import TypeScriptParser, build_syntax_tree, language_of

__all__ = [
    'BaseParser',
    'SyntaxTreeTypeOracle',
    'TypeOracle',
    'TypeScriptParser',
    'build_syntax_tree',
    'language_of',
]
