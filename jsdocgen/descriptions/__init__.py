"""Description sources for generated headers."""

from .base import DescriptionSource
from .sources import GenerativeSource, PlaceholderSource, StaticTextSource, select_description_source

__all__ = [
    'DescriptionSource',
    'GenerativeSource',
    'PlaceholderSource',
    'StaticTextSource',
    'select_description_source',
]
