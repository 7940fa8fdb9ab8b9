"""Utilities package - Flat structure (no nested directories)"""

# URL utilities
from .url_utils import extract_id_from_url

# Text utilities
from .text_utils import normalize_query, parse_pokemon_id, clean_flavor_text

# Image utilities
from .image_utils import get_pokemon_image_url

__all__ = [
    # url
    "extract_id_from_url",
    # text
    "normalize_query",
    "parse_pokemon_id",
    "clean_flavor_text",
    # image
    "get_pokemon_image_url",
]
