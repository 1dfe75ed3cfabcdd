"""Content generation for new items."""

from memocurve.enrichment.generator import (
    EnrichmentError,
    add_word,
    generate_word_details,
    get_client,
)

__all__ = [
    "EnrichmentError",
    "add_word",
    "generate_word_details",
    "get_client",
]
