"""
AI-powered word enrichment.

Generates the study card content for a new word with OpenAI structured
outputs, then wraps it in a new item that is due immediately.

Usage:
    from memocurve.enrichment import add_word

    item = add_word("serendipity")
"""

from __future__ import annotations

from datetime import datetime
import logging
import os
from typing import Optional

from dotenv import load_dotenv
from openai import OpenAI

from memocurve.enrichment.constants import (
    DEFAULT_MODEL,
    HIGHLIGHT_INSTRUCTIONS,
    INFLECTION_INSTRUCTIONS,
    LEMMA_INSTRUCTIONS,
    N_SENTENCES,
    SENTENCE_INSTRUCTIONS,
    SYSTEM_PROMPT,
    format_prompt,
)
from memocurve.fsrs.memory_state import Item, new_item
from memocurve.schemas import WordDetails


logger = logging.getLogger(__name__)

# Load environment variables
load_dotenv()

# Initialize OpenAI client (module-level, reused across calls)
_client: Optional[OpenAI] = None


class EnrichmentError(ValueError):
    """Raised when the model does not return a usable content record."""


def get_client() -> OpenAI:
    """Get or create the OpenAI client."""
    global _client
    if _client is None:
        api_key = os.getenv("OPENAI_API_KEY")
        if not api_key:
            raise ValueError("OPENAI_API_KEY not found in environment variables")
        _client = OpenAI(api_key=api_key)
    return _client


def build_prompt(word: str) -> str:
    """Build the user prompt for a word."""
    prompt = f'Analyze the English word: "{word}".\n\n'
    prompt += LEMMA_INSTRUCTIONS + "\n\n"
    prompt += HIGHLIGHT_INSTRUCTIONS + "\n\n"
    prompt += INFLECTION_INSTRUCTIONS + "\n\n"
    prompt += format_prompt(SENTENCE_INSTRUCTIONS, n_sentences=N_SENTENCES)
    return prompt


def generate_word_details(
    word: str,
    model: str = DEFAULT_MODEL,
    client: Optional[OpenAI] = None
) -> WordDetails:
    """
    Generate study card content for a word.

    Args:
        word: The word to analyze (may be an inflected form)
        model: OpenAI model to use
        client: Optional client (defaults to the shared client)

    Returns:
        WordDetails for the base form

    Raises:
        ValueError: If the word is empty or OPENAI_API_KEY is not set
        EnrichmentError: If the model returns no parsed content
        openai.APIError: If the API call fails
    """
    word = word.strip()
    if not word:
        raise ValueError("Cannot enrich an empty word")

    if client is None:
        client = get_client()

    logger.info("Generating word details for %r with %s", word, model)

    # Call OpenAI with structured output
    completion = client.beta.chat.completions.parse(
        model=model,
        messages=[
            {
                "role": "system",
                "content": SYSTEM_PROMPT
            },
            {
                "role": "user",
                "content": build_prompt(word)
            }
        ],
        response_format=WordDetails,
    )

    # Extract the structured output
    details = completion.choices[0].message.parsed

    if details is None:
        raise EnrichmentError(f"Failed to parse structured output for word: {word}")

    return details


def add_word(
    word: str,
    model: str = DEFAULT_MODEL,
    client: Optional[OpenAI] = None,
    now: Optional[datetime] = None
) -> Item:
    """
    Generate content for a word and create a new item for it.

    The item is keyed by the base form returned by the model.
    """
    details = generate_word_details(word, model=model, client=client)
    return new_item(details.spelling, content=details, now=now)
