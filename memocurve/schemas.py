"""
Pydantic models for word study content.

These models define the content record produced by AI enrichment and
stored alongside each item. The scheduler treats them as opaque.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


# Configuration
MAX_SENTENCES = 5  # Maximum number of example sentences per word


class HighlightType(str, Enum):
    """Kind of phrase highlighted inside an example sentence."""
    COLLOCATION = "collocation"  # Natural word combination
    IDIOM = "idiom"              # Non-literal expression
    SLANG = "slang"              # Informal language


# ---- Pronunciation ----

class Pronunciation(BaseModel):
    """IPA transcriptions."""
    us: str = Field(..., description="American IPA")
    uk: str = Field(..., description="British IPA")


# ---- Definitions ----

class WordDefinition(BaseModel):
    """One sense of the word."""
    pos: str = Field(..., description="Part of speech")
    meaning: str = Field(..., description="Definition in English")
    translation: str = Field(..., description="Translation in the learner's language")


class WordInflections(BaseModel):
    """Morphological variations (omitted when they do not exist)."""
    plural: Optional[str] = None
    past_tense: Optional[str] = Field(default=None, alias="pastTense")
    past_participle: Optional[str] = Field(default=None, alias="pastParticiple")
    present_participle: Optional[str] = Field(default=None, alias="presentParticiple")
    third_person_singular: Optional[str] = Field(default=None, alias="thirdPersonSingular")

    model_config = {"populate_by_name": True}


# ---- Example Sentences ----

class SentenceHighlight(BaseModel):
    """
    A highlighted structure inside a sentence.

    Discontinuous structures use '...' for the gap (e.g. "take...into account").
    """
    text: str
    type: HighlightType

    model_config = {"use_enum_values": True}


class ExampleSentence(BaseModel):
    """A bilingual example sentence pair."""
    en: str = Field(..., description="English sentence")
    cn: str = Field(..., description="Translation")
    highlights: list[SentenceHighlight] = Field(default_factory=list)


# ---- Main Content Record ----

class WordDetails(BaseModel):
    """
    Study card content for a single word.

    spelling is always the base form (lemma).
    """
    spelling: str = Field(..., description="The base form (lemma) of the word")
    ipa: Pronunciation
    definitions: list[WordDefinition] = Field(..., min_length=1, description="At least one definition")
    inflections: Optional[WordInflections] = None
    sentences: list[ExampleSentence] = Field(default_factory=list, max_length=MAX_SENTENCES)
    collocations: list[str] = Field(default_factory=list)
    etymology: Optional[str] = None
