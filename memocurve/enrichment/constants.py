"""
Prompt fragments and configuration for word enrichment.
"""

# Configuration
N_SENTENCES = 3  # Number of example sentences per word
DEFAULT_MODEL = "gpt-4o-2024-08-06"

# ---- System Prompt ----

SYSTEM_PROMPT = """You are a world-class English lexicographer and language teacher.
Create a detailed word study card for the given word."""

# ---- Prompt Fragments ----

LEMMA_INSTRUCTIONS = """*** LEMMA / BASE FORM RULE ***:
If the user input is an inflected form (e.g., "went", "cats", "better", "running"), you MUST analyze the BASE FORM (lemma) instead (e.g., "go", "cat", "good", "run").
The 'spelling' field MUST be the base form."""

HIGHLIGHT_INSTRUCTIONS = """CRITICAL RULE FOR HIGHLIGHTS:
In example sentences, you MUST identify common collocations, idioms, or phrasal structures.
If a structure is discontinuous (other words appear in the middle), use '...' to represent the gap in the 'text' field.

EXAMPLES of the 'text' field for highlights:
- Sentence: "It is too hard to study tonight." -> Highlight text: "too...to"
- Sentence: "I usually go swimming on weekends." -> Highlight text: "on weekends"
- Sentence: "Please take my feelings into account." -> Highlight text: "take...into account"
- Sentence: "They are so busy that they cannot come." -> Highlight text: "so...that"

Highlight types:
- 'collocation': natural word combinations
- 'idiom': non-literal expressions
- 'slang': informal language"""

INFLECTION_INSTRUCTIONS = """INCLUDE MORPHOLOGY/INFLECTIONS:
Provide the plural form (if noun), and verb forms (past tense, past participle, present participle, third person singular) if applicable.
If a form doesn't exist (e.g. plural for an uncountable noun), return null for that field."""

SENTENCE_INSTRUCTIONS = """Provide {n_sentences} example sentences with translations.
Prioritize sentences that include common collocations or discontinuous structures."""


def format_prompt(base_instructions: str, **kwargs) -> str:
    """
    Format a prompt template with dynamic values.

    Args:
        base_instructions: The prompt template string
        **kwargs: Values to substitute (e.g., n_sentences=3)

    Returns:
        Formatted prompt string
    """
    return base_instructions.format(**kwargs)
