"""
Tests for AI word enrichment with a stubbed OpenAI client.
"""

from types import SimpleNamespace

import pytest

from conftest import NOW
from memocurve.enrichment import EnrichmentError, add_word, generate_word_details
from memocurve.enrichment import generator
from memocurve.schemas import MAX_SENTENCES, WordDetails


def _details(spelling="go"):
    return WordDetails.model_validate({
        "spelling": spelling,
        "ipa": {"us": "/ɡoʊ/", "uk": "/ɡəʊ/"},
        "definitions": [{"pos": "verb", "meaning": "move from one place to another", "translation": "去"}],
        "inflections": {"pastTense": "went", "pastParticiple": "gone"},
        "sentences": [
            {
                "en": "Let's go for a walk.",
                "cn": "我们去散步吧。",
                "highlights": [{"text": "go for a walk", "type": "collocation"}],
            }
        ],
    })


class StubCompletions:
    def __init__(self, parsed):
        self.parsed = parsed
        self.calls = []

    def parse(self, **kwargs):
        self.calls.append(kwargs)
        message = SimpleNamespace(parsed=self.parsed)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class StubClient:
    def __init__(self, parsed):
        self.completions = StubCompletions(parsed)
        self.beta = SimpleNamespace(chat=SimpleNamespace(completions=self.completions))


class TestGenerateWordDetails:
    def test_structured_output(self):
        client = StubClient(_details())
        details = generate_word_details("went", client=client)

        assert details.spelling == "go"
        call = client.completions.calls[0]
        assert call["response_format"] is WordDetails
        assert call["messages"][0]["role"] == "system"
        assert '"went"' in call["messages"][1]["content"]

    def test_missing_parse_result(self):
        with pytest.raises(EnrichmentError):
            generate_word_details("went", client=StubClient(None))

    def test_empty_word(self):
        client = StubClient(_details())
        with pytest.raises(ValueError):
            generate_word_details("   ", client=client)
        assert client.completions.calls == []

    def test_missing_api_key(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        monkeypatch.setattr(generator, "_client", None)
        with pytest.raises(ValueError):
            generate_word_details("went")


class TestAddWord:
    def test_new_item_uses_base_form(self):
        item = add_word("went", client=StubClient(_details()), now=NOW)

        assert item.word == "go"
        assert item.memory.is_new
        assert item.memory.next_review_date == NOW
        assert isinstance(item.content, WordDetails)
        assert item.content.inflections.past_tense == "went"


class TestWordDetails:
    def test_requires_a_definition(self):
        data = _details().model_dump()
        data["definitions"] = []
        with pytest.raises(ValueError):
            WordDetails.model_validate(data)

    def test_sentence_limit(self):
        data = _details().model_dump()
        data["sentences"] = data["sentences"] * (MAX_SENTENCES + 1)
        with pytest.raises(ValueError):
            WordDetails.model_validate(data)
