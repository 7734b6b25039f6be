# tests/test_extractor.py

from __future__ import annotations

from types import SimpleNamespace

import httpx
import openai
import pytest

from studyhouse.core.ports import ExtractedRecord
from studyhouse.imports.extractor import OpenRouterDocumentExtractor, parse_extraction_payload
from studyhouse.imports.offline import OfflineDocumentExtractor


def _settings(**kw) -> SimpleNamespace:
    base = dict(
        openrouter_api_key="sk-test",
        openrouter_base_url="https://openrouter.example/api/v1",
        llm_models=["model-a", "model-b"],
        extra_headers={"X-Title": "test"},
        import_timeout_seconds=5.0,
    )
    base.update(kw)
    return SimpleNamespace(**base)


class _FakeCompletions:
    def __init__(self, outcomes: list) -> None:
        self.outcomes = list(outcomes)
        self.models: list[str] = []

    def create(self, **kwargs):
        self.models.append(kwargs["model"])
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        message = SimpleNamespace(content=outcome)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _with_fake_client(extractor: OpenRouterDocumentExtractor, outcomes: list) -> _FakeCompletions:
    completions = _FakeCompletions(outcomes)
    extractor._client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return completions


def test_parse_payload_shapes() -> None:
    wrapped = '{"classes": [{"className": "Physics", "category": "Core"}, {"className": "Art"}]}'
    assert parse_extraction_payload(wrapped) == [
        ExtractedRecord("Physics", "Core"),
        ExtractedRecord("Art", None),
    ]
    assert parse_extraction_payload('[{"className": " Logic ", "category": ""}]') == [ExtractedRecord("Logic")]
    assert parse_extraction_payload('```json\n[{"className": "Music"}]\n```') == [ExtractedRecord("Music")]
    assert parse_extraction_payload("") == []
    assert parse_extraction_payload(None) == []


@pytest.mark.parametrize("bad", ['{"classes": 3}', '[{"category": "Core"}]', "[1, 2]", "not json"])
def test_parse_payload_rejects_schema_mismatch(bad: str) -> None:
    with pytest.raises(ValueError):
        parse_extraction_payload(bad)


def test_requires_api_key() -> None:
    with pytest.raises(RuntimeError):
        OpenRouterDocumentExtractor(_settings(openrouter_api_key=None))


def test_falls_back_to_next_model_on_connection_error() -> None:
    extractor = OpenRouterDocumentExtractor(_settings())
    request = httpx.Request("POST", "https://openrouter.example/api/v1/chat/completions")
    completions = _with_fake_client(
        extractor,
        [openai.APIConnectionError(request=request), '{"classes": [{"className": "Botany"}]}'],
    )

    assert extractor.extract(b"%PDF") == [ExtractedRecord("Botany")]
    assert completions.models == ["model-a", "model-b"]


def test_bad_payload_yields_no_records() -> None:
    extractor = OpenRouterDocumentExtractor(_settings())
    _with_fake_client(extractor, ["this is not json"])
    assert extractor.extract(b"%PDF") == []


def test_all_models_failing_yields_no_records() -> None:
    extractor = OpenRouterDocumentExtractor(_settings())
    request = httpx.Request("POST", "https://openrouter.example/api/v1/chat/completions")
    _with_fake_client(
        extractor,
        [openai.APITimeoutError(request=request), openai.APIConnectionError(request=request)],
    )
    assert extractor.extract(b"%PDF") == []


def test_offline_extractor_returns_nothing() -> None:
    assert OfflineDocumentExtractor().extract(b"%PDF") == []
