# src/studyhouse/imports/extractor.py

from __future__ import annotations

import base64
import json
import logging
from typing import Any

import httpx
import openai
from openai import OpenAI

from ..core.ports import ExtractedRecord

logger = logging.getLogger(__name__)

EXTRACTION_PROMPT = (
    "Extract all classes or course names from the tables in this curriculum PDF. "
    "For each class, provide the course title and if possible, its category "
    "(e.g., Core, Elective, Humanities). "
    'Return JSON of the form {"classes": [{"className": "...", "category": "..."}]}.'
)


def _is_auth_error(exc: Exception) -> bool:
    return isinstance(exc, (openai.AuthenticationError, openai.PermissionDeniedError))


def _is_retryable_on_next_model(exc: Exception) -> bool:
    return isinstance(
        exc,
        (openai.NotFoundError, openai.RateLimitError, openai.APIConnectionError, openai.APITimeoutError),
    )


def _strip_fences(text: str) -> str:
    s = text.strip()
    if s.startswith("```"):
        s = s.split("\n", 1)[1] if "\n" in s else ""
        if s.rstrip().endswith("```"):
            s = s.rstrip()[:-3]
    return s.strip()


def parse_extraction_payload(text: str | None) -> list[ExtractedRecord]:
    """
    Decode the model's JSON answer.

    Accepts either a bare list of {className, category?} objects or an object
    wrapping that list under "classes". Raises ValueError on schema mismatch.
    """
    if not text or not text.strip():
        return []
    data: Any = json.loads(_strip_fences(text))
    if isinstance(data, dict):
        data = data.get("classes")
    if not isinstance(data, list):
        raise ValueError("expected a list of classes")

    out: list[ExtractedRecord] = []
    for item in data:
        if not isinstance(item, dict):
            raise ValueError("class entry is not an object")
        name = item.get("className")
        if not isinstance(name, str):
            raise ValueError("className is missing")
        if not name.strip():
            continue
        category = item.get("category")
        out.append(
            ExtractedRecord(
                class_name=name.strip(),
                category=category.strip() if isinstance(category, str) and category.strip() else None,
            )
        )
    return out


class OpenRouterDocumentExtractor:
    """
    PDF -> course records through an OpenAI-compatible chat API (OpenRouter).

    Behavior:
    - tries models in the configured order
    - 404 / rate limit / network errors -> try the next model
    - auth errors -> give up immediately
    - never raises: every failure is logged and yields []
    """

    def __init__(self, settings: Any) -> None:
        api_key = getattr(settings, "openrouter_api_key", None)
        base_url = str(getattr(settings, "openrouter_base_url", "") or "")
        if not api_key or not str(api_key).strip():
            raise RuntimeError("Extraction API key is not set. Set STUDYHOUSE_OPENROUTER_API_KEY in your .env.")
        if not base_url.strip():
            raise RuntimeError("Extraction base URL is not set. Set STUDYHOUSE_OPENROUTER_BASE_URL in your .env.")

        self._models: list[str] = [m.strip() for m in (getattr(settings, "llm_models", []) or []) if m.strip()]
        self._headers: dict[str, str] = dict(getattr(settings, "extra_headers", {}) or {})
        read_s = float(getattr(settings, "import_timeout_seconds", 60.0))

        # No SDK retries: fall through to the next model instead.
        self._client = OpenAI(
            base_url=base_url,
            api_key=str(api_key),
            timeout=httpx.Timeout(connect=5.0, read=read_s, write=30.0, pool=5.0),
            max_retries=0,
        )

    def _messages(self, data: bytes) -> list[dict[str, Any]]:
        b64 = base64.b64encode(data).decode("ascii")
        return [
            {
                "role": "user",
                "content": [
                    {
                        "type": "file",
                        "file": {
                            "filename": "curriculum.pdf",
                            "file_data": f"data:application/pdf;base64,{b64}",
                        },
                    },
                    {"type": "text", "text": EXTRACTION_PROMPT},
                ],
            }
        ]

    def extract(self, data: bytes) -> list[ExtractedRecord]:
        if not data:
            return []
        if not self._models:
            logger.warning("Extraction model list is empty. Set STUDYHOUSE_LLM_MODELS in your .env.")
            return []

        messages = self._messages(data)
        for model in self._models:
            logger.info("Extraction: trying model=%s (%d bytes)", model, len(data))
            try:
                resp = self._client.chat.completions.create(
                    model=model,
                    messages=messages,  # type: ignore[arg-type]
                    response_format={"type": "json_object"},
                    extra_headers=self._headers or None,
                )
                text = resp.choices[0].message.content if resp.choices else None
                records = parse_extraction_payload(text)
                logger.info("Extraction: model=%s returned %d record(s)", model, len(records))
                return records
            except ValueError:
                logger.exception("Extraction: unusable response from model=%s", model)
                return []
            except Exception as e:
                if _is_auth_error(e):
                    logger.error("Extraction authentication failed. Check STUDYHOUSE_OPENROUTER_API_KEY.")
                    return []
                if _is_retryable_on_next_model(e):
                    logger.info("Extraction: %s on model=%s, trying next", e.__class__.__name__, model)
                    continue
                logger.exception("Extraction failed on model=%s", model)
                return []

        logger.warning("Extraction: all models failed.")
        return []
