# src/studyhouse/imports/offline.py

from __future__ import annotations

import logging

from ..core.ports import ExtractedRecord

logger = logging.getLogger(__name__)


class OfflineDocumentExtractor:
    """
    Extractor used when no AI service is configured.

    Always yields no records, so document uploads are a harmless no-op.
    """

    def extract(self, data: bytes) -> list[ExtractedRecord]:
        logger.info(
            "Document extraction is offline (%d bytes ignored). "
            "Set STUDYHOUSE_OPENROUTER_API_KEY to enable it.",
            len(data),
        )
        return []
