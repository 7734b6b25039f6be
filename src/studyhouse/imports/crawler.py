# src/studyhouse/imports/crawler.py

from __future__ import annotations

import asyncio
import logging

logger = logging.getLogger(__name__)

MOCK_DRIVE_FILES: tuple[str, ...] = (
    "Quantum Mechanics Lecture 01 - Wavefunctions",
    "Thermodynamics Lab Report Template",
    "Advanced Calculus Midterm Revision",
    "Linear Algebra - Eigenvalues.pdf",
    "Complex Variables Homework 4",
    "Special Relativity Reading List",
)


class MockFolderCrawler:
    """
    Simulated cloud-folder crawl.

    The link is only checked for being non-empty; after a fixed delay the
    same hardcoded list of titles is returned.
    """

    def __init__(self, delay_seconds: float = 3.0) -> None:
        self.delay_seconds = max(0.0, float(delay_seconds))

    async def crawl(self, link: str) -> list[str]:
        link = (link or "").strip()
        if not link:
            raise ValueError("folder link is required")
        logger.info("Crawling folder %s (simulated, %.1fs)", link, self.delay_seconds)
        await asyncio.sleep(self.delay_seconds)
        return list(MOCK_DRIVE_FILES)
