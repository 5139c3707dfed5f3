"""Readable text extraction from a source article URL."""

import logging
import re

import httpx
from bs4 import BeautifulSoup

FETCH_TIMEOUT_SECONDS = 10
NOISE_TAGS = ("script", "style", "noscript", "nav", "header", "footer", "aside", "form")


def extract_text(html: str) -> str:
    """Main text of an HTML page: <article>, else <main>, else <body>."""
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(NOISE_TAGS):
        tag.decompose()

    root = soup.find("article") or soup.find("main") or soup.body or soup
    text = root.get_text(" ", strip=True)
    if not text:
        description = soup.find("meta", attrs={"name": "description"})
        text = description.get("content", "") if description else ""
    return re.sub(r"\s+", " ", text).strip()


def fetch_source_text(url: str) -> str:
    """
    Fetch ``url`` and return its main text.

    Returns "" when the page can't be fetched or parsed; generation then runs
    from the category and topic alone.
    """
    try:
        response = httpx.get(url, timeout=FETCH_TIMEOUT_SECONDS, follow_redirects=True)
        response.raise_for_status()
        return extract_text(response.text)
    except Exception as e:
        logging.warning(f"Source extraction failed for {url}: {str(e)}")
        return ""
