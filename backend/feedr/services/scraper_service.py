# backend/feedr/services/scraper_service.py

import logging
import re
from typing import Optional

import requests
from bs4 import BeautifulSoup

from feedr.core.config import settings
from feedr.core.exceptions import AcquisitionError

logger = logging.getLogger(__name__)

# Elements that never carry recipe text
STRIPPED_TAGS = ["script", "svg", "footer", "img", "noscript"]


def html_to_text(html: str) -> str:
    """Return the visible body text of a page with whitespace collapsed."""
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(STRIPPED_TAGS):
        tag.decompose()
    root = soup.body or soup
    text = root.get_text(" ", strip=True)
    return re.sub(r"\s+", " ", text).strip()


class ScraperService:
    """Fetch a recipe page and reduce it to plain text."""

    def __init__(self, session: Optional[requests.Session] = None):
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": settings.HTTP_USER_AGENT})

    def extract_text_from_url(self, url: str) -> str:
        if not url:
            raise AcquisitionError("No URL provided in the input.")

        logger.info("Fetching recipe from: %s", url)
        try:
            response = self.session.get(url, timeout=settings.HTTP_TIMEOUT)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error("Error fetching %s: %s", url, e)
            raise AcquisitionError(f"Failed to fetch or extract content: {e}") from e

        text = html_to_text(response.text)
        if not text:
            raise AcquisitionError(f"No text found at {url}")

        logger.info("Extracted %d characters from %s", len(text), url)
        return text
