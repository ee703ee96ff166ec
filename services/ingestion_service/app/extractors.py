from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from urllib.parse import urlparse

import httpx
from bs4 import BeautifulSoup

from shared.errors import FetchError, UnsupportedSourceError

from .models import ExtractedArticle

logger = logging.getLogger(__name__)

BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)


@dataclass(frozen=True)
class ExtractorStrategy:
    name: str
    domains: tuple[str, ...]
    title_selector: str
    author_selector: str
    content_selector: str

    def matches(self, host: str) -> bool:
        host = host.lower().split(":", 1)[0]
        return any(host == dom or host.endswith(f".{dom}") for dom in self.domains)


WECHAT_STRATEGY = ExtractorStrategy(
    name="wechat",
    domains=("mp.weixin.qq.com",),
    title_selector="h1.rich_media_title",
    author_selector="strong.rich_media_meta_text",
    content_selector="div.rich_media_content",
)


class ExtractorRegistry:
    def __init__(self, strategies: list[ExtractorStrategy] | None = None) -> None:
        self.strategies: list[ExtractorStrategy] = list(strategies or [])

    def register(self, strategy: ExtractorStrategy) -> None:
        self.strategies.append(strategy)

    def for_url(self, url: str) -> ExtractorStrategy | None:
        host = urlparse(url.strip()).netloc
        if not host:
            return None
        for strategy in self.strategies:
            if strategy.matches(host):
                return strategy
        return None


def build_default_registry() -> ExtractorRegistry:
    return ExtractorRegistry([WECHAT_STRATEGY])


def _clean_text(text: str) -> str:
    return re.sub(r"\s+", " ", text.replace("\x00", " ")).strip()


def _fetch_timeout_s() -> float:
    raw = os.getenv("BENTO_FETCH_TIMEOUT_S", "20")
    try:
        return max(1.0, float(raw))
    except ValueError:
        return 20.0


def parse_article(html: str | bytes, strategy: ExtractorStrategy) -> ExtractedArticle:
    soup = BeautifulSoup(html, "html.parser")

    title_node = soup.select_one(strategy.title_selector)
    author_node = soup.select_one(strategy.author_selector)
    content_node = soup.select_one(strategy.content_selector)

    # Missing nodes degrade to empty fields; markup changes on the source site
    # show up as empty output rather than errors.
    return ExtractedArticle(
        title=_clean_text(title_node.get_text()) if title_node is not None else "",
        author=_clean_text(author_node.get_text()) if author_node is not None else "",
        body_text=_clean_text(content_node.get_text()) if content_node is not None else "",
    )


def extract_article(
    url: str,
    registry: ExtractorRegistry | None = None,
    timeout_s: float | None = None,
    transport: httpx.BaseTransport | None = None,
) -> ExtractedArticle:
    registry = registry or build_default_registry()
    strategy = registry.for_url(url)
    if strategy is None:
        raise UnsupportedSourceError(details=url)

    headers = {"User-Agent": BROWSER_USER_AGENT}
    resolved_timeout = timeout_s if timeout_s is not None else _fetch_timeout_s()
    try:
        with httpx.Client(timeout=resolved_timeout, follow_redirects=True, transport=transport) as client:
            response = client.get(url.strip(), headers=headers)
    except httpx.HTTPError as exc:
        logger.error("fetch failed for %s: %s", url, exc)
        raise FetchError(details=str(exc)) from exc

    if not response.is_success:
        logger.error("fetch for %s returned HTTP %s", url, response.status_code)
        raise FetchError(details=f"HTTP {response.status_code}")

    article = parse_article(response.text, strategy)
    logger.info(
        "extracted %s article from %s: title=%r body_chars=%d",
        strategy.name,
        url,
        article.title,
        len(article.body_text),
    )
    logger.info("extracted body: %s", article.body_text)
    return article
