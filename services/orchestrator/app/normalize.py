from __future__ import annotations

import os

from services.ingestion_service.app.models import ExtractedArticle

DEFAULT_MAX_CONTENT_CHARS = 3000


def max_content_chars() -> int:
    raw = os.getenv("BENTO_MAX_CONTENT_CHARS", str(DEFAULT_MAX_CONTENT_CHARS))
    try:
        return max(1, int(raw))
    except ValueError:
        return DEFAULT_MAX_CONTENT_CHARS


def truncate_content(text: str, limit: int | None = None) -> str:
    # Plain character cut; may land mid-sentence.
    resolved = limit if limit is not None else max_content_chars()
    return text[:resolved]


def compose_article_content(article: ExtractedArticle) -> str:
    return f"{article.title}\n\n作者：{article.author}\n\n{article.body_text}"
