from __future__ import annotations

import logging
from dataclasses import dataclass

from shared.errors import InputError
from shared.schemas.domain import BentoResult

from services.ingestion_service.app.extractors import ExtractorRegistry, build_default_registry, extract_article

from .normalize import compose_article_content, truncate_content
from .prompts import build_model_request
from .providers.clients import BaseProviderClient, make_provider_client
from .repair import build_bento_result
from .retry import retry_with_backoff

logger = logging.getLogger(__name__)


@dataclass
class PreparedContent:
    model_content: str
    author: str = ""
    raw_content: str = ""


def prepare_content(
    content: str, is_url: bool, registry: ExtractorRegistry | None = None
) -> PreparedContent:
    registry = registry or build_default_registry()
    if is_url and registry.for_url(content) is not None:
        article = extract_article(content, registry=registry)
        return PreparedContent(
            model_content=compose_article_content(article),
            author=article.author,
            raw_content=article.body_text,
        )
    if is_url:
        logger.warning("no extractor for %s, sending the link text to the model as-is", content)
    return PreparedContent(model_content=content)


def process_content(
    content: str,
    is_url: bool = False,
    client: BaseProviderClient | None = None,
    registry: ExtractorRegistry | None = None,
) -> BentoResult:
    if not content or not content.strip():
        raise InputError()
    # Missing credentials fail the request before any scraping.
    client = client or make_provider_client()
    prepared = prepare_content(content, is_url, registry=registry)

    model_content = truncate_content(prepared.model_content)
    request = build_model_request(model_content)
    generation = retry_with_backoff(lambda: client.generate(request))
    logger.info(
        "model %s replied in %.2fs (tokens in=%d out=%d)",
        generation.model,
        generation.latency_s,
        generation.tokens_input,
        generation.tokens_output,
    )

    return build_bento_result(
        generation.text,
        author=prepared.author,
        content=model_content,
        raw_content=prepared.raw_content,
    )
