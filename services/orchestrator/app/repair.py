from __future__ import annotations

import json
import logging
import re
from typing import Any

from pydantic import ValidationError

from shared.errors import ModelOutputParseError
from shared.schemas.domain import BentoResult

logger = logging.getLogger(__name__)

KEY_OBSERVATIONS_MARKER = "主要观点"
ELLIPSIS = "..."

TITLE_MAX_CHARS = 20
SUBTITLE_MAX_CHARS = 40
CORE_NUMBER_MAX_CHARS = 8
CORE_DESC_MAX_CHARS = 20
ITEM_TEXT_MAX_CHARS = 20
CTA_MAX_CHARS = 30

_FANCY_QUOTES_RE = re.compile("[“”„‟″]")
_CODE_FENCE_RE = re.compile(r"^\s*```[a-zA-Z0-9_-]*\s*\n?(.*?)\n?\s*```\s*$", re.DOTALL)
_JSON_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)

# Field names the result model would also accept; folded into the wire keys
# so they go through the same caps.
_SNAKE_CASE_KEYS = {"core_numbers": "coreNumbers", "raw_content": "rawContent"}


def _strip_code_fence(text: str) -> str:
    candidate = text.strip()
    fenced = _CODE_FENCE_RE.match(candidate)
    if fenced:
        candidate = fenced.group(1).strip()
    return candidate


def repair_json_text(text: str) -> str:
    return _FANCY_QUOTES_RE.sub('"', _strip_code_fence(text))


def _loads_lenient(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        # Tolerate prose around the object, e.g. "Here is the JSON: {...}".
        match = _JSON_OBJECT_RE.search(text)
        if match is None or match.group(0) == text:
            raise
        return json.loads(match.group(0))


def parse_model_reply(text: str) -> dict[str, Any]:
    stripped = _strip_code_fence(text)
    try:
        # Curly quotes inside string values are legal JSON; only rewrite them
        # when the reply does not parse as-is.
        parsed = _loads_lenient(stripped)
    except json.JSONDecodeError:
        fixed = _FANCY_QUOTES_RE.sub('"', stripped)
        try:
            parsed = _loads_lenient(fixed)
        except json.JSONDecodeError as exc:
            logger.error("model reply is not valid JSON: %s", fixed)
            raise ModelOutputParseError(raw=fixed, details=str(exc)) from exc

    if not isinstance(parsed, dict):
        logger.error("model reply is JSON but not an object: %s", stripped)
        raise ModelOutputParseError(raw=stripped, details=f"expected a JSON object, got {type(parsed).__name__}")
    return parsed


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _ellipsize(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[: limit - len(ELLIPSIS)] + ELLIPSIS


def _cap_optional(result: dict[str, Any], key: str, limit: int) -> None:
    value = result.get(key)
    if value is None:
        return
    result[key] = _ellipsize(_as_text(value), limit)


def _cap_core_numbers(entries: Any) -> list[dict[str, str]] | None:
    if not isinstance(entries, list):
        return None
    capped: list[dict[str, str]] = []
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        capped.append(
            {
                "number": _as_text(entry.get("number"))[:CORE_NUMBER_MAX_CHARS],
                "desc": _as_text(entry.get("desc"))[:CORE_DESC_MAX_CHARS],
            }
        )
    return capped


def _cap_sections(sections: Any) -> list[dict[str, Any]] | None:
    if not isinstance(sections, list):
        return None
    capped: list[dict[str, Any]] = []
    for section in sections:
        if not isinstance(section, dict):
            continue
        new_section = dict(section)
        new_section["title"] = _as_text(section.get("title"))
        items = section.get("items")
        new_section["items"] = [
            {
                "label": _ellipsize(_as_text(item.get("label")), ITEM_TEXT_MAX_CHARS),
                "value": _ellipsize(_as_text(item.get("value")), ITEM_TEXT_MAX_CHARS),
            }
            for item in (items if isinstance(items, list) else [])
            if isinstance(item, dict)
        ]
        capped.append(new_section)
    return capped


def cap_fields(result: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of ``result`` with display fields cut to their caps.

    Applying it to an already capped result returns an equal result.
    """
    capped = dict(result)
    for snake, camel in _SNAKE_CASE_KEYS.items():
        value = capped.pop(snake, None)
        if value is not None and camel not in capped:
            capped[camel] = value
    _cap_optional(capped, "title", TITLE_MAX_CHARS)
    _cap_optional(capped, "subtitle", SUBTITLE_MAX_CHARS)
    _cap_optional(capped, "cta", CTA_MAX_CHARS)
    if "coreNumbers" in capped:
        capped["coreNumbers"] = _cap_core_numbers(capped["coreNumbers"])
    if "sections" in capped:
        capped["sections"] = _cap_sections(capped["sections"])
    if "tags" in capped:
        tags = capped["tags"]
        capped["tags"] = [_as_text(tag) for tag in tags] if isinstance(tags, list) else None
    return capped


def split_key_observations(sections: list[dict[str, Any]]) -> list[dict[str, Any]]:
    expanded: list[dict[str, Any]] = []
    for section in sections:
        if KEY_OBSERVATIONS_MARKER not in _as_text(section.get("title")):
            expanded.append(section)
            continue
        for item in section.get("items") or []:
            expanded.append(
                {
                    "title": item["label"],
                    "items": [{"label": item["label"], "value": item["value"]}],
                }
            )
    return expanded


def build_bento_result(reply: str, author: str = "", content: str = "", raw_content: str = "") -> BentoResult:
    parsed = parse_model_reply(reply)
    result = cap_fields(parsed)
    if result.get("sections"):
        result["sections"] = split_key_observations(result["sections"])
    result["author"] = author
    result["content"] = content
    result["rawContent"] = raw_content
    result["meta"] = {}
    try:
        return BentoResult.model_validate(result)
    except ValidationError as exc:
        logger.error("model reply does not fit the result shape: %s", exc)
        raise ModelOutputParseError(raw=repair_json_text(reply), details=str(exc)) from exc
