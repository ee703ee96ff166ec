from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from shared.schemas.domain import Section

MAX_SECTIONS = 9
MIN_SECTIONS = 3

ROW_SIZES: dict[int, list[int]] = {
    3: [3],
    4: [2, 2],
    5: [3, 2],
    6: [3, 3],
    7: [3, 2, 2],
    8: [3, 3, 2],
    9: [3, 3, 3],
}


class ExportOptions(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    file_name: str = Field(default="bento-grid.png", alias="fileName")
    pixel_ratio: int = Field(default=2, alias="pixelRatio")
    background_color: str = Field(default="#18181b", alias="backgroundColor")


class LayoutPlan(BaseModel):
    rows: list[list[Section]]
    placeholders: int = 0
    export: ExportOptions = Field(default_factory=ExportOptions)


def plan_layout(sections: list[Section] | None) -> LayoutPlan:
    laid_out = list(sections or [])[:MAX_SECTIONS]
    placeholders = max(0, MIN_SECTIONS - len(laid_out))
    laid_out.extend(Section() for _ in range(placeholders))

    rows: list[list[Section]] = []
    start = 0
    for size in ROW_SIZES[len(laid_out)]:
        rows.append(laid_out[start : start + size])
        start += size
    return LayoutPlan(rows=rows, placeholders=placeholders)
