from fastapi import FastAPI

from shared.schemas.domain import BentoResult

from .layout import LayoutPlan, plan_layout

app = FastAPI(title="Bento Render Service", version="0.1.0")


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok", "service": "render_service"}


@app.post("/layout", response_model=LayoutPlan)
def layout(result: BentoResult) -> LayoutPlan:
    return plan_layout(result.sections)
