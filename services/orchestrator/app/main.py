from fastapi import FastAPI, HTTPException

from shared.errors import BentoError
from shared.schemas.api import ProcessRequest
from shared.schemas.domain import BentoResult

from .pipeline import process_content

app = FastAPI(title="Bento Orchestrator Service", version="0.1.0")


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok", "service": "orchestrator"}


@app.post("/orchestrate", response_model=BentoResult, response_model_exclude_none=True)
def orchestrate(request: ProcessRequest) -> BentoResult:
    try:
        return process_content(request.content, is_url=request.is_url)
    except BentoError as exc:
        raise HTTPException(status_code=exc.status_code, detail=str(exc)) from exc
