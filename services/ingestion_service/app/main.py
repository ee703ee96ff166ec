from fastapi import FastAPI, HTTPException

from shared.errors import ExtractionError

from .extractors import extract_article
from .models import ExtractedArticle, ExtractionRequest

app = FastAPI(title="Bento Ingestion Service", version="0.1.0")


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok", "service": "ingestion_service"}


@app.post("/extract", response_model=ExtractedArticle)
def extract(request: ExtractionRequest) -> ExtractedArticle:
    try:
        return extract_article(request.url)
    except ExtractionError as exc:
        raise HTTPException(status_code=exc.status_code, detail=str(exc)) from exc
