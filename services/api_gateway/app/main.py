import logging
import os

from fastapi import Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from shared.errors import BentoError, InputError
from shared.schemas.api import ErrorResponse, ProcessRequest, SaveDataRequest, SaveDataResponse
from shared.schemas.domain import BentoResult

from services.orchestrator.app.pipeline import process_content

from .state import InMemoryResultStore, ResultStore, make_data_id

logging.basicConfig(
    level=os.getenv("BENTO_LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Bento Grid API Gateway", version="0.1.0")
app.state.result_store = InMemoryResultStore()


def get_result_store(request: Request) -> ResultStore:
    return request.app.state.result_store


def _error_response(status_code: int, error: str, details: str | None = None, raw: str | None = None) -> JSONResponse:
    body = ErrorResponse(error=error, details=details, raw=raw)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


@app.exception_handler(BentoError)
def handle_bento_error(request: Request, exc: BentoError) -> JSONResponse:
    logger.error("%s %s failed with %s: %s", request.method, request.url.path, type(exc).__name__, exc)
    return _error_response(exc.status_code, exc.message, exc.details, getattr(exc, "raw", None))


@app.exception_handler(RequestValidationError)
def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.error("%s %s rejected invalid body: %s", request.method, request.url.path, exc.errors())
    error = InputError("invalid request body")
    return _error_response(error.status_code, error.message, str(exc.errors()))


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok", "service": "api_gateway"}


@app.post("/api/process", response_model=BentoResult, response_model_exclude_none=True)
def process(request: ProcessRequest) -> BentoResult:
    try:
        return process_content(request.content, is_url=request.is_url)
    except BentoError:
        raise
    except Exception as exc:  # noqa: BLE001
        logger.exception("unexpected error while processing content")
        raise BentoError("error while processing content", details=f"{type(exc).__name__}: {exc}") from exc


@app.post("/api/save-data", response_model=SaveDataResponse)
def save_data(request: SaveDataRequest, store: ResultStore = Depends(get_result_store)) -> SaveDataResponse:
    if not request.data:
        raise InputError("no data provided")
    data_id = make_data_id()
    store.set(data_id, request.data)
    base_url = os.getenv("BENTO_PUBLIC_BASE_URL", "").rstrip("/")
    logger.info("stored result %s", data_id)
    return SaveDataResponse(data_id=data_id, url=f"{base_url}/api/get-data?id={data_id}")


@app.get("/api/get-data")
def get_data(
    data_id: str | None = Query(default=None, alias="id"),
    store: ResultStore = Depends(get_result_store),
) -> JSONResponse:
    if not data_id:
        raise InputError("no data id provided")
    data = store.get(data_id)
    if data is None:
        return _error_response(404, "data not found")
    return JSONResponse(content=data)
