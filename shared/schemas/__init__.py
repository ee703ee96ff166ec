from .api import ErrorResponse, ProcessRequest, SaveDataRequest, SaveDataResponse
from .domain import BentoResult, CoreNumber, Section, SectionItem

__all__ = [
    "ProcessRequest",
    "SaveDataRequest",
    "SaveDataResponse",
    "ErrorResponse",
    "BentoResult",
    "CoreNumber",
    "Section",
    "SectionItem",
]
