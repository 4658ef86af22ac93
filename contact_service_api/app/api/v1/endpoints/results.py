"""Mapping of operation outcomes to HTTP responses."""

from typing import Dict, Optional

from fastapi import status
from fastapi.responses import JSONResponse

from contact_service_api.app.core.errors import ContactServiceError
from contact_service_api.app.schemas.outcome import OperationResult, Outcome

OUTCOME_STATUS = {
    Outcome.ADDED: status.HTTP_200_OK,
    Outcome.REMOVED: status.HTTP_200_OK,
    Outcome.ALREADY: status.HTTP_409_CONFLICT,
    Outcome.NOT_FOUND: status.HTTP_404_NOT_FOUND,
}


def respond(outcome: Outcome, messages: Dict[Outcome, str], id: Optional[str] = None) -> JSONResponse:
    body = OperationResult(outcome=outcome, detail=messages.get(outcome, outcome.value), id=id)
    return JSONResponse(status_code=OUTCOME_STATUS[outcome], content=body.model_dump(mode="json"))


def error_response(exc: ContactServiceError) -> JSONResponse:
    body = OperationResult(outcome=exc.outcome, detail=exc.detail)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(mode="json"))
