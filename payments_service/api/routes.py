from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session
from payments_service.application.schemas import (
    ErrorResponse,
    OperationResult,
    Payment,
    PaymentCollection,
)
from payments_service.application.service import PaymentService
from payments_service.domain.exceptions import (
    PaymentAlreadyExistsError,
    PaymentError,
    PaymentNotFoundError,
    PaymentValidationError,
)
from payments_service.infrastructure.db import get_db
from payments_service.infrastructure.store import PaymentStore
from shared.core import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["payments"])

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}

def get_service(request: Request, db: Session = Depends(get_db)) -> PaymentService:
    collection = request.app.state.settings.PAYMENTS_COLLECTION
    return PaymentService(PaymentStore(db, collection))

def _http_error(exc: PaymentError, client_errors: tuple, client_status: int) -> HTTPException:
    """Map a lifecycle failure to the status code of the calling route."""
    if isinstance(exc, client_errors):
        return HTTPException(status_code=client_status, detail=exc.message)
    logger.error(f"Payment operation failed: {exc.message}", extra={'extra_fields': {'error_type': type(exc).__name__}})
    return HTTPException(status_code=500, detail=exc.message)

@router.get("/payments", response_model=PaymentCollection, responses=ERROR_RESPONSES)
def list_payments(service: PaymentService = Depends(get_service)):
    try:
        return service.list()
    except PaymentError as e:
        raise _http_error(e, (), 500)

@router.post("/payment", response_model=Payment, status_code=201, responses=ERROR_RESPONSES)
def create_payment(payload: Payment, service: PaymentService = Depends(get_service)):
    try:
        return service.create(payload)
    except PaymentError as e:
        raise _http_error(e, (PaymentValidationError, PaymentAlreadyExistsError), 400)

@router.get("/payment/{payment_id}", response_model=Payment, responses=ERROR_RESPONSES)
def get_payment(payment_id: str, service: PaymentService = Depends(get_service)):
    try:
        return service.get(payment_id)
    except PaymentError as e:
        raise _http_error(e, (PaymentValidationError, PaymentNotFoundError), 404)

@router.put("/payment/{payment_id}", response_model=Payment, responses=ERROR_RESPONSES)
def update_payment(payment_id: str, payload: Payment, service: PaymentService = Depends(get_service)):
    # An id in the body takes precedence; the path id fills it when absent
    payment = payload if payload.id else payload.model_copy(update={"id": payment_id})
    try:
        return service.update(payment)
    except PaymentError as e:
        raise _http_error(e, (PaymentValidationError, PaymentNotFoundError), 404)

@router.delete("/payment/{payment_id}", response_model=OperationResult, responses=ERROR_RESPONSES)
def delete_payment(payment_id: str, service: PaymentService = Depends(get_service)):
    try:
        return service.delete(payment_id)
    except PaymentError as e:
        raise _http_error(e, (PaymentValidationError, PaymentNotFoundError), 404)

# Without these, "/payment/" is redirected to the POST-only "/payment"

@router.get("/payment/", response_model=Payment, responses=ERROR_RESPONSES, include_in_schema=False)
def get_payment_without_id(service: PaymentService = Depends(get_service)):
    return get_payment("", service)

@router.put("/payment/", response_model=Payment, responses=ERROR_RESPONSES, include_in_schema=False)
def update_payment_without_id(payload: Payment, service: PaymentService = Depends(get_service)):
    return update_payment("", payload, service)

@router.delete("/payment/", response_model=OperationResult, responses=ERROR_RESPONSES, include_in_schema=False)
def delete_payment_without_id(service: PaymentService = Depends(get_service)):
    return delete_payment("", service)
