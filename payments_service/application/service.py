from payments_service.domain.exceptions import (
    PaymentAlreadyExistsError,
    PaymentConflictError,
    PaymentNotFoundError,
    PaymentValidationError,
)
from payments_service.infrastructure.store import PaymentStore
from shared.core import get_logger
from .schemas import OperationResult, Payment, PaymentCollection

logger = get_logger(__name__)

class PaymentService:
    """
    Validate-then-act lifecycle for payment records.

    Each mutation first counts the records holding the identifier and then
    writes. The two calls are not wrapped in a transaction; the store's
    primary key is what finally stops a concurrent duplicate create.
    """

    def __init__(self, store: PaymentStore):
        self.store = store

    def _reject(self, error):
        logger.warning(error.message, extra={'extra_fields': {'collection': self.store.collection}})
        raise error

    def list(self) -> PaymentCollection:
        documents = self.store.find_all()
        return PaymentCollection(data=[Payment.from_document(d) for d in documents])

    def get(self, payment_id: str) -> Payment:
        if not payment_id:
            self._reject(PaymentValidationError("No Payment ID specified"))
        documents = self.store.find_by_id(payment_id)
        if not documents:
            raise PaymentNotFoundError("Payment not found")
        if len(documents) > 1:
            logger.error(
                f"Found {len(documents)} payments for id {payment_id}",
                extra={'extra_fields': {'payment_id': payment_id, 'collection': self.store.collection}}
            )
            raise PaymentConflictError("More than one payment returned per ID")
        return Payment.from_document(documents[0])

    def create(self, payment: Payment) -> Payment:
        if not payment.id:
            self._reject(PaymentValidationError("Cannot add a payment without a Payment ID specified"))
        if self.store.count_by_id(payment.id) > 0:
            self._reject(PaymentAlreadyExistsError("A payment with this Payment ID already exists"))
        self.store.insert(payment.to_document())
        logger.info(f"Created payment {payment.id}")
        return payment

    def update(self, payment: Payment) -> Payment:
        if not payment.id:
            self._reject(PaymentValidationError("Cannot update a payment without a Payment ID specified"))
        if self.store.count_by_id(payment.id) == 0:
            self._reject(PaymentNotFoundError("A payment with this Payment ID does not exist"))
        # Full replace, nothing is merged from the stored record
        self.store.update_by_id(payment.id, payment.to_document())
        logger.info(f"Updated payment {payment.id}")
        return payment

    def delete(self, payment_id: str) -> OperationResult:
        if not payment_id:
            self._reject(PaymentValidationError("Cannot delete a payment without a Payment ID specified"))
        if self.store.count_by_id(payment_id) == 0:
            self._reject(PaymentNotFoundError("A payment with this Payment ID does not exist"))
        self.store.remove_by_id(payment_id)
        logger.info(f"Deleted payment {payment_id}")
        return OperationResult()
