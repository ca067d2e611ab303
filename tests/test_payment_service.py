import pytest
from payments_service.application.schemas import Payment, PAYMENTS_SELF_LINK
from payments_service.application.service import PaymentService
from payments_service.domain.exceptions import (
    PaymentAlreadyExistsError,
    PaymentConflictError,
    PaymentNotFoundError,
    PaymentValidationError,
    StoreError,
)
from conftest import PAYMENT_ID

@pytest.fixture
def service(fake_store):
    return PaymentService(fake_store)

@pytest.fixture
def payment(payment_payload):
    return Payment.model_validate(payment_payload)

def test_list_empty(service):
    collection = service.list()
    assert collection.data == []
    assert collection.links.self == PAYMENTS_SELF_LINK

def test_create_then_get(service, payment):
    assert service.create(payment) == payment
    assert service.get(PAYMENT_ID) == payment

def test_create_stores_document_verbatim(service, fake_store, payment, payment_payload):
    service.create(payment)
    assert fake_store.documents == [payment_payload]

def test_create_without_id(service, fake_store):
    with pytest.raises(PaymentValidationError, match="without a Payment ID"):
        service.create(Payment(type="Payment"))
    assert fake_store.documents == []

def test_create_duplicate(service, fake_store, payment):
    service.create(payment)
    with pytest.raises(PaymentAlreadyExistsError):
        service.create(payment.model_copy(update={"organisation_id": "other"}))
    assert len(fake_store.documents) == 1
    assert fake_store.documents[0]["organisation_id"] == payment.organisation_id

@pytest.mark.parametrize("payment_id", ["", "never-created"])
def test_get_unknown(service, payment_id):
    expected = PaymentValidationError if not payment_id else PaymentNotFoundError
    with pytest.raises(expected):
        service.get(payment_id)

def test_get_duplicate_ids_is_conflict(service, fake_store, payment_payload):
    fake_store.documents = [payment_payload, payment_payload]
    with pytest.raises(PaymentConflictError, match="More than one payment"):
        service.get(PAYMENT_ID)

def test_update_replaces_record(service, fake_store, payment, updated_payload):
    service.create(payment)
    updated = Payment.model_validate(updated_payload)

    assert service.update(updated) == updated
    assert service.get(PAYMENT_ID).attributes.amount == "121.00"
    assert fake_store.documents == [updated_payload]

def test_update_unknown(service, fake_store, payment):
    with pytest.raises(PaymentNotFoundError, match="does not exist"):
        service.update(payment)
    assert fake_store.documents == []

def test_update_without_id(service):
    with pytest.raises(PaymentValidationError, match="Cannot update"):
        service.update(Payment())

def test_delete(service, payment):
    service.create(payment)
    assert service.delete(PAYMENT_ID).result == "success"
    with pytest.raises(PaymentNotFoundError):
        service.get(PAYMENT_ID)
    with pytest.raises(PaymentNotFoundError):
        service.delete(PAYMENT_ID)

def test_delete_without_id(service):
    with pytest.raises(PaymentValidationError, match="Cannot delete"):
        service.delete("")

def test_list_returns_every_payment(service, payment):
    ids = {f"payment-{i}" for i in range(4)}
    for payment_id in ids:
        service.create(payment.model_copy(update={"id": payment_id}))
    assert {p.id for p in service.list().data} == ids

def test_store_errors_propagate(service, fake_store, payment):
    fake_store.failing = True
    with pytest.raises(StoreError):
        service.list()
    with pytest.raises(StoreError):
        service.create(payment)
