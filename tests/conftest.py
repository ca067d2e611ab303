import copy
import pytest
from fastapi.testclient import TestClient
from payments_service.core_settings import Settings
from payments_service.domain.exceptions import StoreError
from payments_service.main import create_app

PAYMENT_ID = "4ee3a8d8-ca7b-4290-a52c-dd5b6165ec43"

PAYMENT = {
    "type": "Payment",
    "id": PAYMENT_ID,
    "version": 0,
    "organisation_id": "743d5b63-8e6f-432e-a8fa-c5d8d2ee5fcb",
    "attributes": {
        "amount": "100.21",
        "beneficiary_party": {
            "account_name": "W Owens",
            "account_number": "31926819",
            "account_number_code": "BBAN",
            "account_type": 0,
            "address": "1 The Beneficiary Localtown SE2",
            "bank_id": "403000",
            "bank_id_code": "GBDSC",
            "name": "Wilfred Jeremiah Owens"
        },
        "charges_information": {
            "bearer_code": "SHAR",
            "sender_charges": [
                {"amount": "5.00", "currency": "GBP"},
                {"amount": "10.00", "currency": "USD"}
            ],
            "receiver_charges_amount": "1.00",
            "receiver_charges_currency": "USD"
        },
        "currency": "GBP",
        "debtor_party": {
            "account_name": "EJ Brown Black",
            "account_number": "GB29XABC10161234567801",
            "account_number_code": "IBAN",
            "address": "10 Debtor Crescent Sourcetown NE1",
            "bank_id": "203301",
            "bank_id_code": "GBDSC",
            "name": "Emelia Jane Brown"
        },
        "end_to_end_reference": "Wil piano Jan",
        "fx": {
            "contract_reference": "FX123",
            "exchange_rate": "2.00000",
            "original_amount": "200.42",
            "original_currency": "USD"
        },
        "numeric_reference": "1002001",
        "payment_id": "123456789012345678",
        "payment_purpose": "Paying for goods/services",
        "payment_scheme": "FPS",
        "payment_type": "Credit",
        "processing_date": "2017-01-18",
        "reference": "Payment for Em's piano lessons",
        "scheme_payment_sub_type": "InternetBanking",
        "scheme_payment_type": "ImmediatePayment",
        "sponsor_party": {
            "account_number": "56781234",
            "bank_id": "123123",
            "bank_id_code": "GBDSC"
        }
    }
}

class FakePaymentStore:
    """List-backed store; unlike the real one it tolerates duplicate ids"""

    def __init__(self):
        self.collection = "payments"
        self.documents = []
        self.failing = False

    def _check(self):
        if self.failing:
            raise StoreError("connection refused")

    def insert(self, document):
        self._check()
        self.documents.append(copy.deepcopy(document))

    def find_by_id(self, payment_id):
        self._check()
        return [copy.deepcopy(d) for d in self.documents if d["id"] == payment_id]

    def count_by_id(self, payment_id):
        self._check()
        return sum(1 for d in self.documents if d["id"] == payment_id)

    def update_by_id(self, payment_id, document):
        self._check()
        self.documents = [
            copy.deepcopy(document) if d["id"] == payment_id else d
            for d in self.documents
        ]

    def remove_by_id(self, payment_id):
        self._check()
        self.documents = [d for d in self.documents if d["id"] != payment_id]

    def find_all(self):
        self._check()
        return copy.deepcopy(self.documents)

@pytest.fixture
def payment_payload():
    return copy.deepcopy(PAYMENT)

@pytest.fixture
def updated_payload():
    payload = copy.deepcopy(PAYMENT)
    payload["attributes"]["amount"] = "121.00"
    payload["attributes"]["debtor_party"]["account_name"] = "EJ Brown Blue"
    return payload

@pytest.fixture
def fake_store():
    return FakePaymentStore()

@pytest.fixture
def settings():
    return Settings(DATABASE_URL="sqlite://", RUN_MIGRATIONS=False, LOG_LEVEL="WARNING")

@pytest.fixture
def app(settings):
    return create_app(settings)

@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client
