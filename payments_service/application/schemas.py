from pydantic import BaseModel, Field, StrictInt
from typing import List

# Every field defaults to its zero value so a partial body still decodes;
# identifier checks happen in the service, not here.
# Amounts, rates and dates are kept as strings exactly as received.

PAYMENTS_SELF_LINK = "https://api.test.form3.tech/v1/payments"

class BeneficiaryParty(BaseModel):
    account_name: str = ""
    account_number: str = ""
    account_number_code: str = ""
    account_type: StrictInt = 0
    address: str = ""
    bank_id: str = ""
    bank_id_code: str = ""
    name: str = ""

class SenderCharge(BaseModel):
    amount: str = ""
    currency: str = ""

class ChargesInformation(BaseModel):
    bearer_code: str = ""
    sender_charges: List[SenderCharge] = Field(default_factory=list)
    receiver_charges_amount: str = ""
    receiver_charges_currency: str = ""

class DebtorParty(BaseModel):
    account_name: str = ""
    account_number: str = ""
    account_number_code: str = ""
    address: str = ""
    bank_id: str = ""
    bank_id_code: str = ""
    name: str = ""

class Fx(BaseModel):
    contract_reference: str = ""
    exchange_rate: str = ""
    original_amount: str = ""
    original_currency: str = ""

class SponsorParty(BaseModel):
    account_number: str = ""
    bank_id: str = ""
    bank_id_code: str = ""

class Attributes(BaseModel):
    amount: str = ""
    beneficiary_party: BeneficiaryParty = Field(default_factory=BeneficiaryParty)
    charges_information: ChargesInformation = Field(default_factory=ChargesInformation)
    currency: str = ""
    debtor_party: DebtorParty = Field(default_factory=DebtorParty)
    end_to_end_reference: str = ""
    fx: Fx = Field(default_factory=Fx)
    numeric_reference: str = ""
    payment_id: str = ""
    payment_purpose: str = ""
    payment_scheme: str = ""
    payment_type: str = ""
    processing_date: str = ""
    reference: str = ""
    scheme_payment_sub_type: str = ""
    scheme_payment_type: str = ""
    sponsor_party: SponsorParty = Field(default_factory=SponsorParty)

class Payment(BaseModel):
    type: str = ""
    id: str = ""
    version: StrictInt = 0
    organisation_id: str = ""
    attributes: Attributes = Field(default_factory=Attributes)

    def to_document(self) -> dict:
        """Plain dict form handed to the store."""
        return self.model_dump(mode="json")

    @classmethod
    def from_document(cls, document: dict) -> "Payment":
        return cls.model_validate(document)

class Links(BaseModel):
    self: str = PAYMENTS_SELF_LINK

class PaymentCollection(BaseModel):
    data: List[Payment] = Field(default_factory=list)
    links: Links = Field(default_factory=Links)

class OperationResult(BaseModel):
    result: str = "success"

class ErrorResponse(BaseModel):
    error: str
