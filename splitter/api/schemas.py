"""Response bodies of the HTTP API that are not ledger models themselves."""

from pydantic import BaseModel, ConfigDict

from splitter.models.expense import ExpenseRecord


class ErrorResponse(BaseModel):
    error: str


class SettlementResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    settlement: ExpenseRecord


class ChatResponse(BaseModel):
    response: str


class HealthResponse(BaseModel):
    status: str
    message: str
    storage: str
