"""
Expense Routes

Thin HTTP layer over LedgerFlow and ChatFlow. Routes translate
requests into flow calls and flow results into JSON; errors are turned
into {"error": ...} payloads by the handlers registered in
splitter.api.app.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from splitter.audit import create_correlation_id
from splitter.config import get_settings
from splitter.models.expense import (
    ChatRequest,
    ExpenseCreate,
    ExpenseRecord,
    PayerTotals,
    SettlementRequest,
)
from splitter.orchestrator import ChatFlow, LedgerFlow
from splitter.api.schemas import (
    ChatResponse,
    ErrorResponse,
    HealthResponse,
    SettlementResponse,
)


router = APIRouter(prefix="/api/expenses", tags=["expenses"])
health_router = APIRouter(tags=["health"])


def get_ledger_flow(request: Request) -> LedgerFlow:
    return request.app.state.ledger_flow


def get_chat_flow(request: Request) -> ChatFlow:
    return request.app.state.chat_flow


def get_correlation_id() -> UUID:
    return create_correlation_id()


@health_router.get("/api", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    return HealthResponse(
        status="healthy",
        message="Backend is running!",
        storage=request.app.state.storage_backend,
    )


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=ExpenseRecord,
    responses={400: {"model": ErrorResponse}},
)
async def create_expense(
    expense: ExpenseCreate,
    flow: LedgerFlow = Depends(get_ledger_flow),
    correlation_id: UUID = Depends(get_correlation_id),
) -> ExpenseRecord:
    return await flow.add_expense(expense, correlation_id=correlation_id)


@router.get("", response_model=list[ExpenseRecord])
async def list_expenses(
    flow: LedgerFlow = Depends(get_ledger_flow),
    correlation_id: UUID = Depends(get_correlation_id),
) -> list[ExpenseRecord]:
    return await flow.list_expenses(correlation_id=correlation_id)


@router.get("/balances", response_model=dict[str, float])
async def get_balances(
    flow: LedgerFlow = Depends(get_ledger_flow),
    correlation_id: UUID = Depends(get_correlation_id),
) -> dict[str, float]:
    balances = await flow.get_balances(correlation_id=correlation_id)
    return {name: float(amount) for name, amount in balances.items()}


@router.post(
    "/settle",
    response_model=SettlementResponse,
    responses={400: {"model": ErrorResponse}},
)
async def record_settlement(
    settlement: SettlementRequest,
    flow: LedgerFlow = Depends(get_ledger_flow),
    correlation_id: UUID = Depends(get_correlation_id),
) -> SettlementResponse:
    record = await flow.record_settlement(settlement, correlation_id=correlation_id)
    symbol = get_settings().ledger.currency_symbol
    return SettlementResponse(
        message=(
            f"Settlement recorded: {settlement.person_owes} paid "
            f"{settlement.person_receives} {symbol}{settlement.amount:,.2f}"
        ),
        settlement=record,
    )


@router.post(
    "/chat",
    response_model=ChatResponse,
    responses={400: {"model": ErrorResponse}},
)
async def chat(
    body: ChatRequest,
    flow: ChatFlow = Depends(get_chat_flow),
    correlation_id: UUID = Depends(get_correlation_id),
):
    if not body.message or not body.message.strip():
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Message is required"},
        )

    reply = await flow.answer(body.message, correlation_id=correlation_id)
    return ChatResponse(response=reply.response)


@router.get("/recent", response_model=list[ExpenseRecord])
async def recent_expenses(
    flow: LedgerFlow = Depends(get_ledger_flow),
    correlation_id: UUID = Depends(get_correlation_id),
) -> list[ExpenseRecord]:
    return await flow.recent_expenses(correlation_id=correlation_id)


@router.get("/paid-by/{person}", response_model=PayerTotals)
async def totals_by_payer(
    person: str,
    flow: LedgerFlow = Depends(get_ledger_flow),
    correlation_id: UUID = Depends(get_correlation_id),
) -> PayerTotals:
    return await flow.totals_by_payer(person, correlation_id=correlation_id)
