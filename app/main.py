"""
HTTP API for Finance Tracker

Thin FastAPI layer over the request flows in finance_tracker.orchestrator.
Routes decode the body into request DTOs, hand raw path ids to the flow,
and send back the envelope with envelope.status as the HTTP status.

Routes:
    /api/users                                  GET, POST
    /api/users/{user_id}                        GET, PATCH, DELETE
    /api/users/{user_id}/income                 GET, POST
    /api/users/{user_id}/income/{income_id}     GET, PATCH, DELETE
    /api/users/{user_id}/expenses               GET, POST
    /api/users/{user_id}/expenses/{expense_id}  GET, PATCH, DELETE
"""

from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from finance_tracker import __version__
from finance_tracker.api import Envelope
from finance_tracker.api.responses import ErrorBody
from finance_tracker.config import get_settings, validate_all_settings
from finance_tracker.errors import ErrorKind
from finance_tracker.models import (
    CreateExpenseRequest,
    CreateIncomeRequest,
    CreateUserRequest,
    UpdateExpenseRequest,
    UpdateIncomeRequest,
    UpdateUserRequest,
)
from finance_tracker.orchestrator import AppComponents, create_app_components, start_store


def _respond(envelope: Envelope) -> JSONResponse:
    return JSONResponse(status_code=envelope.status, content=envelope.to_json())


def _components(request: Request) -> AppComponents:
    return request.app.state.components


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: build the pool, check the store, create tables
    components = create_app_components()
    await start_store(components)
    app.state.components = components

    yield

    # Shutdown: release pooled connections
    await components.database.dispose()


app = FastAPI(
    title="Finance Tracker API",
    description="Track users' income and expenses.",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().app.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed JSON bodies get the same envelope as other validation failures."""
    details = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ()) if part != "body"),
            "issue_type": error.get("type", "invalid"),
            "message": error.get("msg", "Invalid request body"),
        }
        for error in exc.errors()
    ]
    message = "Invalid request body"
    if details:
        message = f"{details[0]['field'] or 'body'}: {details[0]['message']}"
    envelope = Envelope(
        success=False,
        status=400,
        error=ErrorBody(kind=ErrorKind.VALIDATION, message=message, details=details),
    )
    return _respond(envelope)


@app.get("/health")
async def health() -> dict:
    """Liveness plus the configuration check run at startup."""
    settings_status = validate_all_settings()
    healthy = all(v for k, v in settings_status.items() if not k.endswith("_error"))
    return {
        "status": "ok" if healthy else "degraded",
        "settings": settings_status,
    }


# --- Users ---

users_router = APIRouter(prefix="/api/users", tags=["users"])


@users_router.get("", summary="List users")
async def list_users(request: Request) -> JSONResponse:
    return _respond(await _components(request).users.list_users())


@users_router.post("", status_code=201, summary="Create user")
async def create_user(request: Request, payload: CreateUserRequest) -> JSONResponse:
    return _respond(await _components(request).users.create_user(payload))


@users_router.get("/{user_id}", summary="Get user")
async def get_user(request: Request, user_id: str) -> JSONResponse:
    return _respond(await _components(request).users.get_user(user_id))


@users_router.patch("/{user_id}", summary="Update user")
async def update_user(request: Request, user_id: str, payload: UpdateUserRequest) -> JSONResponse:
    return _respond(await _components(request).users.update_user(user_id, payload))


@users_router.delete("/{user_id}", summary="Delete user (rejected while they own records)")
async def delete_user(request: Request, user_id: str) -> JSONResponse:
    return _respond(await _components(request).users.delete_user(user_id))


# --- Income ---

income_router = APIRouter(prefix="/api/users/{user_id}/income", tags=["income"])


@income_router.get("", summary="List a user's income, most recent first")
async def list_income(request: Request, user_id: str) -> JSONResponse:
    return _respond(await _components(request).income.list_income(user_id))


@income_router.post("", status_code=201, summary="Create income record")
async def create_income(request: Request, user_id: str, payload: CreateIncomeRequest) -> JSONResponse:
    return _respond(await _components(request).income.create_income(user_id, payload))


@income_router.get("/{income_id}", summary="Get income record")
async def get_income(request: Request, user_id: str, income_id: str) -> JSONResponse:
    return _respond(await _components(request).income.get_income(user_id, income_id))


@income_router.patch("/{income_id}", summary="Update income record")
async def update_income(
    request: Request,
    user_id: str,
    income_id: str,
    payload: UpdateIncomeRequest,
) -> JSONResponse:
    return _respond(await _components(request).income.update_income(user_id, income_id, payload))


@income_router.delete("/{income_id}", summary="Delete income record")
async def delete_income(request: Request, user_id: str, income_id: str) -> JSONResponse:
    return _respond(await _components(request).income.delete_income(user_id, income_id))


# --- Expenses ---

expenses_router = APIRouter(prefix="/api/users/{user_id}/expenses", tags=["expenses"])


@expenses_router.get("", summary="List a user's expenses, most recent first")
async def list_expenses(request: Request, user_id: str) -> JSONResponse:
    return _respond(await _components(request).expenses.list_expenses(user_id))


@expenses_router.post("", status_code=201, summary="Create expense record")
async def create_expense(request: Request, user_id: str, payload: CreateExpenseRequest) -> JSONResponse:
    return _respond(await _components(request).expenses.create_expense(user_id, payload))


@expenses_router.get("/{expense_id}", summary="Get expense record")
async def get_expense(request: Request, user_id: str, expense_id: str) -> JSONResponse:
    return _respond(await _components(request).expenses.get_expense(user_id, expense_id))


@expenses_router.patch("/{expense_id}", summary="Update expense record")
async def update_expense(
    request: Request,
    user_id: str,
    expense_id: str,
    payload: UpdateExpenseRequest,
) -> JSONResponse:
    return _respond(await _components(request).expenses.update_expense(user_id, expense_id, payload))


@expenses_router.delete("/{expense_id}", summary="Delete expense record")
async def delete_expense(request: Request, user_id: str, expense_id: str) -> JSONResponse:
    return _respond(await _components(request).expenses.delete_expense(user_id, expense_id))


app.include_router(users_router)
app.include_router(income_router)
app.include_router(expenses_router)


if __name__ == "__main__":
    import uvicorn

    settings = get_settings().app
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug_mode,
    )
