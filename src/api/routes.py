"""
API routes - Account endpoints.

Defines the /users REST endpoints. Domain errors raised by the service are
translated to HTTP responses by the exception handlers in src.api.errors.

Handlers are plain ``def`` functions: FastAPI runs them in its threadpool,
so blocking database, bcrypt and SMTP calls do not stall the event loop.
"""

from fastapi import APIRouter, Depends, Response, status

from src.api.dependencies import get_account_service, get_current_account
from src.api.models import (
    AccountResponse,
    AccountWithCodesResponse,
    ErrorResponse,
    LoginRequest,
    LoginResponse,
    NewPasswordRequest,
    RegisterRequest,
    ResetPasswordRequest,
    UpdateAccountRequest,
)
from src.domain.accounts import AccountService
from src.domain.ports import Account

router = APIRouter(prefix="/users", tags=["users"])

_UNAUTHORIZED = {401: {"model": ErrorResponse, "description": "Missing or invalid token"}}


@router.get(
    "",
    response_model=list[AccountWithCodesResponse],
    responses=_UNAUTHORIZED,
    summary="List accounts",
)
def list_accounts(
    _: Account = Depends(get_current_account),
    service: AccountService = Depends(get_account_service),
) -> list[AccountWithCodesResponse]:
    """List every account with its pending one-time codes."""
    return [AccountWithCodesResponse.from_account(account) for account in service.list_accounts()]


@router.post(
    "",
    response_model=AccountResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        409: {"model": ErrorResponse, "description": "Email already registered"},
        422: {"description": "Validation error"},
    },
    summary="Register a new user",
    description="Create an unverified account. A verification link is emailed "
    "to the provided address.",
)
def register(
    request_data: RegisterRequest,
    service: AccountService = Depends(get_account_service),
) -> AccountResponse:
    account = service.register(
        email=request_data.email,
        password=request_data.password,
        first_name=request_data.first_name,
        last_name=request_data.last_name,
        country=request_data.country,
        image=request_data.image,
        base_url=request_data.front_base_url,
    )
    return AccountResponse.from_account(account)


@router.post(
    "/login",
    response_model=LoginResponse,
    status_code=status.HTTP_201_CREATED,
    responses={401: {"model": ErrorResponse, "description": "Invalid credentials or unverified email"}},
    summary="Log in with email and password",
)
def login(
    request_data: LoginRequest,
    service: AccountService = Depends(get_account_service),
) -> LoginResponse:
    """Exchange credentials of a verified account for a bearer token."""
    account, token = service.login(request_data.email, request_data.password)
    return LoginResponse(user=AccountResponse.from_account(account), token=token)


@router.get(
    "/me",
    response_model=AccountResponse,
    responses=_UNAUTHORIZED,
    summary="Get the logged-in account",
)
def me(account: Account = Depends(get_current_account)) -> AccountResponse:
    return AccountResponse.from_account(account)


@router.post(
    "/reset_password",
    response_model=AccountResponse,
    status_code=status.HTTP_201_CREATED,
    responses={401: {"model": ErrorResponse, "description": "Invalid credentials"}},
    summary="Request a password reset link",
)
def request_password_reset(
    request_data: ResetPasswordRequest,
    service: AccountService = Depends(get_account_service),
) -> AccountResponse:
    account = service.request_password_reset(request_data.email, request_data.front_base_url)
    return AccountResponse.from_account(account)


@router.post(
    "/reset_password/{code}",
    response_model=AccountResponse,
    status_code=status.HTTP_201_CREATED,
    responses={401: {"model": ErrorResponse, "description": "Invalid code"}},
    summary="Set a new password with a reset code",
)
def reset_password(
    code: str,
    request_data: NewPasswordRequest,
    service: AccountService = Depends(get_account_service),
) -> AccountResponse:
    return AccountResponse.from_account(service.reset_password(code, request_data.password))


@router.get(
    "/verify/{code}",
    response_model=AccountResponse,
    responses={401: {"model": ErrorResponse, "description": "Invalid code"}},
    summary="Verify an email address",
)
def verify_email(
    code: str,
    service: AccountService = Depends(get_account_service),
) -> AccountResponse:
    return AccountResponse.from_account(service.verify_email(code))


@router.get(
    "/{account_id}",
    response_model=AccountResponse,
    responses={**_UNAUTHORIZED, 404: {"model": ErrorResponse, "description": "Account not found"}},
    summary="Get an account",
)
def get_account(
    account_id: int,
    _: Account = Depends(get_current_account),
    service: AccountService = Depends(get_account_service),
) -> AccountResponse:
    return AccountResponse.from_account(service.get_account(account_id))


@router.put(
    "/{account_id}",
    response_model=AccountResponse,
    responses={**_UNAUTHORIZED, 404: {"model": ErrorResponse, "description": "Account not found"}},
    summary="Update profile fields",
)
def update_account(
    account_id: int,
    request_data: UpdateAccountRequest,
    _: Account = Depends(get_current_account),
    service: AccountService = Depends(get_account_service),
) -> AccountResponse:
    account = service.update_profile(
        account_id,
        first_name=request_data.first_name,
        last_name=request_data.last_name,
        country=request_data.country,
        image=request_data.image,
    )
    return AccountResponse.from_account(account)


@router.delete(
    "/{account_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses=_UNAUTHORIZED,
    summary="Delete an account",
)
def delete_account(
    account_id: int,
    _: Account = Depends(get_current_account),
    service: AccountService = Depends(get_account_service),
) -> Response:
    """Delete an account. Deleting a missing id still succeeds."""
    service.remove_account(account_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
