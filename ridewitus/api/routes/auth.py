"""
Auth API Routes

Registration, login, sign-out and self-service account maintenance.
Successful register/login set the ``auth_token`` session cookie.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Response, status

from ridewitus.api.dependencies import (
    AccountDirectoryDep,
    IdentityDep,
    clear_auth_cookie,
    set_auth_cookie,
)
from ridewitus.domain.accounts import to_read
from ridewitus.domain.models import AccountResponse, CamelModel, MessageResponse


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth")


# =============================================================================
# Request Models
# =============================================================================

class RegisterRequest(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None
    name: Optional[str] = None


class LoginRequest(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None


class ProfileUpdateRequest(CamelModel):
    name: Optional[str] = None
    email: Optional[str] = None
    current_password: Optional[str] = None


class PasswordChangeRequest(CamelModel):
    current_password: Optional[str] = None
    new_password: Optional[str] = None


# =============================================================================
# Session Endpoints
# =============================================================================

@router.post("/register", response_model=AccountResponse, status_code=status.HTTP_201_CREATED)
async def register(request: RegisterRequest, response: Response, directory: AccountDirectoryDep):
    """Create a ``user`` account on the free plan and sign it in."""
    result = await directory.register(request.email, request.password, request.name)
    set_auth_cookie(response, result.token)
    return AccountResponse(user=result.account)


@router.post("/login", response_model=AccountResponse)
async def login(request: LoginRequest, response: Response, directory: AccountDirectoryDep):
    result = await directory.login(request.email, request.password)
    set_auth_cookie(response, result.token)
    logger.info(f"Account {result.account.id} signed in")
    return AccountResponse(user=result.account)


@router.post("/signout", response_model=MessageResponse)
async def signout(response: Response):
    """
    Clear the session cookie.

    Tokens are not revoked server-side; a copied token stays valid until
    it expires.
    """
    clear_auth_cookie(response)
    return MessageResponse(message="Signed out")


@router.get("/me", response_model=AccountResponse)
async def me(identity: IdentityDep, directory: AccountDirectoryDep):
    account = await directory.get_by_id(identity.account_id)
    return AccountResponse(user=to_read(account))


# =============================================================================
# Account Maintenance
# =============================================================================

@router.put("/profile", response_model=AccountResponse)
async def update_profile(
    request: ProfileUpdateRequest,
    identity: IdentityDep,
    directory: AccountDirectoryDep,
):
    account = await directory.update_profile(
        identity.account_id,
        name=request.name,
        email=request.email,
        current_password=request.current_password,
    )
    return AccountResponse(user=to_read(account))


@router.put("/password", response_model=MessageResponse)
async def change_password(
    request: PasswordChangeRequest,
    identity: IdentityDep,
    directory: AccountDirectoryDep,
):
    await directory.change_password(
        identity.account_id,
        current_password=request.current_password,
        new_password=request.new_password,
    )
    return MessageResponse(message="Password updated")


@router.delete("/account", response_model=MessageResponse)
async def delete_account(
    response: Response,
    identity: IdentityDep,
    directory: AccountDirectoryDep,
):
    """Delete the caller's account and every activity it owns."""
    await directory.delete_account(identity.account_id)
    clear_auth_cookie(response)
    return MessageResponse(message="Account deleted")
