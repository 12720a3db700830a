"""
Account Directory

Registration, login, profile maintenance, self-service deletion and the
role-gated administrative operations on arbitrary accounts.

Role rules for administrative operations:
- admin: unrestricted (except deleting itself)
- manager: may only create, update and delete ``user`` accounts, may only
  assign the ``user`` role, may not change subscription status
- user: no access
Every check runs before any mutation is attempted.
"""

import logging
from typing import List, Optional

from ridewitus.domain.models import (
    AccountRead,
    AuthResult,
    Role,
    SubscriptionStatus,
)
from ridewitus.infrastructure.db.models.account import Account
from ridewitus.infrastructure.db.repositories.account_repository import AccountRepository
from ridewitus.infrastructure.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    ErrorCode,
    NotFoundError,
    RideWitUsError,
    ValidationError,
)
from ridewitus.infrastructure.payments.stripe_service import StripeService
from ridewitus.infrastructure.security.passwords import PasswordHasher
from ridewitus.infrastructure.security.tokens import TokenService


logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


def validate_email(email: Optional[str]) -> None:
    if not email or "@" not in email:
        raise ValidationError("Invalid email address", error_code=ErrorCode.INVALID_EMAIL)


def validate_password(password: Optional[str], error_code: str = ErrorCode.INVALID_PASSWORD) -> None:
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long",
            error_code=error_code,
        )


def validate_name(name: Optional[str]) -> None:
    if not name or not name.strip():
        raise ValidationError("Name is required", error_code=ErrorCode.INVALID_NAME)


def validate_registration(email: Optional[str], password: Optional[str], name: Optional[str]) -> None:
    """Check email, password and name in that order; the first failure wins."""
    validate_email(email)
    validate_password(password)
    validate_name(name)


def to_read(account: Account) -> AccountRead:
    return AccountRead.model_validate(account)


def ensure_can_administer(caller: Account) -> None:
    if caller.role_enum not in (Role.ADMIN, Role.MANAGER):
        raise AuthorizationError("Unauthorized", error_code=ErrorCode.UNAUTHORIZED)


def ensure_can_assign_role(caller: Account, role: Role) -> None:
    if caller.role_enum == Role.MANAGER and role != Role.USER:
        raise AuthorizationError(
            "Managers can only manage accounts with the user role",
            error_code=ErrorCode.UNAUTHORIZED,
        )


def ensure_can_manage(caller: Account, target: Account) -> None:
    if caller.role_enum == Role.MANAGER and target.role_enum != Role.USER:
        raise AuthorizationError(
            "Managers can only manage accounts with the user role",
            error_code=ErrorCode.UNAUTHORIZED,
        )


class AccountDirectory:
    """
    Service for account lifecycle operations.

    Args:
        accounts: Account repository bound to the request's session
        hasher: Password hasher
        tokens: Session token service
        billing: Optional billing service used to cancel subscriptions
            when an account deletes itself
    """

    _dummy_hash: Optional[str] = None

    def __init__(
        self,
        accounts: AccountRepository,
        hasher: PasswordHasher,
        tokens: TokenService,
        billing: Optional[StripeService] = None,
    ):
        self._accounts = accounts
        self._hasher = hasher
        self._tokens = tokens
        self._billing = billing

    def _issue(self, account: Account) -> AuthResult:
        token = self._tokens.issue(account.id, account.role_enum)
        return AuthResult(account=to_read(account), token=token)

    async def _burn_verification(self, password: str) -> None:
        # Keeps unknown-email logins as slow as wrong-password logins.
        if AccountDirectory._dummy_hash is None:
            AccountDirectory._dummy_hash = await self._hasher.hash("ridewitus-unknown-account")
        await self._hasher.verify(password, AccountDirectory._dummy_hash)

    async def _require(self, account_id: str) -> Account:
        account = await self._accounts.get_by_id(account_id)
        if account is None:
            raise NotFoundError("User not found", error_code=ErrorCode.USER_NOT_FOUND)
        return account

    async def _check_current_password(self, account: Account, current_password: Optional[str]) -> None:
        if not await self._hasher.verify(current_password or "", account.password_hash):
            logger.warning(f"Current password check failed for account {account.id}")
            raise AuthenticationError(
                "Current password is incorrect",
                error_code=ErrorCode.INVALID_CREDENTIALS,
            )

    async def _insert(self, email: str, password: str, name: str, role: Role) -> Account:
        if await self._accounts.get_by_email(email) is not None:
            raise ConflictError(
                "User with this email already exists",
                error_code=ErrorCode.USER_EXISTS,
            )
        account = Account(
            email=email,
            name=name.strip(),
            password_hash=await self._hasher.hash(password),
            role=role.value,
            subscription_status=SubscriptionStatus.FREE.value,
        )
        return await self._accounts.create(account)

    # =========================================================================
    # Self-service
    # =========================================================================

    async def register(self, email: str, password: str, name: str) -> AuthResult:
        """
        Register a new ``user`` account on the ``free`` plan.

        Raises:
            ValidationError: INVALID_EMAIL, INVALID_PASSWORD or INVALID_NAME
            ConflictError: USER_EXISTS
        """
        validate_registration(email, password, name)
        account = await self._insert(email, password, name, Role.USER)
        logger.info(f"Registered account {account.id}")
        return self._issue(account)

    async def login(self, email: str, password: str) -> AuthResult:
        """
        Authenticate by email and password.

        Unknown email and wrong password raise the identical
        INVALID_CREDENTIALS error.
        """
        if not email or not password:
            raise ValidationError(
                "Email and password are required",
                error_code=ErrorCode.MISSING_CREDENTIALS,
            )

        account = await self._accounts.get_by_email(email)
        if account is None:
            await self._burn_verification(password)
            matched = False
        else:
            matched = await self._hasher.verify(password, account.password_hash)

        if not matched:
            logger.warning("Failed login attempt")
            raise AuthenticationError(
                "Invalid email or password",
                error_code=ErrorCode.INVALID_CREDENTIALS,
            )

        return self._issue(account)

    async def get_by_id(self, account_id: str) -> Account:
        """
        Raises:
            NotFoundError: USER_NOT_FOUND
        """
        return await self._require(account_id)

    async def update_profile(
        self,
        account_id: str,
        name: str,
        email: str,
        current_password: str,
    ) -> Account:
        """
        Change name and email after re-verifying the current password.

        Raises:
            AuthenticationError: INVALID_CREDENTIALS
            ConflictError: EMAIL_IN_USE
        """
        validate_email(email)
        validate_name(name)
        account = await self._require(account_id)
        await self._check_current_password(account, current_password)

        if email != account.email and await self._accounts.email_in_use(email, exclude_id=account.id):
            raise ConflictError("Email is already in use", error_code=ErrorCode.EMAIL_IN_USE)

        account.name = name.strip()
        account.email = email
        return await self._accounts.save(account)

    async def change_password(
        self,
        account_id: str,
        current_password: str,
        new_password: str,
    ) -> None:
        """
        Raises:
            AuthenticationError: INVALID_CREDENTIALS
            ValidationError: WEAK_PASSWORD
        """
        account = await self._require(account_id)
        await self._check_current_password(account, current_password)
        validate_password(new_password, error_code=ErrorCode.WEAK_PASSWORD)

        account.password_hash = await self._hasher.hash(new_password)
        await self._accounts.save(account)
        logger.info(f"Password changed for account {account.id}")

    async def delete_account(self, account_id: str) -> None:
        """
        Delete an account and all of its activities.

        Billing subscriptions are cancelled first; a billing failure is
        logged and does not block the deletion.
        """
        account = await self._require(account_id)

        if account.stripe_customer_id and self._billing is not None:
            try:
                await self._billing.cancel_customer_subscriptions(account.stripe_customer_id)
            except RideWitUsError as e:
                logger.error(
                    f"Could not cancel subscriptions for account {account.id}: {e.message}"
                )

        await self._accounts.delete_with_activities(account)

    # =========================================================================
    # Administration
    # =========================================================================

    async def list_accounts(self, caller: Account) -> List[Account]:
        ensure_can_administer(caller)
        return await self._accounts.list_newest_first()

    async def create_account(
        self,
        caller: Account,
        email: str,
        password: str,
        name: str,
        role: Role = Role.USER,
    ) -> Account:
        """Create an account with an explicit role on behalf of an administrator."""
        ensure_can_administer(caller)
        ensure_can_assign_role(caller, role)
        validate_registration(email, password, name)

        account = await self._insert(email, password, name, role)
        logger.info(f"Account {account.id} ({role.value}) created by {caller.id}")
        return account

    async def update_account(
        self,
        caller: Account,
        target_id: str,
        name: Optional[str] = None,
        email: Optional[str] = None,
        role: Optional[Role] = None,
        subscription_status: Optional[SubscriptionStatus] = None,
    ) -> Account:
        """
        Update another account's profile, role or subscription status.

        Raises:
            AuthorizationError: Caller may not perform this change
            NotFoundError: USER_NOT_FOUND
            ConflictError: EMAIL_IN_USE
        """
        ensure_can_administer(caller)
        if role is not None:
            ensure_can_assign_role(caller, role)
        if subscription_status is not None and caller.role_enum != Role.ADMIN:
            raise AuthorizationError(
                "Only administrators can change subscription status",
                error_code=ErrorCode.UNAUTHORIZED,
            )
        if email is not None:
            validate_email(email)
        if name is not None:
            validate_name(name)

        target = await self._require(target_id)
        ensure_can_manage(caller, target)

        if email is not None and email != target.email:
            if await self._accounts.email_in_use(email, exclude_id=target.id):
                raise ConflictError("Email is already in use", error_code=ErrorCode.EMAIL_IN_USE)
            target.email = email
        if name is not None:
            target.name = name.strip()
        if role is not None:
            target.role = role.value
        if subscription_status is not None:
            target.subscription_status = subscription_status.value

        updated = await self._accounts.save(target)
        logger.info(f"Account {target.id} updated by {caller.id}")
        return updated

    async def delete_account_as(self, caller: Account, target_id: str) -> None:
        """
        Delete another account and its activities.

        Raises:
            AuthorizationError: CANNOT_DELETE_SELF or insufficient role
            NotFoundError: USER_NOT_FOUND
        """
        ensure_can_administer(caller)
        if target_id == caller.id:
            raise AuthorizationError(
                "Cannot delete your own account",
                error_code=ErrorCode.CANNOT_DELETE_SELF,
            )

        target = await self._require(target_id)
        ensure_can_manage(caller, target)

        await self._accounts.delete_with_activities(target)
        logger.info(f"Account {target.id} deleted by {caller.id}")
