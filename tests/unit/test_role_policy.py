"""
Unit tests for the administrative role policy helpers.
"""

import pytest

from ridewitus.domain.accounts import (
    ensure_can_administer,
    ensure_can_assign_role,
    ensure_can_manage,
    validate_registration,
)
from ridewitus.domain.models import Role
from ridewitus.infrastructure.db.models.account import Account
from ridewitus.infrastructure.exceptions import AuthorizationError, ErrorCode, ValidationError


def account(role: Role) -> Account:
    return Account(email=f"{role.value}@example.com", name=role.value, password_hash="x", role=role.value)


class TestRolePolicy:

    def test_user_cannot_administer(self):
        with pytest.raises(AuthorizationError) as exc_info:
            ensure_can_administer(account(Role.USER))
        assert exc_info.value.error_code == ErrorCode.UNAUTHORIZED

    @pytest.mark.parametrize("role", [Role.MANAGER, Role.ADMIN])
    def test_staff_can_administer(self, role):
        ensure_can_administer(account(role))

    @pytest.mark.parametrize("role", [Role.MANAGER, Role.ADMIN])
    def test_manager_cannot_assign_elevated_roles(self, role):
        with pytest.raises(AuthorizationError):
            ensure_can_assign_role(account(Role.MANAGER), role)

    def test_manager_can_assign_user_role(self):
        ensure_can_assign_role(account(Role.MANAGER), Role.USER)

    @pytest.mark.parametrize("role", list(Role))
    def test_admin_can_assign_any_role(self, role):
        ensure_can_assign_role(account(Role.ADMIN), role)

    @pytest.mark.parametrize("target_role", [Role.MANAGER, Role.ADMIN])
    def test_manager_cannot_manage_staff(self, target_role):
        with pytest.raises(AuthorizationError):
            ensure_can_manage(account(Role.MANAGER), account(target_role))

    def test_manager_can_manage_users(self):
        ensure_can_manage(account(Role.MANAGER), account(Role.USER))

    def test_legacy_uppercase_role_is_understood(self):
        legacy = Account(email="a@example.com", name="A", password_hash="x", role="ADMIN")
        ensure_can_assign_role(legacy, Role.ADMIN)


class TestRegistrationValidation:

    @pytest.mark.parametrize(
        "email,password,name,code",
        [
            ("no-at-sign", "short", "", ErrorCode.INVALID_EMAIL),
            ("a@example.com", "short", "", ErrorCode.INVALID_PASSWORD),
            ("a@example.com", "long-enough", "   ", ErrorCode.INVALID_NAME),
            (None, None, None, ErrorCode.INVALID_EMAIL),
        ],
    )
    def test_first_failure_wins(self, email, password, name, code):
        with pytest.raises(ValidationError) as exc_info:
            validate_registration(email, password, name)
        assert exc_info.value.error_code == code

    def test_eight_characters_is_enough(self):
        validate_registration("a@example.com", "12345678", "A")
