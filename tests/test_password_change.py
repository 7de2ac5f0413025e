import pytest

from clinic_agenda.domain.accounts.password_change import (
    GENERIC_RETRY_MESSAGE,
    PasswordChangeDependencies,
    PasswordUpdateResponse,
    process_password_change,
)


class FakeAccount:
    """Records calls made by the workflow"""

    def __init__(self, update_error=None, update_raises=None, mark_raises=None):
        self.update_error = update_error
        self.update_raises = update_raises
        self.mark_raises = mark_raises
        self.passwords = []
        self.marked = 0

    async def update_user_password(self, password):
        if self.update_raises:
            raise self.update_raises
        self.passwords.append(password)
        return PasswordUpdateResponse(error=self.update_error)

    async def mark_password_as_changed(self):
        if self.mark_raises:
            raise self.mark_raises
        self.marked += 1

    def deps(self):
        return PasswordChangeDependencies(
            update_user_password=self.update_user_password,
            mark_password_as_changed=self.mark_password_as_changed,
        )


@pytest.mark.asyncio
async def test_short_password_is_rejected_without_side_effects():
    account = FakeAccount()
    result = await process_password_change("short", "short", account.deps())
    assert result.status == "validation-error"
    assert "8" in result.message
    assert account.passwords == []
    assert account.marked == 0


@pytest.mark.asyncio
async def test_mismatched_confirmation_is_rejected():
    account = FakeAccount()
    result = await process_password_change("long-enough-1", "long-enough-2", account.deps())
    assert result.status == "validation-error"
    assert "do not match" in result.message
    assert account.passwords == []


@pytest.mark.asyncio
async def test_update_error_is_reported_and_flag_untouched():
    account = FakeAccount(update_error="Password is too common")
    result = await process_password_change("long-enough", "long-enough", account.deps())
    assert result.status == "error"
    assert result.message == "Password is too common"
    assert account.marked == 0


@pytest.mark.asyncio
async def test_success_updates_then_clears_flag_once():
    account = FakeAccount()
    result = await process_password_change("long-enough", "long-enough", account.deps())
    assert result.status == "success"
    assert result.message is None
    assert account.passwords == ["long-enough"]
    assert account.marked == 1


@pytest.mark.asyncio
async def test_exception_becomes_error_result():
    account = FakeAccount(mark_raises=RuntimeError("flag store unavailable"))
    result = await process_password_change("long-enough", "long-enough", account.deps())
    assert result.status == "error"
    assert result.message == "flag store unavailable"
    assert account.passwords == ["long-enough"]


@pytest.mark.asyncio
async def test_exception_without_message_uses_generic_text():
    account = FakeAccount(update_raises=RuntimeError())
    result = await process_password_change("long-enough", "long-enough", account.deps())
    assert result.status == "error"
    assert result.message == GENERIC_RETRY_MESSAGE
