"""Unit tests for the Redirect Accountant with a mocked registry."""

import pytest

from tinylink.accountant import RedirectAccountant
from tinylink.errors import CodeNotFound


@pytest.fixture
def accountant(mock_registry, mock_logger) -> RedirectAccountant:
    return RedirectAccountant(mock_registry, mock_logger)


@pytest.mark.asyncio
async def test_resolve_records_click(accountant, mock_registry) -> None:
    mock_registry.increment_clicks.return_value = "https://example.com"

    target = await accountant.resolve_and_record("abc123")

    assert target == "https://example.com"
    mock_registry.increment_clicks.assert_awaited_once_with("abc123")


@pytest.mark.asyncio
async def test_resolve_unknown_code(accountant, mock_registry) -> None:
    mock_registry.increment_clicks.return_value = None

    with pytest.raises(CodeNotFound) as exc_info:
        await accountant.resolve_and_record("ZZZZZZ")

    assert exc_info.value.code == "ZZZZZZ"
    assert exc_info.value.status_code == 404


@pytest.mark.asyncio
@pytest.mark.parametrize("code", ["favicon.ico", "ab", "abcdefghi", "abc-12"])
async def test_malformed_code_skips_store(accountant, mock_registry, code) -> None:
    with pytest.raises(CodeNotFound):
        await accountant.resolve_and_record(code)
    mock_registry.increment_clicks.assert_not_called()


@pytest.mark.asyncio
async def test_store_error_propagates(accountant, mock_registry) -> None:
    mock_registry.increment_clicks.side_effect = RuntimeError("store down")

    with pytest.raises(RuntimeError, match="store down"):
        await accountant.resolve_and_record("abc123")
