"""
Unit tests for TransferService.

Tests cover:
- Input validation helpers
- Transfer preconditions (KYC, default wallet, balance)
- Recipient eligibility tiers
- Deposit creation
"""

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.models.records import Wallet
from app.services.transfer_service import (
    TransferService,
    format_validation_errors,
    is_valid_address,
    is_valid_amount,
    is_valid_email,
)
from app.utils.exceptions import (
    ApiClientError,
    ApiServerError,
    RecipientNotEligibleError,
    TransferPreconditionError,
)


@pytest.fixture
def auth_service():
    service = MagicMock()
    service.is_kyc_approved = AsyncMock(return_value=True)
    return service


@pytest.fixture
def wallet_service():
    service = MagicMock()
    service.get_default_wallet = AsyncMock(
        return_value=Wallet(id="w1", network="137", address="0xabc", is_default=True)
    )
    service.get_default_balance = AsyncMock(return_value=Decimal("50"))
    return service


@pytest.fixture
def service(mock_api, auth_service, wallet_service):
    return TransferService(mock_api, auth_service, wallet_service)


def not_found(message: str = "Not Found") -> ApiClientError:
    return ApiClientError(message, status=404, payload={"message": message})


class TestValidation:
    """Test input validation helpers."""

    @pytest.mark.parametrize("value", ["a@b.co", "first.last@example.com"])
    def test_valid_email(self, value):
        assert is_valid_email(value) is True

    @pytest.mark.parametrize("value", ["", "plain", "a@b", "a b@c.de", "@b.co"])
    def test_invalid_email(self, value):
        assert is_valid_email(value) is False

    @pytest.mark.parametrize("value", ["1", "10.5", "0.000001", "100"])
    def test_valid_amount(self, value):
        assert is_valid_amount(value) is True

    @pytest.mark.parametrize("value", ["", "-1", "1e3", "1.1234567", "abc", "1,5", ".5"])
    def test_invalid_amount(self, value):
        assert is_valid_amount(value) is False

    def test_valid_address(self):
        assert is_valid_address("0x742d35Cc6634C0532925a3b844Bc9e7595f0bEb0") is True

    def test_invalid_address(self):
        assert is_valid_address("0x12") is False
        assert is_valid_address("0x742d35Cc6634C0532925 a3b844Bc9e7595f0bEb0") is False

    def test_format_validation_errors(self):
        payload = {
            "message": [
                {"property": "amount", "constraints": {"min": "amount must not be less than 1"}},
                {"property": "depositChainId", "constraints": {"isInt": "must be an integer"}},
            ]
        }
        assert format_validation_errors(payload) == (
            "amount: amount must not be less than 1; depositChainId: must be an integer"
        )

    def test_format_validation_errors_plain_message(self):
        """A plain string message is not a validation payload."""
        assert format_validation_errors({"message": "Bad request"}) is None
        assert format_validation_errors(None) is None


class TestPreconditions:
    """Test can_perform_transfers."""

    @pytest.mark.asyncio
    async def test_guest_rejected(self, service, guest_session):
        with pytest.raises(TransferPreconditionError, match="login"):
            await service.can_perform_transfers(guest_session)

    @pytest.mark.asyncio
    async def test_kyc_not_approved(self, service, auth_service, logged_in_session):
        auth_service.is_kyc_approved.return_value = False
        with pytest.raises(TransferPreconditionError, match="KYC"):
            await service.can_perform_transfers(logged_in_session)

    @pytest.mark.asyncio
    async def test_no_default_wallet(self, service, wallet_service, logged_in_session):
        wallet_service.get_default_wallet.return_value = None
        with pytest.raises(TransferPreconditionError, match="default wallet"):
            await service.can_perform_transfers(logged_in_session)

    @pytest.mark.asyncio
    async def test_zero_balance(self, service, wallet_service, logged_in_session):
        wallet_service.get_default_balance.return_value = Decimal("0")
        with pytest.raises(TransferPreconditionError, match="balance"):
            await service.can_perform_transfers(logged_in_session)

    @pytest.mark.asyncio
    async def test_all_checks_pass(self, service, logged_in_session):
        await service.can_perform_transfers(logged_in_session)


class TestRecipientEligibility:
    """Test the eligibility fallback chain."""

    @pytest.mark.asyncio
    async def test_primary_endpoint(self, service, mock_api, logged_in_session):
        mock_api.post.return_value = {"isEligible": False, "reason": "Recipient blocked"}
        result = await service.check_recipient_eligibility(
            logged_in_session.credentials, "bob@example.com"
        )
        assert result.is_eligible is False
        assert result.reason == "Recipient blocked"
        mock_api.get.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_lookup_after_missing_endpoint(self, service, mock_api, logged_in_session):
        """404 on the primary endpoint falls back to the user lookup."""
        mock_api.post.side_effect = not_found()
        mock_api.get.return_value = {"data": {"hasWallets": True, "kycStatus": "APPROVED"}}

        result = await service.check_recipient_eligibility(
            logged_in_session.credentials, "bob@example.com"
        )

        assert result.is_eligible is True
        assert mock_api.get.await_args.args[0] == "/users/by-email/bob%40example.com"

    @pytest.mark.asyncio
    async def test_lookup_route_missing_allows(self, service, mock_api, logged_in_session):
        """Lookup route missing too: eligible by default."""
        mock_api.post.side_effect = not_found()
        mock_api.get.side_effect = not_found("Cannot GET /api/users/by-email/bob")

        result = await service.check_recipient_eligibility(
            logged_in_session.credentials, "bob@example.com"
        )
        assert result.is_eligible is True

    @pytest.mark.asyncio
    async def test_unknown_user(self, service, mock_api, logged_in_session):
        mock_api.post.side_effect = not_found()
        mock_api.get.side_effect = not_found("User not found")

        result = await service.check_recipient_eligibility(
            logged_in_session.credentials, "ghost@example.com"
        )
        assert result.is_eligible is False
        assert "not registered" in result.reason

    @pytest.mark.asyncio
    async def test_recipient_without_wallets(self, service, mock_api, logged_in_session):
        mock_api.post.side_effect = not_found()
        mock_api.get.return_value = {"hasWallets": False, "kycStatus": "approved"}

        result = await service.check_recipient_eligibility(
            logged_in_session.credentials, "bob@example.com"
        )
        assert result.is_eligible is False
        assert "wallets" in result.reason

    @pytest.mark.asyncio
    async def test_recipient_kyc_pending(self, service, mock_api, logged_in_session):
        mock_api.post.side_effect = not_found()
        mock_api.get.return_value = {"hasWallets": True, "kycStatus": "pending"}

        result = await service.check_recipient_eligibility(
            logged_in_session.credentials, "bob@example.com"
        )
        assert result.is_eligible is False
        assert "KYC" in result.reason

    @pytest.mark.asyncio
    async def test_unexpected_error_allows(self, service, mock_api, logged_in_session):
        mock_api.post.side_effect = ApiServerError("boom", status=500)

        result = await service.check_recipient_eligibility(
            logged_in_session.credentials, "bob@example.com"
        )
        assert result.is_eligible is True

    @pytest.mark.asyncio
    async def test_send_to_ineligible_email(self, service, mock_api, logged_in_session):
        """No money moves when the recipient is ineligible."""
        mock_api.post.return_value = {"isEligible": False, "reason": "Recipient blocked"}

        with pytest.raises(RecipientNotEligibleError) as exc_info:
            await service.send_to_email(logged_in_session.credentials, "bob@example.com", "10")

        assert exc_info.value.reason == "Recipient blocked"
        assert mock_api.post.await_count == 1

    @pytest.mark.asyncio
    async def test_send_to_eligible_email(self, service, mock_api, logged_in_session):
        mock_api.post.side_effect = [{"isEligible": True}, {"id": "t1"}]

        await service.send_to_email(logged_in_session.credentials, "bob@example.com", "10")

        send_call = mock_api.post.await_args_list[1]
        assert send_call.args[0] == "/transfers/send"
        assert send_call.args[2] == {"email": "bob@example.com", "amount": "10"}


class TestBatchSend:
    """Test batch sends."""

    @pytest.mark.asyncio
    async def test_all_recipients_checked_then_sent(self, service, mock_api, logged_in_session):
        transfers = [
            {"email": "bob@example.com", "amount": "10"},
            {"email": "carol@example.com", "amount": "5", "message": "lunch"},
        ]
        mock_api.post.side_effect = [{"isEligible": True}, {"isEligible": True}, {"ok": True}]

        result = await service.send_batch(logged_in_session.credentials, transfers)

        assert result == {"ok": True}
        checked = [c.args[2]["email"] for c in mock_api.post.await_args_list[:2]]
        assert checked == ["bob@example.com", "carol@example.com"]
        batch_call = mock_api.post.await_args_list[2]
        assert batch_call.args[0] == "/transfers/send-batch"
        assert batch_call.args[2] == {"transfers": transfers}

    @pytest.mark.asyncio
    async def test_first_ineligible_recipient_aborts(self, service, mock_api, logged_in_session):
        transfers = [
            {"email": "bob@example.com", "amount": "10"},
            {"email": "ghost@example.com", "amount": "5"},
            {"email": "carol@example.com", "amount": "1"},
        ]
        mock_api.post.side_effect = [
            {"isEligible": True},
            {"isEligible": False, "reason": "Recipient blocked"},
        ]

        with pytest.raises(RecipientNotEligibleError) as exc_info:
            await service.send_batch(logged_in_session.credentials, transfers)

        assert "ghost@example.com" in exc_info.value.reason
        assert mock_api.post.await_count == 2


class TestDeposit:
    """Test deposit creation."""

    @pytest.mark.asyncio
    async def test_below_minimum(self, service, mock_api, logged_in_session):
        with pytest.raises(ValueError):
            await service.create_deposit(logged_in_session.credentials, "0.5", "137")
        mock_api.post.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unsupported_chain(self, service, logged_in_session):
        with pytest.raises(ValueError):
            await service.create_deposit(logged_in_session.credentials, "10", "999")

    @pytest.mark.asyncio
    async def test_request_body(self, service, mock_api, logged_in_session):
        """Chain id is sent as an integer with the fixed source of funds."""
        mock_api.post.return_value = {
            "status": "pending",
            "transactions": [{"depositAccount": {"walletAddress": "0xdep"}}],
        }

        deposit = await service.create_deposit(logged_in_session.credentials, "25", "137")

        body = mock_api.post.await_args.args[2]
        assert body == {"amount": "25", "depositChainId": 137, "sourceOfFunds": "savings"}
        assert deposit.deposit_address == "0xdep"
        mock_api.get.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_address_from_deposit_info(self, service, mock_api, logged_in_session):
        """Missing address is looked up via deposit-info."""
        mock_api.post.return_value = {"status": "pending"}
        mock_api.get.return_value = {"address": "0xinfo"}

        deposit = await service.create_deposit(logged_in_session.credentials, "25", "137")

        assert deposit.deposit_address == "0xinfo"
