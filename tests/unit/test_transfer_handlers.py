"""
Unit tests for send, withdraw, confirm and deposit handlers.

Tests cover:
- Preconditions before a flow starts
- Wallet withdrawal network and address steps
- Confirmation always clearing the flow
- Deposit amount step
"""

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.models.records import Deposit, KycRecord, Wallet
from app.models.session import TransferType
from app.services.transfer_service import TransferService
from app.utils.exceptions import ApiClientError, ApiServerError, RecipientNotEligibleError
from bot.handlers.deposit import process_deposit_amount
from bot.handlers.transfer.confirm import (
    callback_cancel_transfer,
    callback_confirm_transfer,
    process_amount,
)
from bot.handlers.transfer.send import cmd_send
from bot.handlers.transfer.withdraw import (
    callback_network_selected,
    callback_wallet_withdraw,
    process_wallet_address,
)
from bot.keyboards.inline import Callbacks
from bot.messages.error_messages import SERVER_ERROR
from bot.messages.user_messages import (
    DEPOSIT_CHAIN_PROMPT,
    DEPOSIT_MIN_AMOUNT,
    INVALID_ADDRESS,
    INVALID_AMOUNT,
    NETWORK_PROMPT,
    NO_WALLETS_FOR_WITHDRAW,
    SEND_METHOD_PROMPT,
    TRANSFER_CANCELLED,
    TRANSFER_STATE_INVALID,
    TRANSFER_SUCCESS,
    WALLET_ADDRESS_PROMPT,
    WITHDRAW_AMOUNT_PROMPT,
)
from bot.states.deposit import DepositStates
from bot.states.transfer import TransferStates


@pytest.fixture
def transfer_service(mock_api):
    auth_service = MagicMock()
    auth_service.is_kyc_approved = AsyncMock(return_value=True)
    auth_service.get_latest_kyc = AsyncMock(return_value=KycRecord(status="approved"))
    wallet_service = MagicMock()
    wallet_service.get_default_wallet = AsyncMock(
        return_value=Wallet(id="w1", network="137", address="0xabc", is_default=True)
    )
    wallet_service.get_default_balance = AsyncMock(return_value=Decimal("100"))
    return TransferService(mock_api, auth_service, wallet_service)


def sent_texts(message) -> list[str]:
    return [call.args[0] for call in message.answer.await_args_list]


class TestSendEntry:
    """Test /send preconditions."""

    @pytest.mark.asyncio
    async def test_kyc_not_approved(
        self, make_message, fsm_state, logged_in_session, transfer_service
    ):
        """Unapproved KYC blocks the flow before any state is set."""
        transfer_service.auth_service.is_kyc_approved.return_value = False
        message = make_message("/send")

        await cmd_send(
            message,
            fsm_state,
            chat_session=logged_in_session,
            transfer_service=transfer_service,
        )

        text = sent_texts(message)[0]
        assert text.startswith("❌ Your KYC is not approved")
        assert await fsm_state.get_state() is None
        assert logged_in_session.transfer.is_empty

    @pytest.mark.asyncio
    async def test_guest_needs_login(self, make_message, fsm_state, guest_session, transfer_service):
        message = make_message("/send")

        await cmd_send(
            message, fsm_state, chat_session=guest_session, transfer_service=transfer_service
        )

        assert sent_texts(message) == ["❌ You need to login first."]

    @pytest.mark.asyncio
    async def test_eligible_account_offers_methods(
        self, make_message, fsm_state, logged_in_session, transfer_service
    ):
        message = make_message("/send")

        await cmd_send(
            message,
            fsm_state,
            chat_session=logged_in_session,
            transfer_service=transfer_service,
        )

        assert sent_texts(message) == [SEND_METHOD_PROMPT]


class TestWithdrawSteps:
    """Test wallet withdrawal input."""

    @pytest.fixture
    def wallet_service(self):
        service = MagicMock()
        service.get_wallets = AsyncMock(
            return_value=[
                Wallet(id="w1", network="137", address="0xabc", is_default=True),
                Wallet(id="w2", network="137", address="0xdef"),
                Wallet(id="w3", network="8453", address="0x123"),
            ]
        )
        return service

    @pytest.mark.asyncio
    async def test_wallet_method_offers_networks(
        self, make_callback, fsm_state, logged_in_session, wallet_service
    ):
        callback = make_callback(Callbacks.SEND_WALLET)

        await callback_wallet_withdraw(
            callback, fsm_state, chat_session=logged_in_session, wallet_service=wallet_service
        )

        assert logged_in_session.transfer.type == TransferType.WALLET
        assert await fsm_state.get_state() == TransferStates.selecting_network.state
        edit = callback.message.edit_text.await_args
        assert edit.args[0] == NETWORK_PROMPT
        buttons = [row[0].callback_data for row in edit.kwargs["reply_markup"].inline_keyboard]
        assert buttons == [f"{Callbacks.NETWORK_PREFIX}137", f"{Callbacks.NETWORK_PREFIX}8453"]

    @pytest.mark.asyncio
    async def test_wallet_method_without_wallets(
        self, make_callback, fsm_state, logged_in_session, wallet_service
    ):
        wallet_service.get_wallets.return_value = []
        callback = make_callback(Callbacks.WITHDRAW_WALLET)

        await callback_wallet_withdraw(
            callback, fsm_state, chat_session=logged_in_session, wallet_service=wallet_service
        )

        assert sent_texts(callback.message) == [NO_WALLETS_FOR_WITHDRAW]
        assert logged_in_session.transfer.type is None
        assert await fsm_state.get_state() is None

    @pytest.mark.asyncio
    async def test_network_selected(self, make_callback, fsm_state, logged_in_session):
        logged_in_session.transfer.type = TransferType.WALLET
        callback = make_callback(f"{Callbacks.NETWORK_PREFIX}137")

        await callback_network_selected(callback, fsm_state, chat_session=logged_in_session)

        assert logged_in_session.transfer.network == "137"
        assert await fsm_state.get_state() == TransferStates.waiting_for_address.state
        assert sent_texts(callback.message)[0].endswith(WALLET_ADDRESS_PROMPT)

    @pytest.mark.asyncio
    async def test_network_without_wallet_flow(self, make_callback, fsm_state, logged_in_session):
        """A network button from an abandoned flow resets instead of continuing."""
        await fsm_state.set_state(TransferStates.selecting_network)
        callback = make_callback(f"{Callbacks.NETWORK_PREFIX}137")

        await callback_network_selected(callback, fsm_state, chat_session=logged_in_session)

        assert sent_texts(callback.message) == [TRANSFER_STATE_INVALID]
        assert logged_in_session.transfer.network is None
        assert await fsm_state.get_state() is None

    @pytest.mark.asyncio
    async def test_invalid_address(self, make_message, fsm_state, logged_in_session):
        await fsm_state.set_state(TransferStates.waiting_for_address)
        message = make_message("not an address")

        await process_wallet_address(message, fsm_state, chat_session=logged_in_session)

        assert sent_texts(message) == [INVALID_ADDRESS]
        assert await fsm_state.get_state() == TransferStates.waiting_for_address.state

    @pytest.mark.asyncio
    async def test_valid_address(self, make_message, fsm_state, logged_in_session):
        logged_in_session.transfer.type = TransferType.WALLET
        logged_in_session.transfer.network = "137"
        message = make_message("0x742d35Cc6634C0532925a3b844Bc9e7595f0bEb0")

        await process_wallet_address(message, fsm_state, chat_session=logged_in_session)

        assert logged_in_session.transfer.recipient == "0x742d35Cc6634C0532925a3b844Bc9e7595f0bEb0"
        assert await fsm_state.get_state() == TransferStates.waiting_for_amount.state
        assert sent_texts(message) == [WITHDRAW_AMOUNT_PROMPT]


class TestConfirmation:
    """Test amount entry and confirmation."""

    @pytest.mark.asyncio
    async def test_invalid_amount(self, make_message, fsm_state, logged_in_session, transfer_service):
        logged_in_session.transfer.type = TransferType.EMAIL
        message = make_message("ten")

        await process_amount(
            message, fsm_state, chat_session=logged_in_session, transfer_service=transfer_service
        )

        assert sent_texts(message) == [INVALID_AMOUNT]
        assert logged_in_session.transfer.amount is None

    @pytest.mark.asyncio
    async def test_confirmation_without_fee_quote(
        self, make_message, fsm_state, logged_in_session, transfer_service, mock_api
    ):
        """A failing fee quote still shows the confirmation."""
        mock_api.get.side_effect = ApiServerError("down", status=503)
        logged_in_session.transfer.type = TransferType.EMAIL
        logged_in_session.transfer.recipient = "bob@example.com"
        message = make_message("10")

        await process_amount(
            message, fsm_state, chat_session=logged_in_session, transfer_service=transfer_service
        )

        assert logged_in_session.transfer.amount == "10"
        assert await fsm_state.get_state() == TransferStates.waiting_for_confirmation.state
        assert "Confirm Transfer" in sent_texts(message)[0]

    @pytest.mark.asyncio
    async def test_confirm_success_clears_flow(
        self, make_callback, fsm_state, logged_in_session, transfer_service, mock_api
    ):
        mock_api.post.side_effect = [{"isEligible": True}, {"id": "t1"}]
        logged_in_session.transfer.type = TransferType.EMAIL
        logged_in_session.transfer.recipient = "bob@example.com"
        logged_in_session.transfer.amount = "10"
        await fsm_state.set_state(TransferStates.waiting_for_confirmation)
        callback = make_callback(Callbacks.TRANSFER_CONFIRM)

        await callback_confirm_transfer(
            callback, fsm_state, chat_session=logged_in_session, transfer_service=transfer_service
        )

        callback.message.edit_text.assert_awaited_once_with(TRANSFER_SUCCESS)
        assert logged_in_session.transfer.is_empty
        assert await fsm_state.get_state() is None

    @pytest.mark.asyncio
    async def test_confirm_ineligible_clears_flow(
        self, make_callback, fsm_state, logged_in_session, transfer_service
    ):
        transfer_service.send_to_email = AsyncMock(
            side_effect=RecipientNotEligibleError("Recipient has no wallet")
        )
        logged_in_session.transfer.type = TransferType.EMAIL
        logged_in_session.transfer.recipient = "bob@example.com"
        logged_in_session.transfer.amount = "10"
        callback = make_callback(Callbacks.TRANSFER_CONFIRM)

        await callback_confirm_transfer(
            callback, fsm_state, chat_session=logged_in_session, transfer_service=transfer_service
        )

        text = callback.message.edit_text.await_args.args[0]
        assert "Recipient has no wallet" in text
        assert logged_in_session.transfer.is_empty

    @pytest.mark.asyncio
    async def test_confirm_api_error_clears_flow(
        self, make_callback, fsm_state, logged_in_session, transfer_service
    ):
        transfer_service.withdraw_to_bank = AsyncMock(side_effect=ApiServerError("down", status=502))
        logged_in_session.transfer.type = TransferType.BANK
        logged_in_session.transfer.amount = "10"
        callback = make_callback(Callbacks.TRANSFER_CONFIRM)

        await callback_confirm_transfer(
            callback, fsm_state, chat_session=logged_in_session, transfer_service=transfer_service
        )

        callback.message.edit_text.assert_awaited_once_with(SERVER_ERROR)
        assert logged_in_session.transfer.is_empty

    @pytest.mark.asyncio
    async def test_cancel(self, make_callback, fsm_state, logged_in_session):
        logged_in_session.transfer.type = TransferType.WALLET
        await fsm_state.set_state(TransferStates.waiting_for_confirmation)
        callback = make_callback(Callbacks.TRANSFER_CANCEL)

        await callback_cancel_transfer(callback, fsm_state, chat_session=logged_in_session)

        callback.message.edit_text.assert_awaited_once_with(TRANSFER_CANCELLED)
        assert logged_in_session.transfer.is_empty
        assert await fsm_state.get_state() is None


class TestDepositAmount:
    """Test the deposit amount step."""

    @pytest.mark.asyncio
    async def test_below_minimum(self, make_message, fsm_state, logged_in_session, transfer_service):
        logged_in_session.deposit.chain_id = "137"
        message = make_message("0.5")

        await process_deposit_amount(
            message, fsm_state, chat_session=logged_in_session, transfer_service=transfer_service
        )

        assert sent_texts(message) == [DEPOSIT_MIN_AMOUNT]

    @pytest.mark.asyncio
    async def test_deposit_created(
        self, make_message, fsm_state, logged_in_session, transfer_service
    ):
        transfer_service.create_deposit = AsyncMock(
            return_value=Deposit(status="pending", payment_url="https://pay.example.com/x")
        )
        logged_in_session.deposit.chain_id = "137"
        await fsm_state.set_state(DepositStates.entering_amount)
        message = make_message("25")

        await process_deposit_amount(
            message, fsm_state, chat_session=logged_in_session, transfer_service=transfer_service
        )

        transfer_service.create_deposit.assert_awaited_once_with(
            logged_in_session.credentials, "25", "137"
        )
        final = sent_texts(message)[-1]
        assert "Deposit Transaction Created" in final
        assert "https://pay.example.com/x" in final
        assert logged_in_session.deposit.chain_id is None
        assert await fsm_state.get_state() is None

    @pytest.mark.asyncio
    async def test_validation_error_reshows_chains(
        self, make_message, fsm_state, logged_in_session, transfer_service
    ):
        transfer_service.create_deposit = AsyncMock(
            side_effect=ApiClientError(
                "invalid",
                status=422,
                payload={
                    "message": [
                        {"property": "amount", "constraints": {"max": "amount too large"}}
                    ]
                },
            )
        )
        logged_in_session.deposit.chain_id = "137"
        message = make_message("25")

        await process_deposit_amount(
            message, fsm_state, chat_session=logged_in_session, transfer_service=transfer_service
        )

        texts = sent_texts(message)
        assert "Validation error: amount: amount too large" in texts[-2]
        assert texts[-1] == DEPOSIT_CHAIN_PROMPT
        assert await fsm_state.get_state() == DepositStates.selecting_chain.state
        assert logged_in_session.deposit.chain_id is None
