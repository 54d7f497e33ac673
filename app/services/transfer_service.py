"""
Transfer service.

Sending, withdrawing and depositing funds plus transfer history.

Business rules enforced here:
- transfers require approved KYC, a default wallet and a positive balance
- email recipients are checked for eligibility before any money moves
"""

import re
from decimal import Decimal
from typing import Any
from urllib.parse import quote

from loguru import logger

from app.config.constants import (
    DEPOSIT_SOURCE_OF_FUNDS,
    KYC_APPROVED,
    MIN_DEPOSIT_AMOUNT,
    SUPPORTED_DEPOSIT_CHAINS,
)
from app.models.records import (
    Deposit,
    FeeInfo,
    RecipientEligibility,
    Transfer,
    TransferPage,
    unwrap,
)
from app.models.session import ChatSession
from app.services.api_client import ApiClient
from app.services.auth_service import AuthService
from app.services.token_store import TokenStore
from app.services.wallet_service import WalletService
from app.utils.exceptions import (
    ApiClientError,
    ApiError,
    RecipientNotEligibleError,
    TransferPreconditionError,
)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
AMOUNT_PATTERN = re.compile(r"^\d+(\.\d{1,6})?$")
ADDRESS_PATTERN = re.compile(r"^[A-Za-z0-9]{20,128}$")


def is_valid_email(value: str) -> bool:
    return bool(EMAIL_PATTERN.match(value or ""))


def is_valid_amount(value: str) -> bool:
    """Plain decimal with at most 6 fractional digits."""
    return bool(AMOUNT_PATTERN.match(value or ""))


def is_valid_address(value: str) -> bool:
    """Alphanumeric address (EVM hex or base58), no whitespace."""
    return bool(ADDRESS_PATTERN.match(value or ""))


def format_validation_errors(payload: Any) -> str | None:
    """
    Render a 422 payload as ``field: constraint, constraint; field: ...``.

    Args:
        payload: Error payload with a ``message`` list of
            ``{"property": ..., "constraints": {...}}`` items

    Returns:
        Summary string, or None if the payload has no structured errors
    """
    if not isinstance(payload, dict):
        return None
    messages = payload.get("message")
    if not isinstance(messages, list):
        return None

    parts = []
    for item in messages:
        if isinstance(item, dict):
            constraints = item.get("constraints") or {}
            text = ", ".join(str(v) for v in constraints.values())
            parts.append(f"{item.get('property', 'unknown')}: {text}")
        else:
            parts.append(str(item))
    return "; ".join(parts) if parts else None


class TransferService:
    """Transfer API operations."""

    def __init__(
        self,
        api: ApiClient,
        auth_service: AuthService,
        wallet_service: WalletService,
    ) -> None:
        self.api = api
        self.auth_service = auth_service
        self.wallet_service = wallet_service

    # Preconditions

    async def can_perform_transfers(self, session: ChatSession) -> None:
        """
        Check that the account may move funds.

        Raises:
            TransferPreconditionError: With the first failing reason
        """
        if not session.is_authenticated:
            raise TransferPreconditionError("You need to login first.")

        credentials = session.credentials
        if not await self.auth_service.is_kyc_approved(credentials):
            raise TransferPreconditionError(
                "Your KYC is not approved. You cannot perform transfers "
                "until your KYC is approved.\n\n"
                "Please complete your KYC on the Copperx platform."
            )

        default_wallet = await self.wallet_service.get_default_wallet(credentials)
        if default_wallet is None or not default_wallet.address:
            raise TransferPreconditionError(
                "You don't have a default wallet set up. "
                "Please set up a wallet first."
            )

        balance = await self.wallet_service.get_default_balance(credentials)
        if balance <= 0:
            raise TransferPreconditionError(
                "Your wallet doesn't have sufficient balance to perform transfers."
            )

    # History

    async def get_transfers(
        self,
        credentials: TokenStore,
        page: int = 1,
        limit: int = 10,
    ) -> TransferPage:
        payload = await self.api.get(
            "/transfers", credentials, params={"page": page, "limit": limit}
        )
        return TransferPage.from_payload(payload, page=page, limit=limit)

    async def get_transfer(self, credentials: TokenStore, transfer_id: str) -> Transfer | None:
        payload = unwrap(await self.api.get(f"/transfers/{quote(transfer_id)}", credentials))
        if not isinstance(payload, dict) or not payload:
            return None
        return Transfer.from_payload(payload)

    async def get_fee_info(
        self,
        credentials: TokenStore,
        transfer_type: str,
        amount: str,
        network: str | None = None,
    ) -> FeeInfo:
        params = {"type": transfer_type, "amount": amount}
        if network:
            params["network"] = network
        payload = await self.api.get("/transfers/fee-info", credentials, params=params)
        return FeeInfo.from_payload(payload)

    # Eligibility

    async def check_recipient_eligibility(
        self,
        credentials: TokenStore,
        email: str,
    ) -> RecipientEligibility:
        """
        Decide whether ``email`` can receive funds.

        Tries the dedicated eligibility endpoint first. When that route is
        missing (404) the user lookup endpoint is consulted. When the lookup
        route is missing too, or any unexpected error occurs, the recipient is
        treated as eligible and a warning is logged.
        """
        try:
            payload = await self.api.post(
                "/transfers/check-recipient", credentials, {"email": email}
            )
            return RecipientEligibility.from_payload(payload)
        except ApiClientError as e:
            if e.status != 404:
                logger.warning(
                    f"Eligibility check for {email} failed ({e}), allowing transfer"
                )
                return RecipientEligibility(is_eligible=True)
        except ApiError as e:
            logger.warning(
                f"Eligibility check for {email} failed ({e}), allowing transfer"
            )
            return RecipientEligibility(is_eligible=True)

        logger.warning("Eligibility endpoint unavailable, falling back to user lookup")
        return await self._check_recipient_by_lookup(credentials, email)

    async def _check_recipient_by_lookup(
        self,
        credentials: TokenStore,
        email: str,
    ) -> RecipientEligibility:
        try:
            payload = unwrap(
                await self.api.get(f"/users/by-email/{quote(email)}", credentials)
            )
        except ApiClientError as e:
            if e.status == 404 and "Cannot GET" in str(e.server_message or ""):
                logger.warning(
                    f"Unable to verify eligibility for recipient {email}, "
                    "allowing transfer by default"
                )
                return RecipientEligibility(is_eligible=True)
            if e.status in (400, 404):
                return RecipientEligibility(
                    is_eligible=False,
                    reason="Recipient is not registered with Copperx",
                )
            logger.error(f"Error checking user status for {email}: {e}")
            return RecipientEligibility(is_eligible=True)
        except ApiError as e:
            logger.error(f"Error checking user status for {email}: {e}")
            return RecipientEligibility(is_eligible=True)

        user = payload if isinstance(payload, dict) else {}
        if not user.get("hasWallets"):
            return RecipientEligibility(
                is_eligible=False,
                reason="Recipient does not have any wallets set up",
            )
        if str(user.get("kycStatus") or "").lower() != KYC_APPROVED:
            return RecipientEligibility(
                is_eligible=False,
                reason="Recipient has not completed KYC verification",
            )
        return RecipientEligibility(is_eligible=True)

    # Sending

    async def send_to_email(
        self,
        credentials: TokenStore,
        email: str,
        amount: str,
        message: str | None = None,
    ) -> Any:
        """
        Send funds to an email recipient.

        Raises:
            RecipientNotEligibleError: Recipient can't receive funds
        """
        eligibility = await self.check_recipient_eligibility(credentials, email)
        if not eligibility.is_eligible:
            raise RecipientNotEligibleError(
                eligibility.reason or "Recipient is not eligible to receive funds"
            )

        payload: dict[str, Any] = {"email": email, "amount": amount}
        if message:
            payload["message"] = message
        result = await self.api.post("/transfers/send", credentials, payload)
        logger.info(f"Sent {amount} to {email}")
        return result

    async def send_to_wallet(
        self,
        credentials: TokenStore,
        address: str,
        amount: str,
        network: str,
    ) -> Any:
        result = await self.api.post(
            "/transfers/wallet-withdraw",
            credentials,
            {"address": address, "amount": amount, "network": network},
        )
        logger.info(f"Withdrew {amount} to {address} on {network}")
        return result

    async def withdraw_to_bank(
        self,
        credentials: TokenStore,
        amount: str,
        bank_account_id: str | None = None,
    ) -> Any:
        payload: dict[str, Any] = {"amount": amount}
        if bank_account_id:
            payload["bankAccountId"] = bank_account_id
        result = await self.api.post("/transfers/offramp", credentials, payload)
        logger.info(f"Bank withdrawal of {amount} submitted")
        return result

    async def send_batch(
        self,
        credentials: TokenStore,
        transfers: list[dict[str, str]],
    ) -> Any:
        """
        Send funds to several email recipients in one call.

        Args:
            credentials: Session token store
            transfers: Items with ``email``, ``amount`` and optional ``message``

        Raises:
            RecipientNotEligibleError: First ineligible recipient
        """
        for item in transfers:
            eligibility = await self.check_recipient_eligibility(
                credentials, item["email"]
            )
            if not eligibility.is_eligible:
                raise RecipientNotEligibleError(
                    f"Recipient {item['email']} is not eligible: {eligibility.reason}"
                )

        return await self.api.post(
            "/transfers/send-batch", credentials, {"transfers": transfers}
        )

    # Deposits

    async def get_deposit_info(self, credentials: TokenStore, network: str) -> dict[str, Any]:
        payload = unwrap(
            await self.api.get(
                "/transfers/deposit-info", credentials, params={"network": network}
            )
        )
        return payload if isinstance(payload, dict) else {}

    async def create_deposit(
        self,
        credentials: TokenStore,
        amount: str,
        chain_id: str,
    ) -> Deposit:
        """
        Create a deposit transaction.

        When the response carries no deposit address, ``deposit-info`` is
        queried for it.

        Raises:
            ValueError: Amount below minimum or unsupported chain
        """
        if not is_valid_amount(amount) or Decimal(amount) < MIN_DEPOSIT_AMOUNT:
            raise ValueError(f"Minimum deposit amount is {MIN_DEPOSIT_AMOUNT}")
        if chain_id not in SUPPORTED_DEPOSIT_CHAINS:
            raise ValueError(f"Unsupported deposit chain: {chain_id}")

        payload = await self.api.post(
            "/transfers/deposit",
            credentials,
            {
                "amount": amount,
                "depositChainId": int(chain_id),
                "sourceOfFunds": DEPOSIT_SOURCE_OF_FUNDS,
            },
        )
        deposit = Deposit.from_payload(payload)
        logger.info(f"Deposit created: amount={amount}, chain={chain_id}, status={deposit.status}")

        if not deposit.deposit_address:
            try:
                info = await self.get_deposit_info(credentials, chain_id)
            except ApiError as e:
                logger.warning(f"Deposit info unavailable for chain {chain_id}: {e}")
            else:
                address = info.get("address") or info.get("walletAddress")
                if address:
                    deposit.deposit_address = str(address)

        return deposit
