"""
Wallet service.

Wallet listing, balances and default wallet management.
"""

from decimal import Decimal

from loguru import logger

from app.models.records import Wallet, WalletBalance, to_decimal, unwrap, unwrap_list
from app.services.api_client import ApiClient
from app.services.token_store import TokenStore
from app.utils.exceptions import ApiClientError


class WalletService:
    """Wallet API operations."""

    def __init__(self, api: ApiClient) -> None:
        self.api = api

    async def get_wallets(self, credentials: TokenStore) -> list[Wallet]:
        payload = await self.api.get("/wallets", credentials)
        return [
            Wallet.from_payload(item)
            for item in unwrap_list(payload)
            if isinstance(item, dict)
        ]

    async def get_balances(self, credentials: TokenStore) -> list[WalletBalance]:
        payload = await self.api.get("/wallets/balances", credentials)
        return [
            WalletBalance.from_payload(item)
            for item in unwrap_list(payload)
            if isinstance(item, dict)
        ]

    async def get_default_wallet(self, credentials: TokenStore) -> Wallet | None:
        """Return the default wallet, or None when none is set."""
        try:
            payload = unwrap(await self.api.get("/wallets/default", credentials))
        except ApiClientError as e:
            if e.status == 404:
                return None
            raise
        if not isinstance(payload, dict) or not payload:
            return None
        return Wallet.from_payload(payload)

    async def set_default_wallet(self, credentials: TokenStore, wallet_id: str) -> None:
        await self.api.post("/wallets/default", credentials, {"walletId": wallet_id})
        logger.info(f"Default wallet set to {wallet_id}")

    async def get_default_balance(self, credentials: TokenStore) -> Decimal:
        """Balance of the default wallet."""
        payload = unwrap(await self.api.get("/wallets/balance", credentials))
        if isinstance(payload, dict):
            return to_decimal(payload.get("balance"))
        return Decimal("0")

    async def generate_wallet(self, credentials: TokenStore, network: str) -> Wallet:
        """
        Create a wallet on the given network.

        Args:
            credentials: Session token store
            network: Chain id, e.g. ``"137"``

        Returns:
            The created wallet
        """
        payload = unwrap(await self.api.post("/wallets", credentials, {"network": network}))
        wallet = Wallet.from_payload(payload if isinstance(payload, dict) else {})
        if not wallet.network:
            wallet.network = network
        logger.info(f"Generated wallet {wallet.id} on network {network}")
        return wallet

    @staticmethod
    def distinct_networks(wallets: list[Wallet]) -> list[str]:
        """Networks across ``wallets`` in first-seen order."""
        networks: list[str] = []
        for wallet in wallets:
            if wallet.network and wallet.network not in networks:
                networks.append(wallet.network)
        return networks
