"""
Constants for the Copperx payout bot.

Network identifiers, explorer links and fixed API values shared by services
and bot handlers.
"""

from decimal import Decimal

# Token lifecycle
DEFAULT_TOKEN_TTL_SECONDS = 24 * 60 * 60
TOKEN_EXPIRY_BUFFER_SECONDS = 5 * 60

# Chain id -> display name
NETWORK_NAMES: dict[str, str] = {
    "1": "Ethereum",
    "10": "Optimism",
    "56": "BSC",
    "137": "Polygon",
    "8453": "Base",
    "42161": "Arbitrum",
    "43114": "Avalanche",
    "23434": "Blast",
}

# Symbolic network names used by wallet payloads
NETWORK_ALIASES: dict[str, str] = {
    "ETH": "Ethereum",
    "ETHEREUM": "Ethereum",
    "BSC": "Binance Smart Chain",
    "BINANCE": "Binance Smart Chain",
    "POLYGON": "Polygon",
    "ARBITRUM": "Arbitrum",
    "OPTIMISM": "Optimism",
    "AVALANCHE": "Avalanche",
    "AVAX": "Avalanche",
    "SOLANA": "Solana",
    "SOL": "Solana",
}

EXPLORER_TX_URLS: dict[str, str] = {
    "1": "https://etherscan.io/tx/",
    "137": "https://polygonscan.com/tx/",
    "56": "https://bscscan.com/tx/",
    "42161": "https://arbiscan.io/tx/",
    "8453": "https://basescan.org/tx/",
    "23434": "https://blastscan.io/tx/",
}

# Deposit creation
SUPPORTED_DEPOSIT_CHAINS: tuple[str, ...] = (
    "137",
    "42161",
    "1",
    "8453",
    "10",
    "56",
    "43114",
    "23434",
)
DEPOSIT_SOURCE_OF_FUNDS = "savings"
MIN_DEPOSIT_AMOUNT = Decimal("1")

# Wallet generation offered when the user has no wallet yet
WALLET_GENERATION_CHAINS: tuple[str, ...] = ("137", "42161")

DEFAULT_CURRENCY = "USDC"
KYC_APPROVED = "approved"

# History
HISTORY_PAGE_SIZE = 5

# Push notifications
PUSHER_CHANNEL_PREFIX = "private-org-"
NOTIFICATION_EVENTS: tuple[str, ...] = ("deposit", "withdrawal")

# Telegram API call ceiling for out-of-band messages
TELEGRAM_TIMEOUT = 10.0
