"""
Per-chat session state.

One ``ChatSession`` exists per Telegram chat. It carries the logged-in user,
the chat's own bearer token and the scratch data of the multi-step flows.
Which flow is currently waiting for input is tracked by the chat's FSM state.
"""

from dataclasses import dataclass, field
from enum import Enum

from app.config.constants import HISTORY_PAGE_SIZE
from app.services.token_store import TokenStore


class TransferType(str, Enum):
    """Kind of outgoing transfer."""

    EMAIL = "EMAIL"
    WALLET = "WALLET"
    BANK = "BANK"


@dataclass
class UserRecord:
    """Logged-in account."""

    user_id: str
    email: str
    organization_id: str | None = None
    first_name: str | None = None
    last_name: str | None = None


@dataclass
class AuthFlowState:
    """Email OTP login in progress."""

    email: str | None = None
    awaiting_otp: bool = False
    sid: str | None = None


@dataclass
class TransferFlowState:
    """Send/withdraw in progress."""

    type: TransferType | None = None
    recipient: str | None = None
    amount: str | None = None
    network: str | None = None

    def reset(self) -> None:
        self.type = None
        self.recipient = None
        self.amount = None
        self.network = None

    @property
    def is_empty(self) -> bool:
        return (
            self.type is None
            and self.recipient is None
            and self.amount is None
            and self.network is None
        )


@dataclass
class DepositFlowState:
    """Deposit creation in progress."""

    network: str | None = None
    chain_id: str | None = None
    amount: str | None = None

    def reset(self) -> None:
        self.network = None
        self.chain_id = None
        self.amount = None


@dataclass
class HistoryPagingState:
    """Current history page."""

    page: int = 1
    page_size: int = HISTORY_PAGE_SIZE
    total_pages: int | None = None

    def previous(self) -> None:
        """Go one page back, never below page 1."""
        self.page = max(1, self.page - 1)

    def next(self) -> None:
        """Go one page forward, never past the known last page."""
        if self.total_pages is not None and self.page >= self.total_pages:
            self.page = max(1, self.total_pages)
            return
        self.page += 1


@dataclass
class ChatSession:
    """Everything the bot remembers about one chat."""

    chat_id: int
    user: UserRecord | None = None
    credentials: TokenStore = field(default_factory=TokenStore)
    auth: AuthFlowState | None = None
    transfer: TransferFlowState = field(default_factory=TransferFlowState)
    deposit: DepositFlowState = field(default_factory=DepositFlowState)
    history: HistoryPagingState = field(default_factory=HistoryPagingState)
    wallet_addresses: list[str] = field(default_factory=list)

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None and self.credentials.has_token

    def reset_flows(self) -> None:
        """Drop all in-progress flow data."""
        self.auth = None
        self.transfer.reset()
        self.deposit.reset()

    def logout(self) -> None:
        """Forget the user, the token and every flow."""
        self.user = None
        self.credentials.clear()
        self.reset_flows()
        self.history = HistoryPagingState()
        self.wallet_addresses = []
