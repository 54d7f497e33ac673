"""
Normalized API records.

The payout API is inconsistent about field names and envelopes (``data``
wrappers, ``address`` vs ``walletAddress``, balances nested per wallet).
Every payload is converted here once so handlers work with one shape.
"""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any

from app.config.constants import DEFAULT_CURRENCY, KYC_APPROVED


def unwrap(payload: Any) -> Any:
    """Return ``payload["data"]`` when the response uses a data envelope."""
    if isinstance(payload, dict) and "data" in payload:
        return payload["data"]
    return payload


def unwrap_list(payload: Any) -> list[Any]:
    """Return a list payload, tolerating a ``data`` envelope or ``None``."""
    data = unwrap(payload)
    if isinstance(data, list):
        return data
    return []


def to_decimal(value: Any) -> Decimal:
    """Convert an API amount to Decimal (0 for missing or malformed values)."""
    if value is None or isinstance(value, bool):
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return Decimal("0")


def _str_or_none(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


@dataclass
class TokenBalance:
    """Balance of one token inside a wallet."""

    symbol: str = DEFAULT_CURRENCY
    balance: Decimal = Decimal("0")
    decimals: int | None = None
    address: str | None = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "TokenBalance":
        return cls(
            symbol=payload.get("symbol") or DEFAULT_CURRENCY,
            balance=to_decimal(payload.get("balance")),
            decimals=payload.get("decimals"),
            address=_str_or_none(payload.get("address")),
        )


@dataclass
class Wallet:
    """User wallet."""

    id: str
    network: str = ""
    name: str | None = None
    address: str | None = None
    is_default: bool = False
    balance: Decimal | None = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "Wallet":
        """
        Build a wallet from any of the wallet payload shapes.

        The address is taken from ``address``, then ``walletAddress``, then
        the first nested balance entry.
        """
        address = payload.get("address") or payload.get("walletAddress")
        if not address:
            balances = payload.get("balances") or []
            if balances and isinstance(balances[0], dict):
                address = balances[0].get("address")

        balance = payload.get("balance")
        return cls(
            id=str(payload.get("id") or payload.get("walletId") or ""),
            network=str(payload.get("network") or payload.get("chainId") or ""),
            name=payload.get("name"),
            address=_str_or_none(address),
            is_default=bool(payload.get("isDefault", False)),
            balance=to_decimal(balance) if balance is not None else None,
        )

    def display_name(self, index: int) -> str:
        """Wallet name, or ``Wallet <n>`` for 0-based ``index``."""
        return self.name or f"Wallet {index + 1}"


@dataclass
class WalletBalance:
    """Balances of one wallet, as returned by ``/wallets/balances``."""

    wallet_id: str
    network: str = ""
    is_default: bool = False
    balances: list[TokenBalance] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "WalletBalance":
        raw_balances = payload.get("balances")
        if isinstance(raw_balances, list) and raw_balances:
            balances = [
                TokenBalance.from_payload(item)
                for item in raw_balances
                if isinstance(item, dict)
            ]
        elif payload.get("balance") is not None:
            # Flat shape: balance directly on the wallet
            balances = [
                TokenBalance(
                    symbol=payload.get("symbol") or DEFAULT_CURRENCY,
                    balance=to_decimal(payload.get("balance")),
                )
            ]
        else:
            balances = []

        return cls(
            wallet_id=str(payload.get("walletId") or payload.get("id") or ""),
            network=str(payload.get("network") or ""),
            is_default=bool(payload.get("isDefault", False)),
            balances=balances,
        )

    @property
    def total(self) -> Decimal:
        return sum((b.balance for b in self.balances), Decimal("0"))


@dataclass
class Transfer:
    """Transfer as shown in history and detail views."""

    id: str
    type: str = "Unknown"
    status: str = "Unknown"
    amount: Decimal | None = None
    currency: str = DEFAULT_CURRENCY
    fee: Decimal | None = None
    fee_currency: str = DEFAULT_CURRENCY
    direction: str | None = None
    recipient: str | None = None
    sender: str | None = None
    network: str | None = None
    tx_hash: str | None = None
    created_at: str | None = None
    source: dict[str, Any] | None = None
    destination: dict[str, Any] | None = None
    transactions: list[dict[str, Any]] = field(default_factory=list)
    raw: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "Transfer":
        transactions = [
            tx for tx in payload.get("transactions") or [] if isinstance(tx, dict)
        ]
        tx_hash = payload.get("txHash") or payload.get("transactionHash")
        if not tx_hash and transactions:
            tx_hash = transactions[0].get("transactionHash")

        destination = payload.get("destinationAccount")
        recipient = payload.get("recipient")
        if not recipient and isinstance(destination, dict):
            recipient = destination.get("payeeEmail") or destination.get(
                "walletAddress"
            )

        amount = payload.get("amount")
        fee = payload.get("totalFee", payload.get("fee"))
        return cls(
            id=str(payload.get("id") or ""),
            type=payload.get("type") or "Unknown",
            status=payload.get("status") or "Unknown",
            amount=to_decimal(amount) if amount is not None else None,
            currency=payload.get("currency") or DEFAULT_CURRENCY,
            fee=to_decimal(fee) if fee is not None else None,
            fee_currency=payload.get("feeCurrency") or DEFAULT_CURRENCY,
            direction=payload.get("direction"),
            recipient=_str_or_none(recipient),
            sender=_str_or_none(payload.get("sender")),
            network=_str_or_none(payload.get("network")),
            tx_hash=_str_or_none(tx_hash),
            created_at=payload.get("createdAt"),
            source=payload.get("sourceAccount"),
            destination=destination if isinstance(destination, dict) else None,
            transactions=transactions,
            raw=payload,
        )

    @property
    def is_outgoing(self) -> bool:
        return (self.direction or "").upper() == "OUTGOING"


@dataclass
class TransferPage:
    """One page of transfer history."""

    items: list[Transfer]
    page: int
    total_pages: int
    total_items: int

    @classmethod
    def from_payload(cls, payload: Any, page: int, limit: int) -> "TransferPage":
        items = [
            Transfer.from_payload(item)
            for item in unwrap_list(payload)
            if isinstance(item, dict)
        ]
        pagination: dict[str, Any] = {}
        if isinstance(payload, dict):
            pagination = payload.get("pagination") or {}
            # Some responses put paging fields on the envelope itself
            if not pagination and "total" in payload:
                total = int(payload.get("total") or 0)
                pagination = {
                    "totalItems": total,
                    "totalPages": max(1, -(-total // limit)) if limit else 1,
                }

        total_items = int(pagination.get("totalItems") or len(items))
        total_pages = int(pagination.get("totalPages") or 1)
        return cls(
            items=items,
            page=page,
            total_pages=max(total_pages, 1),
            total_items=total_items,
        )


@dataclass
class KycRecord:
    """Latest KYC submission of the account."""

    status: str
    detail: dict[str, Any] = field(default_factory=dict)
    status_updates: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "KycRecord":
        detail = payload.get("kycDetail")
        updates = payload.get("statusUpdates")
        return cls(
            status=str(payload.get("status") or "unknown"),
            detail=detail if isinstance(detail, dict) else {},
            status_updates=updates if isinstance(updates, dict) else {},
        )

    @property
    def is_approved(self) -> bool:
        return self.status.lower() == KYC_APPROVED


@dataclass
class UserProfile:
    """Authenticated account as returned by ``/auth/me``."""

    id: str
    email: str
    first_name: str | None = None
    last_name: str | None = None
    organization_id: str | None = None
    status: str | None = None
    role: str | None = None
    wallet_address: str | None = None

    @classmethod
    def from_payload(cls, payload: Any) -> "UserProfile":
        data = unwrap(payload) or {}
        return cls(
            id=str(data.get("id") or ""),
            email=data.get("email") or "",
            first_name=data.get("firstName"),
            last_name=data.get("lastName"),
            organization_id=_str_or_none(data.get("organizationId")),
            status=data.get("status"),
            role=data.get("role"),
            wallet_address=_str_or_none(data.get("walletAddress")),
        )

    @property
    def full_name(self) -> str:
        parts = [p for p in (self.first_name, self.last_name) if p]
        return " ".join(parts) or "Not provided"


@dataclass
class Deposit:
    """Result of creating a deposit."""

    status: str = "Pending"
    payment_url: str | None = None
    deposit_address: str | None = None

    @classmethod
    def from_payload(cls, payload: Any) -> "Deposit":
        data = unwrap(payload) or {}
        address = None
        transactions = data.get("transactions") or []
        if transactions and isinstance(transactions[0], dict):
            account = transactions[0].get("depositAccount") or {}
            address = account.get("walletAddress")
        return cls(
            status=data.get("status") or "Pending",
            payment_url=data.get("paymentUrl"),
            deposit_address=_str_or_none(address),
        )


@dataclass
class FeeInfo:
    """Fee quote for a pending transfer (all fields optional)."""

    fee: str | None = None
    total_amount: str | None = None
    estimated_time: str | None = None

    @classmethod
    def from_payload(cls, payload: Any) -> "FeeInfo":
        data = unwrap(payload) or {}
        if not isinstance(data, dict):
            return cls()
        return cls(
            fee=_str_or_none(data.get("fee")),
            total_amount=_str_or_none(data.get("totalAmount")),
            estimated_time=_str_or_none(data.get("estimatedTime")),
        )


@dataclass
class RecipientEligibility:
    """Whether an email recipient can receive a transfer."""

    is_eligible: bool
    reason: str | None = None

    @classmethod
    def from_payload(cls, payload: Any) -> "RecipientEligibility":
        data = unwrap(payload)
        if not isinstance(data, dict):
            return cls(is_eligible=True)
        return cls(
            is_eligible=bool(data.get("isEligible", True)),
            reason=data.get("reason"),
        )
