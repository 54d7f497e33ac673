"""
Push notification formatting.

Turns Pusher ``deposit``/``withdrawal`` event payloads into chat messages.
"""

from typing import Any

from app.config.constants import DEFAULT_CURRENCY, EXPLORER_TX_URLS
from app.models.records import to_decimal
from app.utils.datetime_utils import format_timestamp
from bot.utils.formatters import escape, format_amount, format_network_name

EVENT_TITLES = {
    "deposit": "💰 <b>New Deposit Received!</b>",
    "withdrawal": "📤 <b>Withdrawal Processed</b>",
}

EVENT_FALLBACKS = {
    "deposit": "A new deposit has been received in your wallet.",
    "withdrawal": "Your withdrawal has been processed.",
}

BALANCE_HINT = "Use /balance to check your updated wallet balance."


def explorer_url(network: str | None, tx_hash: str) -> str | None:
    """Block explorer link for a transaction, if the chain is known."""
    base = EXPLORER_TX_URLS.get(str(network)) if network is not None else None
    return f"{base}{tx_hash}" if base else None


def _decimals(value: Any) -> int:
    try:
        decimals = int(value)
    except (TypeError, ValueError):
        return 2
    return decimals if decimals > 0 else 2


def format_notification(event_name: str, data: dict[str, Any]) -> str:
    """
    Build the message for one notification event.

    Args:
        event_name: ``deposit`` or ``withdrawal``
        data: Decoded event payload; details live under ``transaction``

    Returns:
        HTML message ending with a /balance hint
    """
    lines = [EVENT_TITLES.get(event_name, "🔔 <b>Notification</b>"), ""]

    tx = data.get("transaction")
    if isinstance(tx, dict) and tx:
        if tx.get("amount") is not None:
            amount = format_amount(to_decimal(tx["amount"]), _decimals(tx.get("decimals")))
            symbol = tx.get("symbol") or DEFAULT_CURRENCY
            lines.append(f"<b>Amount:</b> {amount} {escape(symbol)}")

        network = tx.get("network")
        if network:
            lines.append(f"<b>Network:</b> {escape(format_network_name(str(network)))}")

        if event_name == "withdrawal" and tx.get("recipient"):
            lines.append(f"<b>Recipient:</b> {escape(tx['recipient'])}")

        tx_hash = tx.get("hash")
        if tx_hash:
            url = explorer_url(network, str(tx_hash))
            if url:
                lines.append(f'<b>Transaction:</b> <a href="{escape(url)}">View on Explorer</a>')
            else:
                lines.append(f"<b>Transaction Hash:</b> <code>{escape(tx_hash)}</code>")

        status = tx.get("status")
        if status:
            emoji = "✅" if str(status).lower() == "completed" else "⏳"
            lines.append(f"<b>Status:</b> {emoji} {escape(status)}")

        created_at = tx.get("createdAt") or tx.get("timestamp")
        if created_at:
            lines.append(f"<b>Time:</b> {escape(format_timestamp(str(created_at)))}")
    else:
        lines.append(EVENT_FALLBACKS.get(event_name, "You have a new account update."))

    lines += ["", BALANCE_HINT]
    return "\n".join(lines)
