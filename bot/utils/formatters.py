"""
Formatters
Utility functions for formatting data
"""

import html
from decimal import Decimal

from app.config.constants import DEFAULT_CURRENCY, NETWORK_ALIASES, NETWORK_NAMES
from app.models.records import (
    FeeInfo,
    KycRecord,
    Transfer,
    TransferPage,
    UserProfile,
    Wallet,
    WalletBalance,
)
from app.models.session import TransferFlowState, TransferType
from app.utils.datetime_utils import format_timestamp

STATUS_EMOJI = {
    "COMPLETED": "✅",
    "SUCCESS": "✅",
    "PENDING": "⏳",
    "INITIATED": "⏳",
    "FAILED": "❌",
    "PROCESSING": "🔄",
}


def escape(value: object) -> str:
    """HTML-escape any value for messages sent with parse_mode=HTML."""
    return html.escape(str(value))


def format_network_name(network: str | None) -> str:
    """
    Human-readable network name.

    Accepts chain ids ("137") and symbolic names ("POLYGON"). Unknown values
    are title-cased word by word.
    """
    if not network:
        return "Unknown"
    if network in NETWORK_NAMES:
        return NETWORK_NAMES[network]
    alias = NETWORK_ALIASES.get(network.upper())
    if alias:
        return alias
    return " ".join(word.capitalize() for word in network.split("_"))


def format_amount(amount: Decimal | None, places: int = 2) -> str:
    """
    Format amount with fixed decimal places

    Args:
        amount: Amount to format

    Returns:
        Formatted string (e.g., "123.45")
    """
    if amount is None:
        return "0"
    quantum = Decimal(1).scaleb(-places)
    return str(amount.quantize(quantum))


def truncate_address(address: str | None) -> str:
    """
    Shorten long addresses for display

    Returns:
        "0x12345678...9abcdef012" style string
    """
    if not address:
        return "Not available"
    if len(address) <= 20:
        return address
    return f"{address[:10]}...{address[-10:]}"


def status_emoji(status: str | None) -> str:
    return STATUS_EMOJI.get((status or "").upper(), "ℹ️")


def format_wallets(wallets: list[Wallet]) -> str:
    """Wallet list message."""
    lines = ["🏦 <b>Your Wallets</b>", ""]
    for index, wallet in enumerate(wallets):
        default = " (Default)" if wallet.is_default else ""
        lines.append(f"<b>{index + 1}. {escape(wallet.display_name(index))}{default}</b>")
        lines.append(f"🌐 Network: {escape(format_network_name(wallet.network))}")
        lines.append(f"📝 Address: <code>{escape(wallet.address or 'Not available')}</code>")
        lines.append("")
    lines.append("Use /setdefault to set a default wallet for transfers.")
    return "\n".join(lines)


def format_balances(balances: list[WalletBalance]) -> str:
    """
    Balances grouped by network with a grand total.

    Args:
        balances: Per-wallet balances

    Returns:
        HTML message
    """
    lines = ["💰 <b>Your Wallet Balances</b>", ""]
    total = Decimal("0")
    for wallet in balances:
        network = escape(format_network_name(wallet.network))
        default = " (Default)" if wallet.is_default else ""
        if not wallet.balances:
            lines.append(f"<b>{network}</b>{default}: 0.00 {DEFAULT_CURRENCY}")
            continue
        for token in wallet.balances:
            total += token.balance
            lines.append(
                f"<b>{network}</b>{default}: {format_amount(token.balance)} {escape(token.symbol)}"
            )
    lines.append("")
    lines.append(f"<b>Total Balance:</b> {format_amount(total)} {DEFAULT_CURRENCY}")
    lines += [
        "",
        "What would you like to do?",
        "• /deposit - Add funds to your wallet",
        "• /send - Send funds to another user",
        "• /withdraw - Withdraw funds to external wallet",
    ]
    return "\n".join(lines)


def format_profile(profile: UserProfile, kyc: KycRecord | None) -> str:
    kyc_status = kyc.status if kyc else "Not submitted"
    lines = [
        "👤 <b>Your Profile</b>",
        "",
        f"<b>Email:</b> {escape(profile.email)}",
        f"<b>Name:</b> {escape(profile.full_name)}",
        f"<b>Organization ID:</b> {escape(profile.organization_id or 'N/A')}",
        f"<b>KYC Status:</b> {escape(kyc_status.upper())}",
        "",
    ]
    if kyc is not None and kyc.is_approved:
        lines.append("✅ Your KYC is approved. All features are available.")
    else:
        lines.append("⚠️ Your KYC is not approved. Some features may be limited.")
    return "\n".join(lines)


def format_kyc(kyc: KycRecord) -> str:
    """KYC status with personal details and status timeline."""
    lines = [
        "🔎 <b>KYC Status Information</b>",
        "",
        f"<b>Status:</b> {escape(kyc.status.upper())}",
    ]

    detail = kyc.detail
    if detail:
        name = f"{detail.get('firstName') or ''} {detail.get('lastName') or ''}".strip()
        lines += [
            "",
            "👤 <b>Personal Details</b>",
            f"<b>Name:</b> {escape(name)}",
            f"<b>Email:</b> {escape(detail.get('email') or '')}",
            f"<b>Phone:</b> {escape(detail.get('phoneNumber') or '')}",
            f"<b>Country:</b> {escape((detail.get('country') or '').upper())}",
        ]

    if kyc.status_updates:
        lines += ["", "📅 <b>Status Timeline</b>"]
        for key, value in kyc.status_updates.items():
            label = escape(key[:1].upper() + key[1:])
            lines.append(f"<b>{label}:</b> {escape(format_timestamp(value if isinstance(value, str) else None))}")

    return "\n".join(lines)


def format_transfer_confirmation(flow: TransferFlowState, fee: FeeInfo | None) -> str:
    """
    Confirmation screen for a pending transfer.

    Args:
        flow: Transfer flow data (type, recipient, amount, network)
        fee: Fee quote, or None when it couldn't be fetched
    """
    title = "🏦 <b>Confirm Bank Withdrawal</b>" if flow.type == TransferType.BANK else "📤 <b>Confirm Transfer</b>"
    lines = [title, ""]
    if flow.type == TransferType.WALLET:
        lines.append(f"<b>Recipient Address:</b> <code>{escape(flow.recipient or '')}</code>")
        lines.append(f"<b>Network:</b> {escape(format_network_name(flow.network))}")
    elif flow.type == TransferType.EMAIL:
        lines.append(f"<b>Recipient:</b> {escape(flow.recipient or '')}")
    lines.append(f"<b>Amount:</b> {escape(flow.amount or '0')} {DEFAULT_CURRENCY}")

    if fee is not None:
        if fee.fee:
            lines.append(f"<b>Fee:</b> {escape(fee.fee)} {DEFAULT_CURRENCY}")
        if fee.total_amount:
            lines.append(f"<b>Total Amount:</b> {escape(fee.total_amount)} {DEFAULT_CURRENCY}")
        if fee.estimated_time:
            lines.append(f"<b>Estimated Time:</b> {escape(fee.estimated_time)}")

    lines += ["", "Do you want to proceed with this transfer?"]
    return "\n".join(lines)


def format_history_page(page: TransferPage) -> str:
    """Transaction history list for one page."""
    lines = ["📋 <b>Transaction History</b>", ""]
    for index, transfer in enumerate(page.items):
        lines.append(f"<b>{index + 1}. {escape(transfer.type)}</b>")
        lines.append(f"📅 Date: {escape(format_timestamp(transfer.created_at))}")
        if transfer.amount is not None:
            sign = "-" if transfer.is_outgoing else "+"
            lines.append(f"💰 Amount: {sign}{transfer.amount} {escape(transfer.currency)}")
        lines.append(f"{status_emoji(transfer.status)} Status: {escape(transfer.status)}")
        if transfer.recipient:
            lines.append(f"👤 Recipient: {escape(transfer.recipient)}")
        if transfer.sender:
            lines.append(f"👤 Sender: {escape(transfer.sender)}")
        if transfer.network:
            lines.append(f"🌐 Network: {escape(format_network_name(transfer.network))}")
        if transfer.tx_hash:
            lines.append(f"🔗 TX: <code>{escape(transfer.tx_hash)}</code>")
        lines.append("")
    lines.append(
        f"Page {page.page} of {page.total_pages} ({page.total_items} transactions)"
    )
    return "\n".join(lines)


def _format_account(account: dict) -> str:
    if account.get("type") == "web3_wallet":
        return f"Wallet ({escape(truncate_address(account.get('walletAddress')))})"
    if account.get("payeeEmail"):
        return escape(account["payeeEmail"])
    return escape(account.get("type") or "Unknown")


def format_transfer_details(transfer: Transfer) -> str:
    """Single transfer drill-down."""
    lines = [
        "🧾 <b>Transfer Details</b>",
        "",
        f"<b>ID:</b> {escape(transfer.id)}",
        f"<b>Type:</b> {escape(transfer.type)}",
        f"<b>Status:</b> {status_emoji(transfer.status)} {escape(transfer.status)}",
        f"<b>Amount:</b> {transfer.amount if transfer.amount is not None else '0'} {escape(transfer.currency)}",
    ]
    if transfer.fee is not None:
        lines.append(f"<b>Fee:</b> {transfer.fee} {escape(transfer.fee_currency)}")
    lines.append(f"<b>Date:</b> {escape(format_timestamp(transfer.created_at))}")
    lines.append("")

    if transfer.source:
        lines.append(f"<b>From:</b> {_format_account(transfer.source)}")
    if transfer.destination:
        lines.append(f"<b>To:</b> {_format_account(transfer.destination)}")

    if transfer.transactions:
        lines += ["", "<b>Transaction Details:</b>"]
        for index, tx in enumerate(transfer.transactions):
            lines += ["", f"<b>Transaction {index + 1}:</b>"]
            tx_status = tx.get("status") or "Unknown"
            lines.append(f"<b>Status:</b> {status_emoji(tx_status)} {escape(tx_status)}")
            if tx.get("transactionHash"):
                lines.append(f"<b>Hash:</b> <code>{escape(tx['transactionHash'])}</code>")
            if tx.get("fromAmount") and tx.get("fromCurrency"):
                lines.append(f"<b>Amount:</b> {escape(tx['fromAmount'])} {escape(tx['fromCurrency'])}")
            if tx.get("totalFee") and tx.get("feeCurrency"):
                lines.append(f"<b>Fee:</b> {escape(tx['totalFee'])} {escape(tx['feeCurrency'])}")

    return "\n".join(lines)
