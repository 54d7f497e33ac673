"""
Models.

API records parsed from Copperx responses and per-chat session state.
"""

from app.models.records import (
    Deposit,
    FeeInfo,
    KycRecord,
    RecipientEligibility,
    TokenBalance,
    Transfer,
    TransferPage,
    UserProfile,
    Wallet,
    WalletBalance,
)
from app.models.session import (
    AuthFlowState,
    ChatSession,
    DepositFlowState,
    HistoryPagingState,
    TransferFlowState,
    TransferType,
    UserRecord,
)

__all__ = [
    # API records
    "Deposit",
    "FeeInfo",
    "KycRecord",
    "RecipientEligibility",
    "TokenBalance",
    "Transfer",
    "TransferPage",
    "UserProfile",
    "Wallet",
    "WalletBalance",
    # Session state
    "AuthFlowState",
    "ChatSession",
    "DepositFlowState",
    "HistoryPagingState",
    "TransferFlowState",
    "TransferType",
    "UserRecord",
]
