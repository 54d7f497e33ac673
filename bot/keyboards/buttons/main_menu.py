"""Main menu button constants."""


class MainMenuButtons:
    """Reply keyboard buttons."""

    # Guest
    LOGIN = "🔑 Login"
    HELP = "ℹ️ Help"
    SUPPORT = "📞 Support"

    # Account
    PROFILE = "👤 Profile"
    KYC_STATUS = "🔑 KYC Status"
    LOGOUT = "🔒 Logout"

    # Wallets
    WALLETS = "🪙 Wallets"
    BALANCE = "💰 Balance"
    SET_DEFAULT_WALLET = "⚙️ Set Default Wallet"

    # Money movement
    SEND_MONEY = "💸 Send Money"
    WITHDRAW = "📤 Withdraw"
    DEPOSIT = "📥 Deposit"

    # History
    TRANSACTIONS = "📜 Transactions"
    HISTORY = "📜 History"
