"""
User-facing message templates.

Prompts that wait for a free-text reply are also used by the fallback
router to recognise which flow a reply belongs to, so their wording must
stay stable.
"""

import html

# ============================================================================
# GENERAL
# ============================================================================

HELP_MESSAGE = (
    "🤖 <b>Available Commands</b>\n\n"
    "<b>Authentication</b>\n"
    "• /login - Log in to your account\n"
    "• /logout - Log out from your account\n"
    "• /profile - View your profile information\n"
    "• /kycstatus - Check your KYC verification status\n\n"
    "<b>Wallet Management</b>\n"
    "• /balance - Check your wallet balance\n"
    "• /wallets - List your wallets\n"
    "• /setdefault - Set your default wallet\n\n"
    "<b>Transfers</b>\n"
    "• /send - Send funds to another user\n"
    "• /withdraw - Withdraw funds\n"
    "• /deposit - Get deposit information\n"
    "• /history - View transaction history\n\n"
    "<b>Support</b>\n"
    "• /help - Show this help message\n"
    "• /support - Get support information\n\n"
    "💡 <b>Tip:</b> Most commands require you to be logged in first."
)

QUICK_ACCESS = "Use these buttons for quick access:"


def welcome_message(first_name: str | None) -> str:
    """Greeting for /start."""
    name = html.escape(first_name or "there")
    return (
        f"👋 <b>Welcome to Copperx Telegram Bot, {name}!</b>\n\n"
        "This bot allows you to manage your Copperx wallet, send/receive USDC, "
        "and track your transactions directly from Telegram.\n\n"
        "🔑 <b>Getting Started</b>\n"
        "You need to login first before using any features:\n"
        "• /login - Connect to your Copperx account\n\n"
        "📋 <b>Available Commands</b>\n"
        "• /help - Show this help message\n"
        "• /support - Get support information\n"
        "• /profile - View your profile information\n"
        "• /logout - Disconnect your account\n\n"
        "💰 <b>Wallet Commands</b> (requires login)\n"
        "• /balance - Check your wallet balance\n"
        "• /wallets - View and manage your wallets\n"
        "• /setdefault - Set your default wallet\n\n"
        "💸 <b>Transfer Commands</b> (requires login)\n"
        "• /send - Send USDC to an email or wallet\n"
        "• /withdraw - Withdraw to external wallet or bank\n"
        "• /deposit - Get deposit instructions\n"
        "• /history - View transaction history\n\n"
        "Please start by using the /login command to connect your Copperx account."
    )


def support_message(link: str) -> str:
    return f"📞 <b>Need help?</b>\n\nJoin our community for support:\n{link}"


# ============================================================================
# AUTH
# ============================================================================

LOGIN_EMAIL_PROMPT = "Please enter your email address to login to your Copperx account:"
OTP_PROMPT = (
    "✅ OTP has been sent to your email address.\n\n"
    "Please enter the OTP to complete the login process:"
)
INVALID_EMAIL = "❌ Invalid email format. Please enter a valid email address."
INVALID_OTP = "❌ Invalid OTP format. OTP should contain only numbers. Please try again."
OTP_SEND_FAILED = "❌ Failed to send OTP. Please try again later."
LOGIN_STATE_INVALID = "❌ Invalid session state. Please start the login process again."
NEW_OTP_QUESTION = "Would you like to request a new OTP?"
LOGIN_CANCELLED = "❌ Login cancelled."
LOGIN_REQUIRED = "❌ You need to login first."
SESSION_EXPIRED = "⏰ Your session has expired. Please login again."
LOGGED_OUT = "✅ You have been logged out successfully."
NOT_LOGGED_IN = "You are not logged in."
KYC_NOT_APPROVED_ADVISORY = (
    "⚠️ Your KYC is not approved yet. Some features may be limited.\n\n"
    "Please complete your KYC on the Copperx platform."
)
KYC_NOT_SUBMITTED_ADVISORY = (
    "⚠️ You haven't submitted your KYC yet. Some features may be limited.\n\n"
    "Please complete your KYC on the Copperx platform."
)
KYC_NOT_FOUND = "❌ No KYC information found. Please complete your KYC first."


def login_success(name: str) -> str:
    return f"✅ Login successful!\n\nWelcome {name}!"


# ============================================================================
# TRANSFERS
# ============================================================================

SEND_METHOD_PROMPT = "How would you like to send funds?"
RECIPIENT_EMAIL_PROMPT = "Please enter the recipient's email address:"
SEND_AMOUNT_PROMPT = "Please enter the amount to send (in USDC):"
WALLET_ADDRESS_PROMPT = "Please enter the recipient wallet address:"
WITHDRAW_AMOUNT_PROMPT = "Please enter the amount to withdraw (in USDC):"
BANK_AMOUNT_PROMPT = "Please enter the amount to withdraw to your bank account (in USDC):"
WITHDRAW_METHOD_PROMPT = "Select withdrawal method:"
NETWORK_PROMPT = "Select network for withdrawal:"
INVALID_AMOUNT = "❌ Invalid amount format. Please enter a valid number."
INVALID_ADDRESS = "❌ Invalid wallet address. Please enter a valid address."
TRANSFER_STATE_INVALID = "❌ Invalid session state. Please start the transfer process again."
TRANSFER_MISSING_DATA = "❌ Missing recipient or amount. Please start the transfer process again."
TRANSFER_SUCCESS = (
    "✅ Transfer initiated successfully!\n\n"
    "You can check the status in your transaction history with /history."
)
BANK_WITHDRAW_SUCCESS = (
    "✅ Bank withdrawal initiated successfully!\n\n"
    "You can check the status in your transaction history with /history."
)
TRANSFER_FAILED = "❌ Failed to process transfer. Please try again later."
TRANSFER_CANCELLED = "❌ Transfer cancelled."
TRANSFER_CHECK_FAILED = "❌ Failed to verify transfer eligibility. Please try again later."
NO_WALLETS_FOR_WITHDRAW = (
    "You don't have any wallets yet.\n\n"
    "Please create a wallet on the Copperx platform first."
)


def recipient_not_eligible(reason: str) -> str:
    return (
        f"❌ Transfer failed: {reason}\n\n"
        "The recipient may not have completed their account setup or KYC verification."
    )


# ============================================================================
# DEPOSITS
# ============================================================================

DEPOSIT_CHAIN_PROMPT = "💰 <b>Deposit Funds</b>\n\nSelect the network you want to deposit to:"
DEPOSIT_AMOUNT_PROMPT = "Please enter the amount to deposit (in USDC, minimum 1):"
DEPOSIT_MIN_AMOUNT = "❌ Minimum deposit amount is 1 USDC. Please enter a larger amount."
DEPOSIT_STATE_INVALID = "❌ Missing chain ID. Please start the deposit process again."
DEPOSIT_CREATING = "⏳ Creating deposit transaction..."
DEPOSIT_KYC_REQUIRED = (
    "❌ Your KYC is not approved. You cannot perform deposits until your KYC is approved.\n\n"
    "Please complete your KYC on the Copperx platform."
)
DEPOSIT_NOTIFICATION_HINT = (
    "You will receive a notification once your deposit is credited to your account."
)

# ============================================================================
# WALLETS
# ============================================================================

NO_WALLETS = "🏦 You don't have any wallets yet."
NO_WALLETS_GENERATE = (
    "❌ You don't have any wallets set up yet.\n\nWould you like to generate a wallet?"
)
NO_BALANCES = "💰 You don't have any balances yet. Use /deposit to add funds."
SELECT_DEFAULT_WALLET = "🏦 Select a wallet to set as default:"
ADDRESS_NOT_FOUND = "❌ Address not found"

# ============================================================================
# HISTORY
# ============================================================================

NO_TRANSACTIONS = "📭 You don't have any transactions yet."
TRANSFER_NOT_FOUND = "❌ Transfer not found or you don't have permission to view it."

# ============================================================================
# FALLBACK
# ============================================================================

UNKNOWN_INPUT = "🤔 I didn't understand that. Use /help to see what I can do."
