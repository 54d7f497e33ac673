"""
Auth handlers.

Email OTP login, logout, profile and KYC status.
"""

from typing import Any

from aiogram import F, Router
from aiogram.filters import Command
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, ForceReply, Message
from loguru import logger

from app.models.session import AuthFlowState, ChatSession, UserRecord
from app.services.auth_service import AuthService
from app.services.notification_bridge import NotificationBridge
from app.services.transfer_service import is_valid_email
from app.utils.exceptions import ApiError
from bot.keyboards.buttons import MainMenuButtons
from bot.keyboards.inline import Callbacks, kyc_details_keyboard, otp_retry_keyboard
from bot.keyboards.reply import guest_keyboard, login_keyboard, main_menu_keyboard
from bot.messages.error_messages import (
    GENERIC_ERROR,
    describe_api_error,
    describe_otp_error,
)
from bot.messages.user_messages import (
    INVALID_EMAIL,
    INVALID_OTP,
    KYC_NOT_APPROVED_ADVISORY,
    KYC_NOT_FOUND,
    KYC_NOT_SUBMITTED_ADVISORY,
    LOGGED_OUT,
    LOGIN_CANCELLED,
    LOGIN_EMAIL_PROMPT,
    LOGIN_STATE_INVALID,
    NEW_OTP_QUESTION,
    NOT_LOGGED_IN,
    OTP_PROMPT,
    OTP_SEND_FAILED,
    login_success,
)
from bot.states.auth import LoginStates
from bot.utils.decorators import require_login
from bot.utils.formatters import format_kyc, format_profile
from bot.utils.text_utils import FREE_TEXT

router = Router(name="auth")


# ============================================================================
# LOGIN
# ============================================================================


async def _start_login(message: Message, state: FSMContext, session: ChatSession) -> None:
    session.reset_flows()
    session.auth = AuthFlowState()
    await state.set_state(LoginStates.waiting_for_email)
    await message.answer(
        LOGIN_EMAIL_PROMPT,
        reply_markup=ForceReply(input_field_placeholder="Enter your email"),
    )


@router.message(Command("login"))
@router.message(F.text == MainMenuButtons.LOGIN)
async def cmd_login(
    message: Message,
    state: FSMContext,
    **data: Any,
) -> None:
    """Start the email OTP login."""
    session: ChatSession = data["chat_session"]
    await _start_login(message, state, session)


@router.callback_query(F.data == Callbacks.LOGIN)
async def callback_login(
    callback: CallbackQuery,
    state: FSMContext,
    **data: Any,
) -> None:
    session: ChatSession = data["chat_session"]
    await callback.answer()
    await _start_login(callback.message, state, session)


@router.message(LoginStates.waiting_for_email, FREE_TEXT)
async def process_email(
    message: Message,
    state: FSMContext,
    **data: Any,
) -> None:
    """
    Handle the email reply.

    Invalid addresses are re-prompted without leaving the state. A valid
    address requests an OTP and moves the flow to OTP entry.
    """
    session: ChatSession = data["chat_session"]
    auth_service: AuthService = data["auth_service"]
    email = (message.text or "").strip()

    if not is_valid_email(email):
        await message.answer(INVALID_EMAIL)
        return

    try:
        sid = await auth_service.request_email_otp(email)
    except ApiError as e:
        logger.error(f"OTP request failed for chat {message.chat.id}: {e}")
        await message.answer(OTP_SEND_FAILED)
        return

    if not sid:
        await message.answer(OTP_SEND_FAILED)
        return

    session.auth = AuthFlowState(email=email, awaiting_otp=True, sid=sid)
    await state.set_state(LoginStates.waiting_for_otp)
    await message.answer(
        OTP_PROMPT,
        reply_markup=ForceReply(input_field_placeholder="Enter OTP"),
    )


@router.message(LoginStates.waiting_for_otp, FREE_TEXT)
async def process_otp(
    message: Message,
    state: FSMContext,
    **data: Any,
) -> None:
    """
    Handle the OTP reply.

    On success the session gets its token and user record, the login flow
    ends and the KYC advisory is shown when KYC isn't approved.
    """
    session: ChatSession = data["chat_session"]
    auth_service: AuthService = data["auth_service"]
    otp = (message.text or "").strip()

    auth = session.auth
    if auth is None or not auth.email or not auth.awaiting_otp or not auth.sid:
        await state.clear()
        await message.answer(LOGIN_STATE_INVALID, reply_markup=login_keyboard())
        return

    if not otp.isdigit():
        await message.answer(INVALID_OTP)
        return

    try:
        await auth_service.authenticate(session.credentials, auth.email, otp, auth.sid)
    except ApiError as e:
        logger.warning(f"OTP authentication failed for chat {message.chat.id}: {e}")
        await message.answer(describe_otp_error(e))
        await message.answer(NEW_OTP_QUESTION, reply_markup=otp_retry_keyboard())
        return

    try:
        profile = await auth_service.get_profile(session.credentials)
    except ApiError as e:
        logger.error(f"Profile fetch after login failed for chat {message.chat.id}: {e}")
        session.credentials.clear()
        session.auth = None
        await state.clear()
        await message.answer(describe_api_error(e, GENERIC_ERROR), reply_markup=login_keyboard())
        return

    session.user = UserRecord(
        user_id=profile.id,
        email=profile.email or auth.email,
        organization_id=profile.organization_id,
        first_name=profile.first_name,
        last_name=profile.last_name,
    )
    session.auth = None
    await state.clear()
    logger.info(f"Chat {message.chat.id} logged in as {session.user.email}")

    await message.answer(
        login_success(profile.first_name or session.user.email),
        reply_markup=main_menu_keyboard(),
    )

    try:
        latest = await auth_service.get_latest_kyc(session.credentials)
    except ApiError as e:
        logger.warning(f"KYC check after login failed for chat {message.chat.id}: {e}")
        return

    if latest is None:
        await message.answer(KYC_NOT_SUBMITTED_ADVISORY)
    elif not latest.is_approved:
        await message.answer(KYC_NOT_APPROVED_ADVISORY)


@router.callback_query(F.data == Callbacks.LOGIN_NEW_OTP)
async def callback_new_otp(
    callback: CallbackQuery,
    state: FSMContext,
    **data: Any,
) -> None:
    """Request a fresh OTP for the email already entered."""
    session: ChatSession = data["chat_session"]
    auth_service: AuthService = data["auth_service"]
    await callback.answer()

    if session.auth is None or not session.auth.email:
        await state.clear()
        await callback.message.answer(LOGIN_STATE_INVALID, reply_markup=login_keyboard())
        return

    email = session.auth.email
    try:
        sid = await auth_service.request_email_otp(email)
    except ApiError as e:
        logger.error(f"OTP re-request failed for chat {session.chat_id}: {e}")
        await callback.message.answer(OTP_SEND_FAILED)
        return

    if not sid:
        await callback.message.answer(OTP_SEND_FAILED)
        return

    session.auth = AuthFlowState(email=email, awaiting_otp=True, sid=sid)
    await state.set_state(LoginStates.waiting_for_otp)
    await callback.message.answer(
        OTP_PROMPT,
        reply_markup=ForceReply(input_field_placeholder="Enter OTP"),
    )


@router.callback_query(F.data == Callbacks.LOGIN_CANCEL)
async def callback_cancel_login(
    callback: CallbackQuery,
    state: FSMContext,
    **data: Any,
) -> None:
    session: ChatSession = data["chat_session"]
    session.auth = None
    await state.clear()
    await callback.answer()

    await callback.message.edit_text(
        f"{LOGIN_CANCELLED} You can try again by clicking the Login button."
    )
    await callback.message.answer(
        "Use the buttons below to navigate:", reply_markup=guest_keyboard()
    )


# ============================================================================
# LOGOUT
# ============================================================================


@router.message(Command("logout"))
@router.message(F.text == MainMenuButtons.LOGOUT)
async def cmd_logout(
    message: Message,
    state: FSMContext,
    **data: Any,
) -> None:
    """Forget the user and token, stop notifications."""
    session: ChatSession = data["chat_session"]
    bridge: NotificationBridge = data["notification_bridge"]

    if session.user is None:
        await message.answer(NOT_LOGGED_IN)
        return

    await bridge.disarm(session.chat_id, session.user.organization_id)
    logger.info(f"Chat {session.chat_id} logged out ({session.user.email})")
    session.logout()
    await state.clear()

    await message.answer(LOGGED_OUT, reply_markup=guest_keyboard())


# ============================================================================
# PROFILE & KYC
# ============================================================================


@router.message(Command("profile"))
@router.message(F.text == MainMenuButtons.PROFILE)
@require_login
async def cmd_profile(
    message: Message,
    **data: Any,
) -> None:
    session: ChatSession = data["chat_session"]
    auth_service: AuthService = data["auth_service"]

    try:
        profile = await auth_service.get_profile(session.credentials)
    except ApiError as e:
        logger.error(f"Profile fetch failed for chat {session.chat_id}: {e}")
        await message.answer(describe_api_error(e, "❌ Error fetching profile. Please try again later."))
        return

    try:
        kyc = await auth_service.get_latest_kyc(session.credentials)
    except ApiError as e:
        logger.warning(f"KYC fetch failed for chat {session.chat_id}: {e}")
        kyc = None

    await message.answer(
        format_profile(profile, kyc),
        parse_mode="HTML",
        reply_markup=kyc_details_keyboard(),
    )


async def _send_kyc_status(message: Message, session: ChatSession, auth_service: AuthService) -> None:
    try:
        kyc = await auth_service.get_latest_kyc(session.credentials)
    except ApiError as e:
        logger.error(f"KYC fetch failed for chat {session.chat_id}: {e}")
        await message.answer(describe_api_error(e, "❌ Error fetching KYC status. Please try again later."))
        return

    if kyc is None:
        await message.answer(KYC_NOT_FOUND)
        return

    await message.answer(format_kyc(kyc), parse_mode="HTML")


@router.message(Command("kycstatus"))
@router.message(F.text == MainMenuButtons.KYC_STATUS)
@require_login
async def cmd_kyc_status(
    message: Message,
    **data: Any,
) -> None:
    """Show KYC status, personal details and timeline."""
    await _send_kyc_status(message, data["chat_session"], data["auth_service"])


@router.callback_query(F.data == Callbacks.KYC_DETAILS)
@require_login
async def callback_kyc_details(
    callback: CallbackQuery,
    **data: Any,
) -> None:
    await callback.answer()
    await _send_kyc_status(callback.message, data["chat_session"], data["auth_service"])
