"""
Transfer eligibility checks.

Runs the account preconditions before any send or withdraw flow starts.
"""

from aiogram.types import Message
from loguru import logger

from app.models.session import ChatSession
from app.services.transfer_service import TransferService
from app.utils.exceptions import ApiError, TransferPreconditionError
from bot.keyboards.reply import limited_keyboard
from bot.messages.error_messages import describe_api_error
from bot.messages.user_messages import TRANSFER_CHECK_FAILED


async def check_transfer_eligibility(
    message: Message,
    session: ChatSession,
    transfer_service: TransferService,
) -> bool:
    """
    Check that the chat's account may move funds.

    On failure the reason is sent with the limited keyboard and the flow
    state is left as it was.

    Args:
        message: Message to reply to
        session: Chat session
        transfer_service: Transfer service

    Returns:
        True if the flow may start
    """
    try:
        await transfer_service.can_perform_transfers(session)
    except TransferPreconditionError as e:
        logger.info(f"Transfer blocked for chat {session.chat_id}: {e.reason}")
        await message.answer(f"❌ {e.reason}", reply_markup=limited_keyboard())
        return False
    except ApiError as e:
        logger.error(f"Error checking transfer eligibility for chat {session.chat_id}: {e}")
        await message.answer(describe_api_error(e, TRANSFER_CHECK_FAILED))
        return False
    return True
