"""
Fallback handlers.

Registered last. Replies to bot prompts that arrive without a matching
FSM state (for example after a restart) are routed to the flow step the
prompt belongs to; everything else gets a hint.
"""

from collections.abc import Awaitable, Callable
from typing import Any

from aiogram import F, Router
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, Message
from loguru import logger

from bot.messages.user_messages import UNKNOWN_INPUT

from . import auth, deposit
from .transfer import confirm, send, withdraw

router = Router(name="fallback")

PromptHandler = Callable[..., Awaitable[None]]

# Prompt text marker -> handler for the reply. Checked in order.
PROMPT_ROUTES: tuple[tuple[str, PromptHandler], ...] = (
    ("enter your email address to login", auth.process_email),
    ("enter the otp", auth.process_otp),
    ("recipient's email", send.process_recipient_email),
    ("amount to send", confirm.process_amount),
    ("amount to withdraw", confirm.process_amount),
    ("recipient wallet address", withdraw.process_wallet_address),
    ("amount to deposit", deposit.process_deposit_amount),
)


def match_prompt(prompt: str | None) -> PromptHandler | None:
    """
    Find the handler for a reply to ``prompt``.

    Args:
        prompt: Text of the bot message being replied to

    Returns:
        Handler or None when the prompt is not a flow step
    """
    if not prompt:
        return None
    lowered = prompt.lower()
    for marker, handler in PROMPT_ROUTES:
        if marker in lowered:
            return handler
    return None


@router.message(F.text)
async def handle_unmatched_text(
    message: Message,
    state: FSMContext,
    **data: Any,
) -> None:
    reply_to = message.reply_to_message
    if reply_to and reply_to.from_user and reply_to.from_user.is_bot:
        handler = match_prompt(reply_to.text)
        if handler is not None:
            logger.debug(f"Routing reply in chat {message.chat.id} to {handler.__name__}")
            await handler(message, state, **data)
            return

    await message.answer(UNKNOWN_INPUT)


@router.callback_query()
async def handle_stale_callback(callback: CallbackQuery, **data: Any) -> None:
    logger.debug(f"Unhandled callback data: {callback.data}")
    await callback.answer("This button is no longer active.", show_alert=False)
