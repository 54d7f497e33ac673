"""
Transfer FSM states.

States for send-to-email, withdraw-to-wallet and bank withdrawal flows.
"""

from aiogram.fsm.state import State, StatesGroup


class TransferStates(StatesGroup):
    """Send/withdraw flow states."""

    # Email recipient
    waiting_for_recipient_email = State()

    # Wallet withdrawal: network chosen by button, then address
    selecting_network = State()
    waiting_for_address = State()

    # Any transfer type
    waiting_for_amount = State()
    waiting_for_confirmation = State()
