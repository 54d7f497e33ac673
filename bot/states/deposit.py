"""
Deposit FSM states.

States for deposit creation flow.
"""

from aiogram.fsm.state import State, StatesGroup


class DepositStates(StatesGroup):
    """Deposit creation flow states."""

    # Chain chosen by button
    selecting_chain = State()

    # Amount entry (minimum 1 USDC)
    entering_amount = State()
