"""
FSM States.

State groups for multi-step dialogs.
"""

from bot.states.auth import LoginStates
from bot.states.deposit import DepositStates
from bot.states.transfer import TransferStates


__all__ = [
    "DepositStates",
    "LoginStates",
    "TransferStates",
]
