"""
Transfer handlers package.

- eligibility.py: Account preconditions checked before a flow starts
- send.py: /send entry point and email recipient step
- withdraw.py: /withdraw entry point, wallet network/address and bank steps
- confirm.py: Amount, fee quote, confirmation and execution
"""

from aiogram import Router

from . import confirm, send, withdraw
from .confirm import execute_transfer
from .eligibility import check_transfer_eligibility

# Create main router and include all sub-routers
router = Router()
router.include_router(send.router)
router.include_router(withdraw.router)
router.include_router(confirm.router)

__all__ = [
    # Main router (used by bot/initialization/handlers.py)
    "router",
    "check_transfer_eligibility",
    "execute_transfer",
]
