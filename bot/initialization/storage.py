"""
Bot Initialization - Storage Module.

Module: storage.py
Sets up FSM storage. Sessions live in process memory, so FSM state does
too: a restart drops both together.
"""

from aiogram.fsm.storage.base import BaseStorage
from aiogram.fsm.storage.memory import MemoryStorage
from loguru import logger


def setup_fsm_storage() -> BaseStorage:
    """
    Set up FSM storage.

    Returns:
        Storage instance for the dispatcher
    """
    logger.info("Using in-memory FSM storage")
    return MemoryStorage()
