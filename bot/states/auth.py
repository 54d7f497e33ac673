from aiogram.fsm.state import State, StatesGroup


class LoginStates(StatesGroup):
    """Email OTP login flow states."""
    waiting_for_email = State()  # Step 1: User enters email
    waiting_for_otp = State()  # Step 2: User enters OTP from email
