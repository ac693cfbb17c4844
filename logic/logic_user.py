from logic.logic_session import (
    AppSession,
    back_to_entry,
    back_to_otp,
    change_number,
    get_started,
    logout,
    register,
    send_otp,
    start_session,
    verify_otp,
)
from logic.logic_views import respond
from storage import LocalStore


# ================== Startup ==================


def load_session_action(session: AppSession):
    """Gradio load callback: re-read storage for a fresh browser tab."""
    store = session.store if session is not None else LocalStore()
    return respond(start_session(store))


# ================== Auth: phone / OTP / register / logout ==================


def get_started_action(session: AppSession):
    return respond(get_started(session))


def back_to_entry_action(session: AppSession):
    return respond(back_to_entry(session))


async def send_otp_action(session: AppSession, phone_number: str):
    return respond(await send_otp(session, phone_number))


def change_number_action(session: AppSession):
    return respond(change_number(session))


async def verify_otp_action(session: AppSession, code: str):
    return respond(await verify_otp(session, code))


def back_to_otp_action(session: AppSession):
    return respond(back_to_otp(session))


def register_action(session: AppSession, name, farm_location, farming_type, farm_size):
    return respond(register(session, name, farm_location, farming_type, farm_size))


def logout_action(session: AppSession):
    return respond(logout(session))
