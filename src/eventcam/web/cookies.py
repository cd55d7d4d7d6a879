"""Cookie transport for organizer and guest device sessions."""

from fastapi import Response

from eventcam.config import Config

ORGANIZER_SESSION_COOKIE_NAME = "organizer_session_token"
ORGANIZER_SESSION_COOKIE_PATH = "/api/organizer"
DEVICE_SESSION_COOKIE_NAME = "device_session_token"
DEVICE_SESSION_COOKIE_PATH = "/api"
DEVICE_SESSION_MAX_AGE = 7 * 24 * 60 * 60  # 7 days


def set_organizer_session_cookie(response: Response, token: str, config: Config) -> None:
    response.set_cookie(
        key=ORGANIZER_SESSION_COOKIE_NAME,
        value=token,
        max_age=config.organizer_session_ttl_days * 24 * 60 * 60,
        path=ORGANIZER_SESSION_COOKIE_PATH,
        httponly=True,
        samesite="lax",
        secure=config.production,
    )


def clear_organizer_session_cookie(response: Response, config: Config) -> None:
    response.delete_cookie(
        key=ORGANIZER_SESSION_COOKIE_NAME,
        path=ORGANIZER_SESSION_COOKIE_PATH,
        httponly=True,
        samesite="lax",
        secure=config.production,
    )


def set_device_session_cookie(response: Response, token: str, config: Config) -> None:
    response.set_cookie(
        key=DEVICE_SESSION_COOKIE_NAME,
        value=token,
        max_age=DEVICE_SESSION_MAX_AGE,
        path=DEVICE_SESSION_COOKIE_PATH,
        httponly=True,
        samesite="strict",
        secure=config.production,
    )
