from fastapi import Request

from app.services.notifications.mailer import AuthMailer
from app.services.store import UserStore


def get_user_store(request: Request) -> UserStore:
    return request.app.state.user_store


def get_mailer(request: Request) -> AuthMailer:
    return request.app.state.mailer
