import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Response
from pydantic import BaseModel, EmailStr

from app.api.dependencies import get_mailer, get_user_store
from app.models.base import utcnow
from app.services.auth import (
    expiry_from_now,
    generate_reset_token,
    generate_verification_code,
    hash_password,
    verify_password,
)
from app.services.auth.session import clear_session_cookie, require_session, set_session_cookie
from app.services.notifications.mailer import AuthMailer
from app.services.store import UserStore
from app.utils.config import settings
from app.utils.errors import AppError, Conflict, InternalError, NotFound, Unauthenticated, ValidationFailed


logger = logging.getLogger(__name__)

router = APIRouter()

# Bounded retries for drawing a code no pending signup already holds
MAX_CODE_ATTEMPTS = 5


def _blank(value: str | None) -> bool:
    return value is None or not str(value).strip()


class SignupBody(BaseModel):
    email: EmailStr | None = None
    password: str | None = None
    name: str | None = None


@router.post("/signup", status_code=201)
def signup(
    body: SignupBody,
    response: Response,
    background_tasks: BackgroundTasks,
    store: UserStore = Depends(get_user_store),
    mailer: AuthMailer = Depends(get_mailer),
) -> dict:
    """PUBLIC: Register an unverified account and start a session."""
    if _blank(body.email) or _blank(body.password) or _blank(body.name):
        raise ValidationFailed("All fields are required")

    try:
        # Pre-check; the unique index still catches concurrent signups in create()
        if store.get_by_email(body.email):
            raise Conflict("User already exists")

        now = utcnow()
        code = generate_verification_code()
        for _ in range(MAX_CODE_ATTEMPTS - 1):
            if not store.verification_code_in_use(code, now):
                break
            code = generate_verification_code()

        user = store.create(
            name=body.name.strip(),
            email=body.email,
            password_hash=hash_password(body.password),
            verification_token=code,
            verification_token_expires_at=expiry_from_now(settings.verification_token_expires_minutes),
        )
    except AppError:
        raise
    except Exception as exc:
        logger.exception("Signup failed")
        raise InternalError.wrap("Error creating user", exc)

    set_session_cookie(response, str(user.id))
    background_tasks.add_task(mailer.send_verification_code, user.email, code)
    logger.info("Created user %s", user.id)
    return {"success": True, "message": "User created successfully", "user": user.to_output()}


class VerifyEmailBody(BaseModel):
    code: str | int | None = None


@router.post("/verify-email")
def verify_email(
    body: VerifyEmailBody,
    background_tasks: BackgroundTasks,
    store: UserStore = Depends(get_user_store),
    mailer: AuthMailer = Depends(get_mailer),
) -> dict:
    """PUBLIC: Confirm an emailed 6-digit code."""
    if _blank(body.code):
        raise ValidationFailed("Verification code is required")

    try:
        # One message for unknown, consumed and expired codes alike
        user = store.find_by_verification_code(str(body.code).strip(), utcnow())
        if not user:
            raise NotFound("Invalid or expired verification code")
        user.mark_verified()
        store.save(user)
    except AppError:
        raise
    except Exception as exc:
        logger.exception("Email verification failed")
        raise InternalError.wrap("Error verifying email", exc)

    background_tasks.add_task(mailer.send_welcome, user.email, user.name)
    logger.info("Verified email for user %s", user.id)
    return {"success": True, "message": "Email verified successfully", "user": user.to_output()}


class LoginBody(BaseModel):
    email: EmailStr | None = None
    password: str | None = None


@router.post("/login")
def login(
    body: LoginBody,
    response: Response,
    store: UserStore = Depends(get_user_store),
) -> dict:
    """PUBLIC: Check credentials and start a session."""
    if _blank(body.email) or _blank(body.password):
        raise ValidationFailed("All fields are required")

    try:
        user = store.get_by_email(body.email)
        if not user:
            raise NotFound("User not found")
        if not verify_password(body.password, user.password):
            raise Unauthenticated("Invalid credentials", status_code=400)
        user.last_login_at = utcnow()
        store.save(user)
    except AppError:
        raise
    except Exception as exc:
        logger.exception("Login failed")
        raise InternalError.wrap("Error logging in", exc)

    set_session_cookie(response, str(user.id))
    logger.info("User %s logged in", user.id)
    return {"success": True, "message": "Logged in successfully", "user": user.to_output()}


@router.post("/logout")
def logout(response: Response) -> dict:
    """PUBLIC: Drop the session cookie, whether or not one was sent."""
    clear_session_cookie(response)
    return {"success": True, "message": "Logged out successfully"}


class ForgotPasswordBody(BaseModel):
    email: EmailStr | None = None


@router.post("/forgot-password")
def forgot_password(
    body: ForgotPasswordBody,
    background_tasks: BackgroundTasks,
    store: UserStore = Depends(get_user_store),
    mailer: AuthMailer = Depends(get_mailer),
) -> dict:
    """PUBLIC: Issue a one-hour reset token and email the reset link."""
    if _blank(body.email):
        raise ValidationFailed("Email is required")

    try:
        user = store.get_by_email(body.email)
        if not user:
            raise NotFound("User not found")
        token = generate_reset_token()
        user.start_password_reset(token, expiry_from_now(settings.reset_token_expires_minutes))
        store.save(user)
    except AppError:
        raise
    except Exception as exc:
        logger.exception("Forgot-password failed")
        raise InternalError.wrap("Error requesting password reset", exc)

    background_tasks.add_task(mailer.send_password_reset, user.email, token)
    logger.info("Issued password reset for user %s", user.id)
    return {"success": True, "message": "Password reset link sent to your email"}


class ResetPasswordBody(BaseModel):
    password: str | None = None


@router.post("/reset-password/{token}")
def reset_password(
    token: str,
    body: ResetPasswordBody,
    background_tasks: BackgroundTasks,
    store: UserStore = Depends(get_user_store),
    mailer: AuthMailer = Depends(get_mailer),
) -> dict:
    """PUBLIC: Replace the password using a reset token. Does not log in."""
    if _blank(body.password):
        raise ValidationFailed("Password is required")

    try:
        user = store.find_by_reset_token(token, utcnow())
        if not user:
            raise NotFound("Invalid or expired reset token")
        user.complete_password_reset(hash_password(body.password))
        store.save(user)
    except AppError:
        raise
    except Exception as exc:
        logger.exception("Password reset failed")
        raise InternalError.wrap("Error resetting password", exc)

    background_tasks.add_task(mailer.send_password_reset_success, user.email)
    logger.info("Password reset completed for user %s", user.id)
    return {"success": True, "message": "Password reset successful"}


@router.get("/check-auth")
def check_auth(
    user_id: str = Depends(require_session),
    store: UserStore = Depends(get_user_store),
) -> dict:
    """PROTECTED: Return the user behind the session cookie."""
    try:
        user = store.get_by_id(user_id)
    except Exception as exc:
        logger.exception("Check-auth lookup failed")
        raise InternalError.wrap("Error checking authentication", exc)
    if not user:
        raise NotFound("User not found", status_code=404)
    return {"success": True, "user": user.to_output()}
