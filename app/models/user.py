from datetime import datetime

from mongoengine import BooleanField, DateTimeField, EmailField, StringField

from app.models.base import BaseDocument, as_utc, utcnow


class User(BaseDocument):
    """User document.

    Fields:
    - name (str): Display name
    - email (str, unique): Login identifier, stored lower-cased
    - password (str, hashed): Bcrypt hash, never the plaintext
    - last_login_at (datetime): Creation time until the first login
    - is_verified (bool): Set once the emailed code is confirmed
    - verification_token / verification_token_expires_at: 6-digit code, only
      present until the email is verified
    - reset_password_token / reset_password_expires_at: opaque hex token, only
      present while a reset is pending
    """
    name = StringField(required=True, null=False)
    email = EmailField(required=True, null=False, unique=True)
    password = StringField(required=True, null=False)
    last_login_at = DateTimeField(required=True, null=False, default=utcnow)
    is_verified = BooleanField(required=True, null=False, default=False)

    verification_token = StringField(required=False, null=False)
    verification_token_expires_at = DateTimeField(required=False, null=False)
    reset_password_token = StringField(required=False, null=False)
    reset_password_expires_at = DateTimeField(required=False, null=False)

    private_fields = ("password", "verification_token", "reset_password_token")

    meta = {
        "collection": "users",
        "indexes": [
            {"fields": ["email"], "unique": True},
            {"fields": ["verification_token"], "sparse": True},
            {"fields": ["reset_password_token"], "sparse": True},
        ],
    }

    def verification_pending(self, now: datetime) -> bool:
        expires_at = as_utc(self.verification_token_expires_at)
        return bool(self.verification_token) and expires_at is not None and expires_at > now

    def reset_pending(self, now: datetime) -> bool:
        expires_at = as_utc(self.reset_password_expires_at)
        return bool(self.reset_password_token) and expires_at is not None and expires_at > now

    def mark_verified(self) -> None:
        self.is_verified = True
        self.verification_token = None
        self.verification_token_expires_at = None

    def start_password_reset(self, token: str, expires_at: datetime) -> None:
        self.reset_password_token = token
        self.reset_password_expires_at = expires_at

    def complete_password_reset(self, password_hash: str) -> None:
        self.password = password_hash
        self.reset_password_token = None
        self.reset_password_expires_at = None
