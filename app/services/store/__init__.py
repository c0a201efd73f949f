from __future__ import annotations

import logging
from datetime import datetime

from bson.errors import InvalidId
from bson.objectid import ObjectId
from mongoengine.errors import NotUniqueError
from mongoengine.errors import ValidationError as DocumentValidationError

from app.models.user import User
from app.utils.errors import Conflict, ValidationFailed


logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserStore:
    """Gateway to the ``users`` collection.

    Handlers never query ``User`` directly; every read and write of a user
    record goes through one of these methods.
    """

    def get_by_id(self, user_id: str) -> User | None:
        try:
            oid = ObjectId(user_id)
        except (InvalidId, TypeError):
            return None
        return User.objects(id=oid).first()

    def get_by_email(self, email: str) -> User | None:
        return User.objects(email=normalize_email(email)).first()

    def create(self, *, name: str, email: str, password_hash: str,
               verification_token: str, verification_token_expires_at: datetime) -> User:
        user = User(
            name=name,
            email=normalize_email(email),
            password=password_hash,
            verification_token=verification_token,
            verification_token_expires_at=verification_token_expires_at,
        )
        try:
            user.save()
        except NotUniqueError:
            # Lost a race with a concurrent signup for the same address
            logger.info("Duplicate signup rejected by unique index")
            raise Conflict("User already exists")
        except DocumentValidationError as exc:
            raise ValidationFailed("Invalid user details", error=exc.to_dict())
        return user

    def verification_code_in_use(self, code: str, now: datetime) -> bool:
        return any(user.verification_pending(now) for user in User.objects(verification_token=code))

    def find_by_verification_code(self, code: str, now: datetime) -> User | None:
        for user in User.objects(verification_token=code):
            if user.verification_pending(now):
                return user
        return None

    def find_by_reset_token(self, token: str, now: datetime) -> User | None:
        user = User.objects(reset_password_token=token).first()
        if user and user.reset_pending(now):
            return user
        return None

    def save(self, user: User) -> User:
        return user.save()
