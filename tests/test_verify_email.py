from datetime import timedelta

from app.models.base import utcnow
from app.models.user import User


def _pending_code(email="a@x.com"):
    return User.objects.get(email=email).verification_token


def test_verify_email_marks_user_verified_and_clears_code(client, signup, sender):
    signup()
    resp = client.post("/api/auth/verify-email", json={"code": _pending_code()})
    assert resp.status_code == 200

    user = User.objects.get(email="a@x.com")
    assert user.is_verified is True
    assert user.verification_token is None
    assert user.verification_token_expires_at is None

    subjects = [subject for _, subject, _ in sender.sent]
    assert subjects == ["Verify your email", "Welcome to Our Platform"]


def test_verify_email_accepts_numeric_code(client, signup):
    signup()
    resp = client.post("/api/auth/verify-email", json={"code": int(_pending_code())})
    assert resp.status_code == 200


def test_expired_and_unknown_codes_get_the_same_answer(client, signup):
    signup()
    user = User.objects.get(email="a@x.com")
    code = user.verification_token
    user.verification_token_expires_at = utcnow() - timedelta(seconds=1)
    user.save()

    expired = client.post("/api/auth/verify-email", json={"code": code})
    unknown = client.post("/api/auth/verify-email", json={"code": "000000"})

    assert expired.status_code == unknown.status_code == 400
    assert expired.json() == unknown.json()
    assert User.objects.get(email="a@x.com").is_verified is False


def test_code_cannot_be_used_twice(client, signup):
    signup()
    code = _pending_code()
    assert client.post("/api/auth/verify-email", json={"code": code}).status_code == 200
    resp = client.post("/api/auth/verify-email", json={"code": code})
    assert resp.status_code == 400
    assert resp.json()["message"] == "Invalid or expired verification code"


def test_verify_email_requires_code(client):
    resp = client.post("/api/auth/verify-email", json={})
    assert resp.status_code == 400
    assert resp.json()["code"] == "VALIDATION_ERROR"


def test_welcome_failure_does_not_undo_verification(client, signup, failing_sender):
    signup()
    resp = client.post("/api/auth/verify-email", json={"code": _pending_code()})
    assert resp.status_code == 200
    assert failing_sender.attempts == 2
    assert User.objects.get(email="a@x.com").is_verified is True
