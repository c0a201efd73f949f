from datetime import timedelta

from app.models.base import utcnow
from app.models.user import User


def _request_reset(client, email="a@x.com"):
    resp = client.post("/api/auth/forgot-password", json={"email": email})
    assert resp.status_code == 200
    return User.objects.get(email=email).reset_password_token


def test_forgot_password_stores_token_and_emails_link(client, signup, sender):
    signup()
    token = _request_reset(client)

    assert len(token) == 40
    int(token, 16)
    user = User.objects.get(email="a@x.com")
    assert user.reset_password_expires_at is not None

    to, subject, body = sender.sent[-1]
    assert to == "a@x.com"
    assert subject == "Password Reset Request"
    assert f"http://localhost:5173/reset-password/{token}" in body


def test_forgot_password_unknown_user(client):
    resp = client.post("/api/auth/forgot-password", json={"email": "nobody@x.com"})
    assert resp.status_code == 400
    assert resp.json()["message"] == "User not found"


def test_forgot_password_requires_email(client):
    resp = client.post("/api/auth/forgot-password", json={})
    assert resp.status_code == 400
    assert resp.json()["code"] == "VALIDATION_ERROR"


def test_forgot_password_keeps_token_when_delivery_fails(client, signup, failing_sender):
    signup()
    resp = client.post("/api/auth/forgot-password", json={"email": "a@x.com"})
    assert resp.status_code == 200
    assert User.objects.get(email="a@x.com").reset_password_token


def test_reset_password_replaces_hash_and_clears_token(client, signup, sender):
    signup()
    token = _request_reset(client)
    old_hash = User.objects.get(email="a@x.com").password
    client.post("/api/auth/logout")

    resp = client.post(f"/api/auth/reset-password/{token}", json={"password": "NewPass1!"})
    assert resp.status_code == 200
    # Resetting does not start a session
    assert "set-cookie" not in resp.headers

    user = User.objects.get(email="a@x.com")
    assert user.password != old_hash
    assert user.reset_password_token is None
    assert user.reset_password_expires_at is None
    assert sender.sent[-1][1] == "Password Reset Confirmation"


def test_reset_token_is_single_use(client, signup):
    signup()
    token = _request_reset(client)
    assert client.post(f"/api/auth/reset-password/{token}", json={"password": "NewPass1!"}).status_code == 200

    resp = client.post(f"/api/auth/reset-password/{token}", json={"password": "Another1!"})
    assert resp.status_code == 400
    assert resp.json()["message"] == "Invalid or expired reset token"
    login = client.post("/api/auth/login", json={"email": "a@x.com", "password": "NewPass1!"})
    assert login.status_code == 200


def test_expired_reset_token_is_rejected(client, signup):
    signup()
    token = _request_reset(client)
    user = User.objects.get(email="a@x.com")
    old_hash = user.password
    user.reset_password_expires_at = utcnow() - timedelta(minutes=1)
    user.save()

    resp = client.post(f"/api/auth/reset-password/{token}", json={"password": "NewPass1!"})
    assert resp.status_code == 400
    assert User.objects.get(email="a@x.com").password == old_hash


def test_reset_password_requires_password(client, signup):
    signup()
    token = _request_reset(client)
    resp = client.post(f"/api/auth/reset-password/{token}", json={})
    assert resp.status_code == 400
    assert resp.json()["code"] == "VALIDATION_ERROR"
    assert User.objects.get(email="a@x.com").reset_password_token == token
