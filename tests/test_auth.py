from datetime import timedelta

from storefront.utils.tokenJWT import create_access_token, decode_access_token
from tests.conftest import bearer, register


def test_register_returns_user_and_token(client):
    body = register(client, email="New.User@Mail.com")
    assert body["tokenType"] == "bearer"
    assert body["accessToken"]
    assert body["user"]["email"] == "new.user@mail.com"
    assert body["user"]["firstName"] == "Ravi"
    assert "passwordHash" not in body["user"]
    assert "password" not in body["user"]


def test_register_twice_with_same_email_is_rejected(client):
    register(client, email="dup@mail.com")
    response = client.post("/auth/register", json={
        "email": "DUP@mail.com", "password": "another1", "firstName": "A", "lastName": "B",
    })
    assert response.status_code == 400
    assert response.json()["detail"] == "User already exists"


def test_register_validation(client):
    response = client.post("/auth/register", json={
        "email": "not-an-email", "password": "secret123", "firstName": "A", "lastName": "B",
    })
    assert response.status_code == 400
    body = response.json()
    assert body["detail"] == "Validation failed"
    assert body["errors"]

    response = client.post("/auth/register", json={"email": "ok@mail.com", "password": "secret123"})
    assert response.status_code == 400


def test_login_success(client):
    register(client, email="login@mail.com", password="hunter22")
    response = client.post("/auth/login", json={"email": "login@mail.com", "password": "hunter22"})
    assert response.status_code == 200
    body = response.json()
    assert body["user"]["email"] == "login@mail.com"

    me = client.get("/auth/me", headers=bearer(body["accessToken"]))
    assert me.status_code == 200
    assert me.json()["email"] == "login@mail.com"


def test_login_does_not_reveal_which_part_was_wrong(client):
    register(client, email="known@mail.com", password="right-password")

    wrong_password = client.post("/auth/login", json={"email": "known@mail.com", "password": "wrong-password"})
    unknown_email = client.post("/auth/login", json={"email": "ghost@mail.com", "password": "right-password"})

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json() == {"detail": "Invalid credentials"}


def test_password_is_stored_hashed(client):
    register(client, email="hash@mail.com", password="plain-text-pw")
    storage = client.app.state.memory_storage
    if storage is None:
        from storefront.storage import SqlStorage
        db = client.app.state.session_factory()
        try:
            user = SqlStorage(db).get_user_by_email("hash@mail.com")
        finally:
            db.close()
    else:
        user = storage.get_user_by_email("hash@mail.com")
    assert user.password_hash != "plain-text-pw"
    assert user.password_hash.startswith("$2")


def test_me_requires_token(client):
    response = client.get("/auth/me")
    assert response.status_code == 401
    assert response.json()["detail"] == "Access token required"


def test_me_rejects_garbage_token(client):
    response = client.get("/auth/me", headers=bearer("garbage"))
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid or expired token"


def test_me_rejects_expired_token(client):
    user = register(client)["user"]
    settings = client.app.state.settings
    token = create_access_token(user["id"], settings, expires_delta=timedelta(seconds=-5))
    response = client.get("/auth/me", headers=bearer(token))
    assert response.status_code == 401


def test_me_rejects_token_signed_with_other_key(client):
    user = register(client)["user"]
    other = client.app.state.settings.model_copy(update={"SECRET_KEY": "someone-else"})
    response = client.get("/auth/me", headers=bearer(create_access_token(user["id"], other)))
    assert response.status_code == 401


def test_valid_token_for_missing_user_is_forbidden(client):
    token = create_access_token(424242, client.app.state.settings)
    response = client.get("/auth/me", headers=bearer(token))
    assert response.status_code == 403
    assert response.json()["detail"] == "User not found"


def test_token_round_trip(client):
    settings = client.app.state.settings
    assert decode_access_token(create_access_token(7, settings), settings) == 7
    assert decode_access_token("nope", settings) is None
