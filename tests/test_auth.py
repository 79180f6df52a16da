"""
Tests for authentication endpoints.
"""

from app.main import app
from app.api.dependencies import get_google_auth_service
from app.core.security import create_refresh_token, decode_access_token, get_password_hash
from app.domain.enums import UserRole
from app.infrastructure.orm import UserModel
from tests.helpers import TEST_PASSWORD, FakeGoogleAuth, auth_headers


class TestRegistration:
    """Customer self-registration"""

    def test_register_creates_customer(self, client):
        """A new account gets the CUSTOMER role and no password in the response"""
        response = client.post("/api/v1/auth/register", json={
            "email": "New.User@Example.com",
            "username": "newuser",
            "password": "Password123",
        })

        assert response.status_code == 201
        data = response.json()
        assert data["email"] == "new.user@example.com"
        assert data["role"] == "CUSTOMER"
        assert "password" not in data

    def test_register_duplicate_email(self, client, customer):
        """Registering an existing email is a conflict"""
        response = client.post("/api/v1/auth/register", json={
            "email": customer.email,
            "username": "someoneelse",
            "password": "Password123",
        })

        assert response.status_code == 409
        body = response.json()
        assert body["statusCode"] == 409
        assert body["message"] == "Email already registered"
        assert body["path"] == "/api/v1/auth/register"

    def test_register_validation_error_shape(self, client):
        """Invalid bodies produce 400 with a list of messages"""
        response = client.post("/api/v1/auth/register", json={"email": "not-an-email"})

        assert response.status_code == 400
        assert isinstance(response.json()["message"], list)


class TestLogin:
    """Password, PIN and token endpoints"""

    def test_login_by_email_and_username(self, client, customer):
        """Either identifier logs the user in"""
        for identifier in (customer.email, customer.username):
            response = client.post("/api/v1/auth/login", json={
                "login_identifier": identifier,
                "password": TEST_PASSWORD,
            })
            assert response.status_code == 200
            data = response.json()
            assert data["access_token"]
            assert data["refresh_token"]
            assert data["user"]["id"] == str(customer.id)

    def test_login_wrong_password(self, client, customer):
        response = client.post("/api/v1/auth/login", json={
            "login_identifier": customer.email,
            "password": "wrong-password",
        })

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid credentials"

    def test_login_inactive_user(self, client, make_user):
        """Disabled accounts cannot log in"""
        user = make_user(is_active=False)
        response = client.post("/api/v1/auth/login", json={
            "login_identifier": user.email,
            "password": TEST_PASSWORD,
        })

        assert response.status_code == 401

    def test_inspector_pin_login(self, client, make_user):
        inspector = make_user(UserRole.INSPECTOR, pin=get_password_hash("123456"))

        ok = client.post("/api/v1/auth/login/inspector", json={"email": inspector.email, "pin": "123456"})
        bad = client.post("/api/v1/auth/login/inspector", json={"email": inspector.email, "pin": "654321"})

        assert ok.status_code == 200
        assert ok.json()["user"]["role"] == "INSPECTOR"
        assert bad.status_code == 401

    def test_refresh_rotates_tokens(self, client, customer):
        """A refresh token works once; the rotated-out token is rejected"""
        login = client.post("/api/v1/auth/login", json={
            "login_identifier": customer.email,
            "password": TEST_PASSWORD,
        }).json()

        first = client.post("/api/v1/auth/refresh", json={"refresh_token": login["refresh_token"]})
        assert first.status_code == 200

        reused = client.post("/api/v1/auth/refresh", json={"refresh_token": login["refresh_token"]})
        assert reused.status_code == 401

    def test_refresh_with_unknown_token(self, client, customer):
        """A validly signed token that was never issued is rejected"""
        response = client.post("/api/v1/auth/refresh", json={"refresh_token": create_refresh_token(str(customer.id))})

        assert response.status_code == 401


class TestSession:
    """Profile, token check and logout"""

    def test_profile_requires_token(self, client):
        response = client.get("/api/v1/auth/profile")

        assert response.status_code == 401
        assert response.json()["statusCode"] == 401

    def test_profile(self, client, customer):
        response = client.get("/api/v1/auth/profile", headers=auth_headers(customer))

        assert response.status_code == 200
        assert response.json()["email"] == customer.email

    def test_check_token(self, client, admin, admin_headers):
        response = client.get("/api/v1/auth/check-token", headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {"valid": True, "user_id": str(admin.id), "role": "ADMIN"}

    def test_logout_revokes_access_token(self, client, customer):
        """After logout the same access token is refused"""
        headers = auth_headers(customer)

        response = client.post("/api/v1/auth/logout", headers=headers)
        assert response.status_code == 200

        response = client.get("/api/v1/auth/profile", headers=headers)
        assert response.status_code == 401


class TestTokens:

    def test_refresh_token_is_not_an_access_token(self, client, customer):
        """A refresh token cannot be used as a bearer token"""
        headers = {"Authorization": f"Bearer {create_refresh_token(str(customer.id))}"}

        assert decode_access_token(headers["Authorization"].split()[1]) is None
        assert client.get("/api/v1/auth/profile", headers=headers).status_code == 401


class TestGoogleLogin:
    """Sign-in with a Google ID token"""

    def use_google(self, **claims):
        fake = FakeGoogleAuth(**claims)
        app.dependency_overrides[get_google_auth_service] = lambda: fake
        return fake

    def test_creates_customer_on_first_sign_in(self, client, db_session):
        self.use_google(google_id="104857600123", email="New.Driver@gmail.com")

        response = client.post("/api/v1/auth/google", json={"id_token": "token"})

        assert response.status_code == 200
        data = response.json()
        assert data["access_token"] and data["refresh_token"]
        assert data["user"]["role"] == "CUSTOMER"
        assert data["user"]["name"] == "User_104857"
        row = db_session.query(UserModel).filter_by(google_id="104857600123").one()
        assert row.email == "new.driver@gmail.com"

    def test_finds_existing_user_by_google_id(self, client, make_user, db_session):
        user = make_user(google_id="g-123", name="Budi")
        self.use_google(google_id="g-123", email="other@gmail.com")

        response = client.post("/api/v1/auth/google", json={"id_token": "token"})

        assert response.status_code == 200
        assert response.json()["user"]["id"] == str(user.id)
        assert db_session.query(UserModel).count() == 1

    def test_links_existing_email(self, client, customer, db_session):
        self.use_google(google_id="g-456", email=customer.email, name="Customer Google")

        response = client.post("/api/v1/auth/google", json={"id_token": "token"})

        assert response.status_code == 200
        assert response.json()["user"]["id"] == str(customer.id)
        db_session.expire_all()
        assert db_session.get(UserModel, customer.id).google_id == "g-456"

    def test_email_linked_to_other_google_account(self, client, make_user):
        user = make_user(google_id="g-original")
        self.use_google(google_id="g-other", email=user.email)

        response = client.post("/api/v1/auth/google", json={"id_token": "token"})

        assert response.status_code == 409

    def test_inactive_user_is_rejected(self, client, make_user):
        make_user(google_id="g-789", is_active=False)
        self.use_google(google_id="g-789")

        response = client.post("/api/v1/auth/google", json={"id_token": "token"})

        assert response.status_code == 401

    def test_invalid_token(self, client):
        self.use_google()

        response = client.post("/api/v1/auth/google", json={"id_token": "bad"})

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid Google token"
