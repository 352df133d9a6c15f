"""
Operator authentication tests.

Verifies:
- Protected endpoints return 401 without a valid token when auth is on
- Login issues a bearer token, logout revokes it
- Deactivated operators cannot log in
"""

import pytest

from tuldokbenta.services import auth_service, session_service
from tuldokbenta.services.auth_service import PasswordValidationError
from tuldokbenta.validation import ConflictError

from conftest import get_auth_token, auth_headers


# =============================================================================
# UNAUTHENTICATED ACCESS (401)
# =============================================================================


class TestUnauthenticatedAccess:

    @pytest.mark.parametrize(
        "method,path",
        [
            ("GET", "/api/inventory"),
            ("POST", "/api/inventory"),
            ("GET", "/api/services"),
            ("GET", "/api/open-sales"),
            ("POST", "/api/open-sales"),
            ("GET", "/api/closed-sales"),
            ("POST", "/api/pay-sale/1"),
            ("POST", "/api/revert-sale/1"),
            ("GET", "/api/invoice-numbers/next"),
            ("GET", "/api/reports/summary"),
        ],
    )
    def test_requires_auth(self, client, require_login, method, path):
        resp = getattr(client, method.lower())(path)
        assert resp.status_code == 401, f"{method} {path} returned {resp.status_code}"

    def test_garbage_token_rejected(self, client, require_login):
        resp = client.get('/api/inventory', headers=auth_headers('not-a-token'))
        assert resp.status_code == 401
        assert resp.get_json()['message'] == 'Invalid or expired token'

    def test_health_stays_open(self, client, require_login):
        assert client.get('/api/health').status_code == 200


# =============================================================================
# LOGIN / LOGOUT
# =============================================================================


class TestLoginLogout:

    def test_login_and_use_token(self, client, require_login, operator):
        resp = client.post('/api/auth/login', json={'username': 'counter', 'password': 'Password123'})
        assert resp.status_code == 200
        body = resp.get_json()
        assert body['operator']['username'] == 'counter'
        assert body['expires_at'].endswith('Z')

        resp = client.get('/api/inventory', headers=auth_headers(body['token']))
        assert resp.status_code == 200

    def test_wrong_password(self, client, require_login, operator):
        resp = client.post('/api/auth/login', json={'username': 'counter', 'password': 'nope12345'})
        assert resp.status_code == 401

    def test_missing_fields(self, client, db_session):
        resp = client.post('/api/auth/login', json={'username': 'counter'})
        assert resp.status_code == 400

    def test_logout_revokes_token(self, client, require_login, operator):
        token = get_auth_token(client, 'counter', 'Password123')
        assert token

        resp = client.post('/api/auth/logout', headers=auth_headers(token))
        assert resp.status_code == 200

        assert client.get('/api/inventory', headers=auth_headers(token)).status_code == 401
        assert client.post('/api/auth/logout', headers=auth_headers(token)).status_code == 401

    def test_deactivated_operator_cannot_login(self, client, db_session, require_login, operator):
        token = get_auth_token(client, 'counter', 'Password123')

        operator.is_active = False
        db_session.commit()

        assert get_auth_token(client, 'counter', 'Password123') is None
        # Existing sessions die with the account
        assert client.get('/api/inventory', headers=auth_headers(token)).status_code == 401


# =============================================================================
# SERVICE LAYER
# =============================================================================


class TestAuthService:

    @pytest.mark.parametrize("password", ["short1", "allletters", "12345678"])
    def test_weak_passwords_rejected(self, password):
        with pytest.raises(PasswordValidationError):
            auth_service.validate_password_strength(password)

    def test_hash_and_verify(self):
        hashed = auth_service.hash_password("Password123")
        assert hashed != "Password123"
        assert auth_service.verify_password("Password123", hashed)
        assert not auth_service.verify_password("Password124", hashed)
        assert not auth_service.verify_password("Password123", "not-a-bcrypt-hash")

    def test_create_operator_rejects_duplicates(self, db_session, operator):
        with pytest.raises(ConflictError):
            auth_service.create_operator("counter", "Password123")

    def test_authenticate_updates_last_login(self, db_session, operator):
        assert operator.last_login_at is None
        assert auth_service.authenticate("counter", "Password123").id == operator.id
        assert operator.last_login_at is not None

    def test_session_tokens_are_stored_hashed(self, db_session, operator):
        session, token = session_service.create_session(operator.id)
        assert session.token_hash == session_service.hash_token(token)
        assert session.token_hash != token
        assert session_service.validate_session(token).id == operator.id
