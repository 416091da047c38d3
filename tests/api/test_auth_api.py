"""
API tests for magic-link sign-in and cookie sessions
"""
import pytest

from tests.factories import login


@pytest.fixture
def users(staff_user, hr_user):
    return staff_user, hr_user


class TestMagicLink:
    """Test POST /api/auth/magic-link"""

    def test_sends_link(self, client, notifier, users):
        """Test a link is mailed to the department's user"""
        response = client.post("/api/auth/magic-link", json={"department": "IT"})

        assert response.status_code == 200
        assert response.json() == {"message": "Magic link sent successfully.", "email": "it.staff@org.com"}
        assert notifier.messages[0]["to"] == "it.staff@org.com"
        assert notifier.last_token() is not None
        assert notifier.last_token() not in response.text

    def test_unknown_department(self, client, users):
        """Test an unknown department is a 404 with the standard error body"""
        response = client.post("/api/auth/magic-link", json={"department": "Marketing"})

        assert response.status_code == 404
        error = response.json()["error"]
        assert error["code"] == "EntityNotFoundException"
        assert error["path"] == "/api/auth/magic-link"

    def test_padded_department(self, client, notifier, users):
        """Test a padded department name does not match"""
        response = client.post("/api/auth/magic-link", json={"department": "  IT  "})
        assert response.status_code == 404
        assert notifier.messages == []

    def test_delivery_failure(self, client, notifier, users):
        """Test a notifier failure surfaces as 502"""
        notifier.fail = True
        response = client.post("/api/auth/magic-link", json={"department": "IT"})
        assert response.status_code == 502


class TestVerify:
    """Test POST /api/auth/verify"""

    def test_sets_session_cookie(self, client, notifier, users):
        """Test a valid token logs the user in with an HttpOnly cookie"""
        client.post("/api/auth/magic-link", json={"department": "IT"})
        response = client.post("/api/auth/verify", json={"token": notifier.last_token()})

        assert response.status_code == 200
        assert response.json()["user"] == {"email": "it.staff@org.com", "role": "Staff", "department": "IT"}

        cookie = response.headers["set-cookie"].lower()
        assert cookie.startswith("auth_token=")
        assert "httponly" in cookie
        assert "samesite=strict" in cookie
        assert "max-age=86400" in cookie
        assert client.cookies.get("auth_token")

    def test_token_reuse_rejected(self, client, notifier, users):
        """Test a token works once"""
        client.post("/api/auth/magic-link", json={"department": "IT"})
        token = notifier.last_token()
        assert client.post("/api/auth/verify", json={"token": token}).status_code == 200

        response = client.post("/api/auth/verify", json={"token": token})
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "InvalidOrExpiredTokenException"

    def test_invalid_token_clears_cookie(self, client, users):
        """Test an invalid token asks the browser to drop its credential"""
        client.cookies.set("auth_token", "stale")
        response = client.post("/api/auth/verify", json={"token": "nope"})

        assert response.status_code == 401
        assert response.headers["set-cookie"].startswith("auth_token=")
        assert "max-age=0" in response.headers["set-cookie"].lower()


class TestSession:
    """Test GET /api/auth/session and POST /api/auth/logout"""

    def test_session_identity(self, client, notifier, users):
        """Test the session endpoint returns the signed-in identity"""
        login(client, notifier, "Human Resources")

        response = client.get("/api/auth/session")
        assert response.status_code == 200
        assert response.json() == {"email": "hr@org.com", "role": "HR", "department": "Human Resources"}

    def test_no_session(self, client):
        """Test a request without cookie is a 401"""
        response = client.get("/api/auth/session")
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "NoSessionException"

    def test_unknown_session_cleared(self, client):
        """Test an unknown cookie is rejected and cleared"""
        client.cookies.set("auth_token", "f" * 64)
        response = client.get("/api/auth/session")

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "InvalidSessionException"
        assert "max-age=0" in response.headers["set-cookie"].lower()

    def test_logout(self, client, notifier, users):
        """Test logout ends the session and is idempotent"""
        login(client, notifier, "IT")
        credential = client.cookies.get("auth_token")

        response = client.post("/api/auth/logout")
        assert response.status_code == 200
        assert response.json() == {"success": True}

        client.cookies.set("auth_token", credential)
        assert client.get("/api/auth/session").status_code == 401

        client.cookies.set("auth_token", credential)
        assert client.post("/api/auth/logout").status_code == 200


class TestApplication:
    """Test service endpoints and middleware"""

    def test_health(self, client):
        """Test health and root endpoints"""
        assert client.get("/health").json() == {"status": "healthy"}
        assert client.get("/").json()["status"] == "running"

    def test_request_id_header(self, client):
        """Test every response carries a request id"""
        response = client.get("/health")
        assert response.headers.get("X-Request-ID")

    def test_request_id_is_echoed(self, client):
        """Test a caller-supplied request id is kept"""
        request_id = "0b8c7ae2d0a54a4c9d6c1e0bd1c6f0aa"
        response = client.get("/health", headers={"X-Request-ID": request_id})
        assert response.headers["X-Request-ID"] == request_id
