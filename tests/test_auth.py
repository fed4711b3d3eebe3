"""
Tests for account registration, login and the current-user endpoint.
"""


class TestRegister:

    def test_register_creates_cashier(self, client):
        response = client.post("/register", json={
            "email": "Sana@FashionArena.pk",
            "password": "hunter22",
            "first_name": "Sana",
            "last_name": "Malik",
        })
        assert response.status_code == 200
        data = response.json()
        assert data["email"] == "sana@fashionarena.pk"
        assert data["role"] == "cashier"

    def test_duplicate_email_rejected(self, client, cashier_user):
        response = client.post("/register", json={
            "email": cashier_user.email,
            "password": "other",
            "first_name": "A",
            "last_name": "B",
        })
        assert response.status_code == 400


class TestLogin:

    def test_login_returns_token_usable_for_me(self, client, admin_user):
        response = client.post("/login", json={"email": admin_user.email, "password": "secret123"})
        assert response.status_code == 200
        token = response.json()["access_token"]

        me = client.get("/me", headers={"Authorization": f"Bearer {token}"})
        assert me.status_code == 200
        assert me.json()["role"] == "admin"

    def test_wrong_password(self, client, admin_user):
        response = client.post("/login", json={"email": admin_user.email, "password": "nope"})
        assert response.status_code == 401

    def test_invalid_token(self, client):
        response = client.get("/me", headers={"Authorization": "Bearer not-a-token"})
        assert response.status_code == 401
