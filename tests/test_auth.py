import unittest

from tests.support import PASSWORD, ApiTestCase


class AuthApiTests(ApiTestCase):
    def test_register_logs_in(self):
        client = self.anonymous()
        response = client.post(
            "/auth/register", json={"username": "alice", "password": PASSWORD}
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json(), {"username": "alice"})

        me = client.get("/auth/me")
        self.assertEqual(me.status_code, 200)
        self.assertEqual(me.json(), {"username": "alice"})

    def test_register_duplicate_username(self):
        self.register("alice")
        response = self.anonymous().post(
            "/auth/register", json={"username": "alice", "password": "other"}
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "Username already exists"})

    def test_usernames_are_case_sensitive(self):
        self.register("alice")
        self.register("Alice")

    def test_register_requires_username_and_password(self):
        client = self.anonymous()
        response = client.post("/auth/register", json={"username": "  ", "password": "x"})
        self.assertEqual(response.status_code, 400)
        response = client.post("/auth/register", json={"username": "alice"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "Password is required"})

    def test_login_and_wrong_password(self):
        self.register("alice")

        client = self.anonymous()
        ok = client.post("/auth/login", json={"username": "alice", "password": PASSWORD})
        self.assertEqual(ok.status_code, 200)
        self.assertEqual(ok.json(), {"username": "alice"})
        self.assertEqual(client.get("/auth/me").json(), {"username": "alice"})

        bad = self.anonymous().post(
            "/auth/login", json={"username": "alice", "password": "wrong"}
        )
        self.assertEqual(bad.status_code, 401)
        self.assertEqual(bad.json(), {"error": "Invalid credentials"})

    def test_unknown_user_gets_same_message(self):
        response = self.anonymous().post(
            "/auth/login", json={"username": "nobody", "password": PASSWORD}
        )
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"error": "Invalid credentials"})

    def test_me_requires_session(self):
        response = self.anonymous().get("/auth/me")
        self.assertEqual(response.status_code, 401)
        self.assertIn("error", response.json())

    def test_logout_is_idempotent(self):
        client = self.register("alice")

        first = client.post("/auth/logout")
        self.assertEqual(first.status_code, 200)
        self.assertEqual(first.json()["message"], "Logged out")
        self.assertEqual(client.get("/auth/me").status_code, 401)

        second = client.post("/auth/logout")
        self.assertEqual(second.status_code, 200)
        self.assertEqual(second.json()["message"], "Already logged out")

    def test_protected_routes_require_session(self):
        client = self.anonymous()
        self.assertEqual(client.get("/boards").status_code, 401)
        self.assertEqual(client.post("/boards", json={"name": "x"}).status_code, 401)
        self.assertEqual(client.get("/characters").status_code, 401)


if __name__ == "__main__":
    unittest.main()
