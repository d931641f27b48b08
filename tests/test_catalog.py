import unittest
from unittest import mock

from tests.support import ApiTestCase


class CatalogApiTests(ApiTestCase):
    def test_add_and_list_characters(self):
        client = self.register("alice")
        created = client.post(
            "/characters",
            json={"name": "Goku", "series": "DB", "imageUrl": "x", "tags": ["tv", "tv"]},
        )
        self.assertEqual(created.status_code, 201)
        self.assertTrue(created.json()["id"])
        self.assertEqual(created.json()["tags"], ["tv"])

        listed = client.get("/characters")
        self.assertEqual(listed.status_code, 200)
        self.assertEqual([c["name"] for c in listed.json()], ["Goku"])

    def test_name_required(self):
        client = self.register("alice")
        response = client.post("/characters", json={"series": "DB"})
        self.assertEqual(response.status_code, 400)


class SystemApiTests(ApiTestCase):
    def test_health(self):
        response = self.anonymous().get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"ok": True})

    def test_config_lists_tiers(self):
        response = self.anonymous().get("/config")
        self.assertEqual(response.json()["tiers"], ["S", "A", "B", "C", "D"])

    def test_config_exposes_frontend_origin(self):
        with mock.patch("tierboard.api.routers.system.FRONTEND_ORIGIN", "https://tiers.example"):
            response = self.anonymous().get("/config")
        self.assertEqual(response.json()["frontend_origin"], "https://tiers.example")

    def test_unknown_route_uses_error_shape(self):
        response = self.anonymous().get("/nope")
        self.assertEqual(response.status_code, 404)
        self.assertIn("error", response.json())


if __name__ == "__main__":
    unittest.main()
