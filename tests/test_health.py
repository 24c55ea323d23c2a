from tests.base import ApiTestCase


class HealthTests(ApiTestCase):
    def test_health(self):
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body["ok"])
        self.assertTrue(body["db"]["ok"])

    def test_health_head(self):
        self.assertEqual(self.client.head("/health").status_code, 200)
