from tests.base import ApiTestBase
from app.models.system_log import SystemLog
from app.models.system_setting import SystemSetting

URL = "/api/apps/system/settings"


class SystemSettingsTests(ApiTestBase):
    def _seed_settings(self):
        with self.SessionLocal() as db:
            row = SystemSetting(name="Shop", support_email="support@shop.io", facebook="https://facebook.com/shop")
            db.add(row)
            db.commit()
            return row.id

    def test_social_update_requires_actor(self):
        self._seed_settings()
        response = self.client.post(f"{URL}/social", json={"twitter": "https://x.com/shop"})
        self.assertEqual(response.status_code, 401)

    def test_missing_settings_row_is_not_found(self):
        _, headers = self.create_actor()
        response = self.client.post(f"{URL}/social", headers=headers, json={"twitter": "https://x.com/shop"})
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["message"], "Settings not found.")
        self.assertEqual(self.client.get(URL).status_code, 404)

    def test_invalid_social_payload_is_bad_request(self):
        self._seed_settings()
        _, headers = self.create_actor()
        for body in ({"twitter": "not a url"}, {"name": "Renamed"}):
            response = self.client.post(f"{URL}/social", headers=headers, json=body)
            self.assertEqual(response.status_code, 400, body)
        with self.SessionLocal() as db:
            self.assertEqual(db.query(SystemSetting).one().name, "Shop")
            self.assertEqual(db.query(SystemLog).count(), 0)

    def test_social_update_changes_only_given_fields_and_logs(self):
        settings_id = self._seed_settings()
        actor_id, headers = self.create_actor()
        response = self.client.post(
            f"{URL}/social",
            headers=headers,
            json={"twitter": "https://x.com/shop", "youtube": ""},
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"message": "Social settings updated successfully"})

        with self.SessionLocal() as db:
            row = db.query(SystemSetting).one()
            self.assertEqual(row.twitter, "https://x.com/shop")
            self.assertEqual(row.facebook, "https://facebook.com/shop")
            self.assertIsNone(row.youtube)
            log = db.query(SystemLog).one()
            self.assertEqual(log.event, "update")
            self.assertEqual(log.entity_type, "system.settings")
            self.assertEqual(log.entity_id, str(settings_id))
            self.assertEqual(log.user_id, actor_id)

        body = self.client.get(URL).json()
        self.assertEqual(body["name"], "Shop")
        self.assertEqual(body["supportEmail"], "support@shop.io")
        self.assertEqual(body["twitter"], "https://x.com/shop")
