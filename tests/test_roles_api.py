from sqlalchemy.exc import OperationalError

from tests.base import ApiTestBase
from app.db.session import get_db
from app.main import app

URL = "/api/apps/user/roles"


class _TimedOutSession:
    def query(self, *args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("canceling statement due to statement timeout"))

    def close(self):
        return None


class RoleEndpointsTests(ApiTestBase):
    def setUp(self):
        super().setUp()
        self.viewer = self.create_role(name="Viewer", description="Read only")
        self.admin = self.create_role(name="Administrator", description="Everything")
        self.editor = self.create_role(name="Editor", description="Can edit content")
        self.create_user(role_id=self.editor, name="Ed", email="ed@example.com")
        self.create_user(role_id=self.editor, name="Edna", email="edna@example.com")
        self.create_user(role_id=self.admin, name="Ada", email="ada@example.com")

    def test_select_returns_id_name_pairs_ordered_by_name(self):
        response = self.client.get(f"{URL}/select")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.json(),
            [
                {"id": str(self.admin), "name": "Administrator"},
                {"id": str(self.editor), "name": "Editor"},
                {"id": str(self.viewer), "name": "Viewer"},
            ],
        )

    def test_list_flattens_user_count(self):
        body = self.client.get(URL, params={"sort": "userCount", "dir": "desc"}).json()
        self.assertEqual(
            [(row["name"], row["userCount"]) for row in body["data"]],
            [("Editor", 2), ("Administrator", 1), ("Viewer", 0)],
        )
        self.assertEqual(body["meta"], {"total": 3, "page": 1, "limit": 10})
        self.assertFalse(body["empty"])

    def test_list_search_on_description(self):
        body = self.client.get(URL, params={"query": "read"}).json()
        self.assertEqual([row["name"] for row in body["data"]], ["Viewer"])

    def test_timeout_is_reported_as_connection_error(self):
        def timed_out_db():
            yield _TimedOutSession()

        app.dependency_overrides[get_db] = timed_out_db
        response = self.client.get(f"{URL}/select")
        self.assertEqual(response.status_code, 500)
        self.assertEqual(
            response.json()["message"],
            "Database connection error. Please check the database configuration.",
        )
