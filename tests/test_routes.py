"""Tests for the HTTP endpoints."""

import json
from concurrent.futures import ThreadPoolExecutor

import pytest
from fastapi.testclient import TestClient

from godo.main import create_app


class TestTodoEndpoints:
    """Test creating and listing todos."""

    def setup_method(self):
        self.app = create_app()
        self.client = TestClient(self.app)

    def test_create_then_list(self):
        """A created todo shows up in the full listing."""
        r = self.client.post("/create", json={"list": "Inbox", "todo": "buy milk"})
        assert r.status_code == 200
        assert r.headers["content-type"] == "application/json"

        created = r.json()
        assert created["body"] == "buy milk"
        assert created["completed"] is False
        assert created["created_at"]

        r = self.client.get("/todos")
        assert r.status_code == 200
        assert r.json() == {
            "Inbox": [
                {"body": "buy milk", "completed": False, "created_at": created["created_at"]}
            ]
        }

    def test_list_empty(self):
        assert self.client.get("/todos").json() == {}

    def test_order_preserved_per_list(self):
        for body in ["one", "two", "three"]:
            self.client.post("/create", json={"list": "Work", "todo": body})
        self.client.post("/create", json={"list": "Home", "todo": "other"})

        lists = self.client.get("/todos").json()
        assert [t["body"] for t in lists["Work"]] == ["one", "two", "three"]
        assert [t["body"] for t in lists["Home"]] == ["other"]

    def test_list_defaults_to_inbox(self):
        self.client.post("/create", json={"todo": "no list given"})
        assert "Inbox" in self.client.get("/todos").json()

    def test_malformed_json_is_client_error(self):
        """Bad bodies get a 400 and the server keeps working."""
        r = self.client.post(
            "/create",
            content=b"{not json",
            headers={"Content-Type": "application/json"}
        )
        assert r.status_code == 400
        assert "detail" in r.json()

        r = self.client.post("/create", json={"list": "Inbox", "todo": "still up"})
        assert r.status_code == 200

    def test_json_body_decoded_whatever_content_type(self):
        """A JSON body is accepted even when labelled as form or plain text."""
        body = json.dumps({"list": "Inbox", "todo": "from curl"})
        for content_type in ["application/x-www-form-urlencoded", "text/plain"]:
            r = self.client.post("/create", content=body, headers={"Content-Type": content_type})
            assert r.status_code == 200
            assert r.json()["body"] == "from curl"

        assert len(self.client.get("/todos").json()["Inbox"]) == 2

    def test_empty_body_is_client_error(self):
        r = self.client.post("/create", content=b"")
        assert r.status_code == 400

    def test_concurrent_creates_through_server(self):
        """50 concurrent requests against one list all land exactly once."""
        with TestClient(create_app()) as client:
            def create(i):
                return client.post("/create", json={"list": "Inbox", "todo": f"todo {i}"})

            with ThreadPoolExecutor(max_workers=50) as pool:
                responses = list(pool.map(create, range(50)))

            assert all(r.status_code == 200 for r in responses)
            todos = client.get("/todos").json()["Inbox"]

        assert len(todos) == 50
        assert sorted(t["body"] for t in todos) == sorted(f"todo {i}" for i in range(50))

    def test_missing_todo_is_client_error(self):
        r = self.client.post("/create", json={"list": "Inbox"})
        assert r.status_code == 400

    def test_non_object_body_is_client_error(self):
        r = self.client.post("/create", json=["buy milk"])
        assert r.status_code == 400

    def test_apps_do_not_share_state(self):
        self.client.post("/create", json={"list": "Inbox", "todo": "mine"})
        other = TestClient(create_app())
        assert other.get("/todos").json() == {}


class TestCounterEndpoints:
    """Test the root echo and hit counter."""

    def setup_method(self):
        self.client = TestClient(create_app())

    def test_root_echoes_path(self):
        r = self.client.get("/")
        assert r.status_code == 200
        assert r.text == 'URL.Path = "/"\n'

    def test_unmatched_path_is_echoed(self):
        assert self.client.get("/some/where").text == 'URL.Path = "/some/where"\n'

    def test_count_after_three_hits(self):
        """Three root hits give Count 3."""
        assert self.client.get("/count").text == "Count 0\n"
        for path in ["/", "/a", "/b/c"]:
            self.client.get(path)
        assert self.client.get("/count").text == "Count 3\n"

    def test_any_method_counted(self):
        r = self.client.post("/", content=b"hello")
        assert r.status_code == 200
        assert r.text == 'URL.Path = "/"\n'
        self.client.put("/things/1")
        assert self.client.get("/count").text == "Count 2\n"

    def test_other_endpoints_not_counted(self):
        self.client.get("/todos")
        self.client.get("/request")
        self.client.get("/health")
        self.client.get("/count")
        assert self.client.get("/count").text == "Count 0\n"


class TestRequestEcho:
    """Test the debugging request dump."""

    def setup_method(self):
        self.client = TestClient(create_app())

    def test_dump_includes_request_details(self):
        r = self.client.get("/request?a=1&a=2&b=x", headers={"X-Test": "yes"})
        assert r.status_code == 200

        lines = r.text.splitlines()
        assert lines[0] == "GET /request?a=1&a=2&b=x HTTP/1.1"
        assert 'Header["X-Test"] = ["yes"]' in lines
        assert 'Host = "testserver"' in lines
        assert 'RemoteAddr = "testclient:50000"' in lines
        assert 'Form["a"] = ["1" "2"]' in lines
        assert 'Form["b"] = ["x"]' in lines

    def test_form_body_fields(self):
        r = self.client.post("/request?q=1", data={"name": "godo"})
        lines = r.text.splitlines()
        assert lines[0] == "POST /request?q=1 HTTP/1.1"
        assert 'Form["name"] = ["godo"]' in lines
        assert 'Form["q"] = ["1"]' in lines

    def test_any_method(self):
        r = self.client.delete("/request")
        assert r.text.startswith("DELETE /request HTTP/1.1\n")


def test_health():
    r = TestClient(create_app()).get("/health")
    assert r.status_code == 200 and r.json()["status"] == "ok"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
