# tests/test_users_api.py
from exercise_tracker_api.app.core.exceptions import StoreError
from exercise_tracker_api.app.main import app as default_app

API_PREFIX = "/api/v1"
USERS = f"{API_PREFIX}/users/"


def _create_user(client, username="alice"):
    resp = client.post(USERS, json={"username": username})
    assert resp.status_code == 200, resp.text
    return resp.json()


def test_user_routes_registered_and_tagged():
    paths = default_app.openapi()["paths"]
    assert {"get", "post"} <= set(paths[USERS])
    assert "post" in paths[f"{USERS}{{user_id}}/exercises"]
    assert "get" in paths[f"{USERS}{{user_id}}/logs"]
    for path, operations in paths.items():
        if path.startswith(USERS):
            for operation in operations.values():
                assert "users" in operation["tags"]


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_create_and_list_users(client):
    alice = _create_user(client, "alice")
    bob = _create_user(client, "bob")
    assert len(alice["id"]) == 24
    assert alice["id"] != bob["id"]

    resp = client.get(USERS)
    assert resp.status_code == 200
    assert resp.json() == [alice, bob]


def test_create_user_requires_username(client):
    assert client.post(USERS, json={}).status_code == 400
    assert client.post(USERS, json={"username": ""}).status_code == 400
    resp = client.post(USERS, json={"username": "  "})
    assert resp.status_code == 400
    assert resp.json() == {"detail": "Username is required"}


def test_malformed_body_is_400(client):
    resp = client.post(USERS, content=b"{not json", headers={"Content-Type": "application/json"})
    assert resp.status_code == 400


def test_duplicate_username_is_409(client):
    _create_user(client, "alice")
    resp = client.post(USERS, json={"username": "alice"})
    assert resp.status_code == 409
    assert resp.json() == {"detail": "Username already taken"}


def test_end_to_end_exercise_and_log(client):
    user = _create_user(client, "alice")

    resp = client.post(
        f"{USERS}{user['id']}/exercises",
        json={"description": "run", "duration": 30, "date": "2024-01-05"},
    )
    assert resp.status_code == 200
    assert resp.json() == {
        "id": user["id"],
        "username": "alice",
        "date": "Fri Jan 05 2024",
        "duration": 30,
        "description": "run",
    }

    resp = client.get(f"{USERS}{user['id']}/logs")
    assert resp.status_code == 200
    assert resp.json() == {
        "id": user["id"],
        "username": "alice",
        "count": 1,
        "log": [{"description": "run", "duration": 30, "date": "Fri Jan 05 2024"}],
    }


def test_duration_as_numeric_string_is_accepted(client):
    user = _create_user(client)
    resp = client.post(f"{USERS}{user['id']}/exercises", json={"description": "row", "duration": "25"})
    assert resp.status_code == 200
    assert resp.json()["duration"] == 25


def test_exercise_validation_errors_are_400(client):
    user = _create_user(client)
    url = f"{USERS}{user['id']}/exercises"

    assert client.post(url, json={"duration": 30}).status_code == 400
    assert client.post(url, json={"description": "run"}).status_code == 400
    for duration in (0, -1, "abc", True):
        resp = client.post(url, json={"description": "run", "duration": duration})
        assert resp.status_code == 400
        assert resp.json() == {"detail": "Duration must be a positive number"}
    resp = client.post(url, json={"description": "run", "duration": 30, "date": "someday"})
    assert resp.status_code == 400
    assert resp.json() == {"detail": "Invalid date format. Use YYYY-MM-DD"}

    assert client.get(f"{USERS}{user['id']}/logs").json()["count"] == 0


def test_oversized_duration_is_400(client):
    user = _create_user(client)
    url = f"{USERS}{user['id']}/exercises"
    for duration in (10**30, "1" * 30):
        resp = client.post(url, json={"description": "run", "duration": duration})
        assert resp.status_code == 400
        assert resp.json() == {"detail": "Duration is too large"}


def test_lone_surrogates_are_400(client):
    headers = {"Content-Type": "application/json"}
    resp = client.post(USERS, content=b'{"username": "\\ud800"}', headers=headers)
    assert resp.status_code == 400

    user = _create_user(client)
    resp = client.post(
        f"{USERS}{user['id']}/exercises",
        content=b'{"description": "run \\udfff", "duration": 30}',
        headers=headers,
    )
    assert resp.status_code == 400
    assert client.get(f"{USERS}{user['id']}/logs").json()["count"] == 0


def test_exercise_for_unknown_user_is_404(client, store):
    resp = client.post(f"{USERS}{'0' * 24}/exercises", json={"description": "run", "duration": 30})
    assert resp.status_code == 404
    assert resp.json() == {"detail": "User not found"}
    assert store.count_exercises("0" * 24) == 0


def test_log_for_unknown_user_is_404(client):
    resp = client.get(f"{USERS}{'0' * 24}/logs")
    assert resp.status_code == 404


def test_log_filters_and_limit(client):
    user = _create_user(client)
    url = f"{USERS}{user['id']}"
    for day in range(1, 11):
        client.post(f"{url}/exercises", json={"description": f"d{day}", "duration": 5, "date": f"2024-01-{day:02d}"})

    resp = client.get(f"{url}/logs", params={"from": "2024-01-03", "to": "2024-01-08", "limit": 2})
    body = resp.json()
    assert resp.status_code == 200
    assert body["count"] == 6
    assert [entry["description"] for entry in body["log"]] == ["d8", "d7"]

    body = client.get(f"{url}/logs", params={"limit": 3}).json()
    assert body["count"] == 10
    assert [entry["date"] for entry in body["log"]] == ["Wed Jan 10 2024", "Tue Jan 09 2024", "Mon Jan 08 2024"]


def test_log_date_range_inclusion(client):
    user = _create_user(client)
    url = f"{USERS}{user['id']}"
    client.post(f"{url}/exercises", json={"description": "swim", "duration": 40, "date": "2024-03-01"})

    included = client.get(f"{url}/logs", params={"from": "2024-02-01", "to": "2024-04-01"}).json()
    assert included["count"] == 1
    assert included["log"][0]["date"] == "Fri Mar 01 2024"

    excluded = client.get(f"{url}/logs", params={"to": "2024-01-01"}).json()
    assert excluded["count"] == 0
    assert excluded["log"] == []


def test_invalid_limit_is_400(client):
    user = _create_user(client)
    assert client.get(f"{USERS}{user['id']}/logs", params={"limit": "abc"}).status_code == 400
    assert client.get(f"{USERS}{user['id']}/logs", params={"limit": -1}).status_code == 400
    assert client.get(f"{USERS}{user['id']}/logs", params={"limit": 10**20}).status_code == 400


def test_store_failures_are_500_without_details(client, store, monkeypatch):
    user = _create_user(client)

    def boom(*args, **kwargs):
        raise StoreError("disk I/O error at /secret/path")

    monkeypatch.setattr(store, "create_user", boom)
    monkeypatch.setattr(store, "list_users", boom)
    monkeypatch.setattr(store, "insert_exercise", boom)
    monkeypatch.setattr(store, "query_exercises", boom)

    checks = [
        (client.post(USERS, json={"username": "bob"}), "Database error creating user"),
        (client.get(USERS), "Database error fetching users"),
        (
            client.post(f"{USERS}{user['id']}/exercises", json={"description": "run", "duration": 30}),
            "Database error adding exercise",
        ),
        (client.get(f"{USERS}{user['id']}/logs"), "Database error fetching user logs"),
    ]
    for resp, message in checks:
        assert resp.status_code == 500
        assert resp.json() == {"detail": message}
        assert "secret" not in resp.text
