from backend import settings as settings_module
from timeline.csv_codec import BOM


def _create(client, headers, name="Launch"):
    response = client.post("/v1/projects", json={"name": name}, headers=headers)
    assert response.status_code == 200
    return response.json()


def _fill(client, headers, project_id):
    payload = {
        "topics": [{"id": "design", "name": "Design", "color": "#ff0000"}],
        "tasks": [
            {"id": "t1", "topicId": "design", "title": "Wireframes", "start": "2024-01-10", "end": "2024-01-12"},
        ],
    }
    response = client.put(f"/v1/projects/{project_id}", json=payload, headers=headers)
    assert response.status_code == 200
    return response.json()


def test_health(client):
    assert client.get("/health").json() == {"ok": True}


def test_requests_need_backend_token(client, auth_headers):
    assert client.get("/v1/projects").status_code == 401
    wrong = {**auth_headers, "X-Backend-Token": "nope"}
    assert client.get("/v1/projects", headers=wrong).status_code == 401
    no_user = {"X-Backend-Token": auth_headers["X-Backend-Token"]}
    assert client.get("/v1/projects", headers=no_user).status_code == 401


def test_allowed_emails_are_enforced(client, auth_headers, monkeypatch):
    monkeypatch.setenv("ALLOWED_EMAILS", "boss@example.com")
    monkeypatch.setattr(settings_module, "_settings", None)
    assert client.get("/v1/projects", headers=auth_headers).status_code == 403


def test_create_list_and_get(client, auth_headers):
    document = _create(client, auth_headers)
    assert document["name"] == "Launch"
    assert [topic["id"] for topic in document["topics"]] == ["unassigned"]
    assert document["tasks"] == []

    items = client.get("/v1/projects", headers=auth_headers).json()["items"]
    assert [item["id"] for item in items] == [document["id"]]

    fetched = client.get(f"/v1/projects/{document['id']}", headers=auth_headers).json()
    assert fetched["id"] == document["id"]


def test_blank_name_is_rejected(client, auth_headers):
    response = client.post("/v1/projects", json={"name": "   "}, headers=auth_headers)
    assert response.status_code == 400


def test_save_keeps_name_and_adds_sentinel(client, auth_headers):
    document = _create(client, auth_headers)
    saved = _fill(client, auth_headers, document["id"])
    assert saved["name"] == "Launch"
    assert [topic["id"] for topic in saved["topics"]] == ["unassigned", "design"]
    assert saved["tasks"][0]["topicId"] == "design"

    renamed = client.put(
        f"/v1/projects/{document['id']}",
        json={"name": "Relaunch", "topics": saved["topics"], "tasks": saved["tasks"]},
        headers=auth_headers,
    ).json()
    assert renamed["name"] == "Relaunch"
    assert len(renamed["tasks"]) == 1


def test_projects_are_scoped_per_user(client, auth_headers):
    document = _create(client, auth_headers)
    other = {**auth_headers, "X-User-Email": "someone@example.com"}
    assert client.get(f"/v1/projects/{document['id']}", headers=other).status_code == 404
    assert client.put(f"/v1/projects/{document['id']}", json={"name": "x"}, headers=other).status_code == 404
    assert client.get("/v1/projects", headers=other).json()["items"] == []


def test_layout_endpoint(client, auth_headers):
    document = _create(client, auth_headers)
    _fill(client, auth_headers, document["id"])
    response = client.get(
        f"/v1/projects/{document['id']}/layout",
        params={"today": "2024-01-20", "day_width": 20, "visible": ["design"]},
        headers=auth_headers,
    )
    assert response.status_code == 200
    layout = response.json()
    assert layout["date_range"] == {"min": "2024-01-08", "max": "2024-02-06"}
    assert layout["day_width"] == 20
    assert layout["mirrored"] is True
    assert [block["visible"] for block in layout["blocks"]] == [False, True]
    assert layout["blocks"][1]["rows"][0]["kind"] == "range"

    plain = client.get(
        f"/v1/projects/{document['id']}/layout",
        params={"today": "2024-01-20", "mirrored": "false"},
        headers=auth_headers,
    ).json()
    assert plain["mirrored"] is False
    assert plain["cell_lefts"][0] == 0


def test_layout_for_missing_project(client, auth_headers):
    assert client.get("/v1/projects/missing/layout", headers=auth_headers).status_code == 404


def test_export_csv(client, auth_headers):
    document = _create(client, auth_headers)
    _fill(client, auth_headers, document["id"])
    response = client.get(f"/v1/projects/{document['id']}/export.csv", headers=auth_headers)
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert "filename*=UTF-8''Launch.csv" in response.headers["content-disposition"]
    text = response.content.decode("utf-8")
    assert text.startswith(BOM)
    assert "Design,Wireframes,2024-01-10,2024-01-12,3," in text


def test_import_csv(client, auth_headers):
    document = _create(client, auth_headers)
    _fill(client, auth_headers, document["id"])
    response = client.post(
        f"/v1/projects/{document['id']}/import",
        json={"csv": "topic,title,start,duration_days\nOps,Deploy,2024-02-01,2\nOps,,2024-02-01,2\n"},
        headers=auth_headers,
    )
    assert response.status_code == 200
    result = response.json()
    assert result["added_tasks"] == 1
    assert [topic["id"] for topic in result["added_topics"]] == ["ops"]
    assert result["skipped_rows"] == 1
    deploy = [task for task in result["project"]["tasks"] if task["title"] == "Deploy"][0]
    assert deploy["end"] == "2024-02-02"

    stored = client.get(f"/v1/projects/{document['id']}", headers=auth_headers).json()
    assert len(stored["tasks"]) == 2


def test_import_skips_rows_with_unparseable_start(client, auth_headers):
    document = _create(client, auth_headers)
    response = client.post(
        f"/v1/projects/{document['id']}/import",
        json={"csv": "title,start,duration_days\nX,31/01/2024,2\nY,2024-01-31,2\n"},
        headers=auth_headers,
    )
    assert response.status_code == 200
    result = response.json()
    assert result["added_tasks"] == 1
    assert result["skipped_rows"] == 1
    assert [task["end"] for task in result["project"]["tasks"]] == ["2024-02-01"]


def test_import_rejects_unreadable_csv(client, auth_headers):
    document = _create(client, auth_headers)
    response = client.post(f"/v1/projects/{document['id']}/import", json={"csv": ""}, headers=auth_headers)
    assert response.status_code == 400


def test_delete_project(client, auth_headers):
    document = _create(client, auth_headers)
    assert client.delete(f"/v1/projects/{document['id']}", headers=auth_headers).json() == {"ok": True}
    assert client.get(f"/v1/projects/{document['id']}", headers=auth_headers).status_code == 404
    assert client.delete(f"/v1/projects/{document['id']}", headers=auth_headers).status_code == 404
