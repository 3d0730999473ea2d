def test_logs_are_admin_only(client, manager, auth_headers):
    assert client.get("/api/logs", headers=auth_headers(manager)).status_code == 403


def test_actions_are_audited(client, admin, server, auth_headers):
    client.post("/api/auth/login", json={"email": "server@example.com", "password": "password123"})
    created = client.post("/api/activities", headers=auth_headers(server), json={
        "type": "communication",
        "description": "Nota enviada à imprensa local",
        "date": "2024-06-01T10:00:00",
    }).json()
    client.patch(f"/api/activities/{created['id']}", headers=auth_headers(server), json={"observations": "Publicada"})
    client.delete(f"/api/activities/{created['id']}", headers=auth_headers(server))

    response = client.get("/api/logs", headers=auth_headers(admin))

    assert response.status_code == 200
    logs = response.json()
    actions = [entry["action"] for entry in logs]
    # Newest first
    assert actions == ["DELETE_ACTIVITY", "UPDATE_ACTIVITY", "CREATE_ACTIVITY", "LOGIN"]
    assert all(entry["userId"] == server.id for entry in logs)
    assert logs[0]["details"] == {"activityId": created["id"], "activityType": "communication"}
    assert logs[1]["details"]["updates"] == {"observations": "Publicada"}


def test_logs_filter_by_user(client, admin, server, auth_headers):
    client.post("/api/auth/login", json={"email": "server@example.com", "password": "password123"})
    client.post("/api/auth/login", json={"email": "admin@example.com", "password": "password123"})

    response = client.get("/api/logs", headers=auth_headers(admin), params={"userId": admin.id})

    assert [entry["action"] for entry in response.json()] == ["LOGIN"]
