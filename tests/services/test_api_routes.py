"""HTTP surface: caller headers, status mapping and end-to-end flows.

Tests:
    - Missing identity is 401, non-admin on admin routes is 403
    - Domain errors map to 400/402/404/409 with the error envelope
    - Model create -> execute -> weight change -> approve -> simulate over HTTP
"""

from uuid import uuid4


async def test_health(client):
    res = await client.get("/api/v1/health/")
    assert res.status_code == 200
    assert res.json()["status"] == "healthy"


async def test_ready(client):
    res = await client.get("/api/v1/health/ready")
    assert res.status_code == 200


async def test_missing_identity_is_401(client):
    res = await client.get("/api/v1/users/me")
    assert res.status_code == 401


async def test_profile(client, make_user, auth):
    user = await make_user(tokens=3)
    res = await client.get("/api/v1/users/me", headers=auth(user))
    assert res.status_code == 200
    assert res.json()["email"] == user.email
    assert float(res.json()["tokens"]) == 3.0


async def test_provision_requires_admin(client, make_user, auth):
    user = await make_user()
    res = await client.post(
        "/api/v1/users", json={"email": "new@example.com"}, headers=auth(user),
    )
    assert res.status_code == 403
    assert res.json()["error"]["code"] == "FORBIDDEN"


async def test_admin_provisions_and_recharges(client, make_user, auth):
    admin = await make_user(role="admin")
    headers = auth(admin, "admin")

    res = await client.post(
        "/api/v1/users", json={"email": "New@Example.com"}, headers=headers,
    )
    assert res.status_code == 201
    assert res.json()["email"] == "new@example.com"

    res = await client.post(
        "/api/v1/users", json={"email": "new@example.com"}, headers=headers,
    )
    assert res.status_code == 409

    res = await client.post(
        "/api/v1/users/recharge",
        json={"email": "new@example.com", "tokens": "5.5"}, headers=headers,
    )
    assert res.status_code == 200
    assert float(res.json()["total_tokens"]) == 5.5

    res = await client.post(
        "/api/v1/users/recharge",
        json={"email": "new@example.com", "tokens": -1}, headers=headers,
    )
    assert res.status_code == 400


async def test_create_model_insufficient_is_402(client, make_user, auth, example_graph):
    user = await make_user(tokens="0.10")
    res = await client.post(
        "/api/v1/models", json={"name": "m", "graph": example_graph}, headers=auth(user),
    )
    assert res.status_code == 402
    assert res.json()["error"]["code"] == "INSUFFICIENT_TOKENS"


async def test_create_model_empty_graph_is_400(client, make_user, auth):
    user = await make_user(tokens=10)
    res = await client.post(
        "/api/v1/models", json={"name": "m", "graph": {}}, headers=auth(user),
    )
    assert res.status_code == 400


async def test_unknown_model_is_404(client, make_user, auth):
    user = await make_user()
    res = await client.get(f"/api/v1/models/{uuid4()}", headers=auth(user))
    assert res.status_code == 404


async def test_end_to_end_flow(client, make_user, auth, example_graph):
    owner = await make_user(tokens=10)
    requester = await make_user(tokens=2)

    res = await client.post(
        "/api/v1/models",
        json={"name": "city", "description": "roads", "graph": example_graph},
        headers=auth(owner),
    )
    assert res.status_code == 201
    body = res.json()
    model_id = body["model"]["id"]
    assert float(body["charged_tokens"]) == 0.88

    res = await client.post(
        f"/api/v1/models/{model_id}/execute",
        json={"start": "A", "goal": "D"}, headers=auth(requester),
    )
    assert res.status_code == 200
    assert res.json()["path"] == ["A", "B", "D"]
    assert float(res.json()["remaining_tokens"]) == 1.12

    res = await client.post(
        f"/api/v1/models/{model_id}/weight-changes",
        json={"from_node": "A", "to_node": "B", "weight": 12},
        headers=auth(requester),
    )
    assert res.status_code == 201
    request_id = res.json()["id"]

    res = await client.post(
        f"/api/v1/models/{model_id}/weight-changes/{request_id}/approve",
        headers=auth(requester),
    )
    assert res.status_code == 403

    res = await client.post(
        f"/api/v1/models/{model_id}/weight-changes/{request_id}/approve",
        headers=auth(owner),
    )
    assert res.status_code == 200
    assert res.json()["version_number"] == 2
    assert res.json()["new_weight"] == 3.0

    res = await client.post(
        f"/api/v1/models/{model_id}/weight-changes/{request_id}/reject",
        json={"reason": "changed my mind"}, headers=auth(owner),
    )
    assert res.status_code == 409

    res = await client.get(
        f"/api/v1/models/{model_id}/weight-changes",
        params={"status": "approved"}, headers=auth(owner),
    )
    assert [r["id"] for r in res.json()] == [request_id]

    res = await client.get(f"/api/v1/models/{model_id}/versions", headers=auth(owner))
    assert [v["version_number"] for v in res.json()] == [2, 1]

    res = await client.post(
        f"/api/v1/models/{model_id}/simulations",
        json={
            "from_node": "A", "to_node": "B", "start": 1, "stop": 3, "step": 1,
            "origin": "A", "goal": "D",
        },
        headers=auth(owner),
    )
    assert res.status_code == 201
    sim = res.json()
    assert [r["weight"] for r in sim["results"]] == [1, 2, 3]
    assert sim["best"]["weight"] == 1
    assert sim["version_number"] == 2

    res = await client.get("/api/v1/users/me/transactions", headers=auth(requester))
    reasons = {r["reason"] for r in res.json()}
    assert "model_execution" in reasons


async def test_execute_no_path_is_400(client, make_user, auth):
    owner = await make_user(tokens=10)
    res = await client.post(
        "/api/v1/models",
        json={"name": "split", "graph": {"A": {"B": 1}, "B": {}, "C": {}}},
        headers=auth(owner),
    )
    model_id = res.json()["model"]["id"]

    res = await client.post(
        f"/api/v1/models/{model_id}/execute",
        json={"start": "A", "goal": "C"}, headers=auth(owner),
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "NO_PATH_FOUND"
