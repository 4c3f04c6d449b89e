"""Tests for the public intake and admin commission endpoints."""

import pytest
from httpx import AsyncClient
from sqlalchemy.exc import OperationalError

from app.db.models import Commission
from app.services import commission_service, settings_service


def _body(**overrides):
    body = {"name": "Robin", "email": "robin@example.com", "description": "Dragon sketch"}
    body.update(overrides)
    return body


def _seed(db, n=1):
    created = [
        commission_service.create_commission(db, email=f"c{i}@example.com", description="Req")
        for i in range(n)
    ]
    db.commit()
    return created


# =============================================================================
# Public intake
# =============================================================================

@pytest.mark.asyncio
async def test_submit_commission_created(client: AsyncClient, db):
    resp = await client.post("/commissions", json=_body(referenceImages=["/uploads/a.png"]))
    assert resp.status_code == 201, resp.text

    data = resp.json()
    assert data["success"] is True
    assert data["message"] == "Commission request received."
    stored = db.get(Commission, data["id"])
    assert stored.status == "pending"
    assert stored.reference_images == ["/uploads/a.png"]


@pytest.mark.asyncio
async def test_submit_when_closed_returns_503(client: AsyncClient, db, open_queue):
    open_queue(is_open=False)

    resp = await client.post("/commissions", json=_body())
    assert resp.status_code == 503
    assert resp.json()["detail"]["code"] == "queue_closed"
    assert db.query(Commission).count() == 0


@pytest.mark.asyncio
async def test_submit_when_full_returns_503_and_closes(client: AsyncClient, db, open_queue):
    open_queue(queue_limit=1)
    _seed(db, 1)

    resp = await client.post("/commissions", json=_body())
    assert resp.status_code == 503
    assert resp.json()["detail"]["code"] == "queue_full"
    assert settings_service.get_intake_settings(db).is_commissions_open is False


@pytest.mark.asyncio
async def test_submit_validation_error_returns_400(client: AsyncClient, db):
    resp = await client.post("/commissions", json=_body(description=""))
    assert resp.status_code == 400
    detail = resp.json()["detail"]
    assert detail["code"] == "validation_error"
    assert detail["message"] == "Missing required fields"
    assert [e["field"] for e in detail["errors"]] == ["description"]
    assert db.query(Commission).count() == 0


@pytest.mark.asyncio
async def test_submit_malformed_json_is_validation_error(client: AsyncClient):
    resp = await client.post(
        "/commissions",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )
    assert resp.status_code == 400
    assert resp.json()["detail"]["code"] == "validation_error"


@pytest.mark.asyncio
async def test_submit_malformed_json_when_closed_reports_closed(client: AsyncClient, open_queue):
    open_queue(is_open=False)
    resp = await client.post("/commissions", content=b"[]")
    assert resp.status_code == 503
    assert resp.json()["detail"]["code"] == "queue_closed"


@pytest.mark.asyncio
async def test_queue_limit_flow_over_http(client: AsyncClient, admin_client: AsyncClient, open_queue):
    open_queue(queue_limit=2)

    for email in ("a@example.com", "b@example.com"):
        resp = await client.post("/commissions", json=_body(email=email))
        assert resp.status_code == 201, resp.text

    third = await client.post("/commissions", json=_body(email="c@example.com"))
    assert third.json()["detail"]["code"] == "queue_full"

    fourth = await client.post("/commissions", json=_body(email="d@example.com"))
    assert fourth.json()["detail"]["code"] == "queue_closed"

    toggled = await admin_client.post("/admin/settings/toggle")
    assert toggled.status_code == 200
    assert toggled.json()["is_commissions_open"] is True

    fifth = await client.post("/commissions", json=_body(email="e@example.com"))
    assert fifth.json()["detail"]["code"] == "queue_full"


# =============================================================================
# Admin: auth boundary
# =============================================================================

@pytest.mark.asyncio
@pytest.mark.parametrize(
    "method, path",
    [
        ("GET", "/admin/commissions"),
        ("PATCH", "/admin/commissions"),
        ("DELETE", "/admin/commissions"),
        ("GET", "/admin/dashboard"),
        ("POST", "/admin/settings/toggle"),
    ],
)
async def test_admin_endpoints_require_session(client: AsyncClient, method, path):
    resp = await client.request(method, path, headers={"X-Requested-With": "XMLHttpRequest"})
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_admin_rejects_tampered_cookie(client: AsyncClient):
    resp = await client.get("/admin/commissions", cookies={"admin_session": "not-a-jwt"})
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_admin_mutation_requires_csrf_header(admin_client: AsyncClient, db):
    (commission,) = _seed(db)
    resp = await admin_client.patch(
        "/admin/commissions",
        json={"id": commission.id, "status": "approved"},
        headers={"X-Requested-With": ""},
    )
    assert resp.status_code == 403


# =============================================================================
# Admin: commissions
# =============================================================================

@pytest.mark.asyncio
async def test_list_commissions(admin_client: AsyncClient, db):
    a, b = _seed(db, 2)
    commission_service.update_commission(db, b.id, {"status": "approved"})
    db.commit()

    resp = await admin_client.get("/admin/commissions")
    assert resp.status_code == 200
    assert [c["id"] for c in resp.json()] == [a.id, b.id]

    resp = await admin_client.get("/admin/commissions", params={"status": "approved"})
    assert [c["id"] for c in resp.json()] == [b.id]


@pytest.mark.asyncio
async def test_patch_approves_and_notifies(admin_client: AsyncClient, db, notifier):
    (commission,) = _seed(db)

    resp = await admin_client.patch(
        "/admin/commissions",
        json={
            "id": commission.id,
            "status": "approved",
            "accepted_at": "2026-10-20T10:00:00Z",
            "completion_date": "2026-11-30T00:00:00Z",
        },
    )
    assert resp.status_code == 200, resp.text
    assert resp.json()["status"] == "approved"
    assert len(notifier.accepted) == 1
    assert notifier.accepted[0][0] == "c0@example.com"
    assert notifier.accepted[0][2].date().isoformat() == "2026-11-30"


@pytest.mark.asyncio
async def test_patch_succeeds_when_email_gateway_fails(failing_admin_client: AsyncClient, db):
    (commission,) = _seed(db)

    resp = await failing_admin_client.patch(
        "/admin/commissions",
        json={"id": commission.id, "status": "rejected", "rejection_reason": "Booked"},
    )
    assert resp.status_code == 200, resp.text
    assert resp.json()["status"] == "rejected"
    db.expire_all()
    assert db.get(Commission, commission.id).status == "rejected"


@pytest.mark.asyncio
async def test_patch_completed_sends_nothing(admin_client: AsyncClient, db, notifier):
    (commission,) = _seed(db)
    commission_service.update_commission(db, commission.id, {"status": "approved"})
    db.commit()

    resp = await admin_client.patch(
        "/admin/commissions", json={"id": commission.id, "status": "completed"}
    )
    assert resp.status_code == 200
    assert notifier.total == 0


@pytest.mark.asyncio
async def test_patch_unknown_commission_404(admin_client: AsyncClient, notifier):
    resp = await admin_client.patch("/admin/commissions", json={"id": 404, "status": "approved"})
    assert resp.status_code == 404
    assert notifier.total == 0


@pytest.mark.asyncio
async def test_patch_invalid_status_422(admin_client: AsyncClient, db):
    (commission,) = _seed(db)
    resp = await admin_client.patch(
        "/admin/commissions", json={"id": commission.id, "status": "archived"}
    )
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_strict_transitions_return_409(strict_admin_client: AsyncClient, db):
    (commission,) = _seed(db)
    resp = await strict_admin_client.patch(
        "/admin/commissions", json={"id": commission.id, "status": "paid"}
    )
    assert resp.status_code == 409
    assert db.get(Commission, commission.id).status == "pending"


@pytest.mark.asyncio
async def test_delete_commission(admin_client: AsyncClient, db):
    (commission,) = _seed(db)

    resp = await admin_client.request("DELETE", "/admin/commissions", json={"id": commission.id})
    assert resp.status_code == 200
    assert db.query(Commission).count() == 0

    resp = await admin_client.request("DELETE", "/admin/commissions", json={"id": commission.id})
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_result_images_endpoints(admin_client: AsyncClient, db):
    (commission,) = _seed(db)
    path = f"/admin/commissions/{commission.id}/result-images"

    resp = await admin_client.post(path, json={"urls": ["/r/1.png", "/r/2.png"]})
    assert resp.status_code == 201
    assert resp.json()["final_result_images"] == ["/r/1.png", "/r/2.png"]

    resp = await admin_client.request("DELETE", path, json={"image_url": "/r/1.png"})
    assert resp.status_code == 200
    assert resp.json()["final_result_images"] == ["/r/2.png"]

    resp = await admin_client.post("/admin/commissions/999/result-images", json={"urls": ["/x"]})
    assert resp.status_code == 404


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "method, service_fn, body",
    [
        ("POST", "append_result_images", {"urls": ["/r/1.png"]}),
        ("DELETE", "remove_result_image", {"image_url": "/r/1.png"}),
    ],
)
async def test_result_images_storage_failure_returns_500(
    admin_client: AsyncClient, db, monkeypatch, method, service_fn, body
):
    (commission,) = _seed(db)

    def broken(*args, **kwargs):
        raise OperationalError("UPDATE commissions", {}, Exception("disk I/O error"))

    monkeypatch.setattr(commission_service, service_fn, broken)

    resp = await admin_client.request(
        method, f"/admin/commissions/{commission.id}/result-images", json=body
    )
    assert resp.status_code == 500
    assert resp.json()["detail"] == "Failed to update result images"


# =============================================================================
# Admin: dashboard + gate
# =============================================================================

@pytest.mark.asyncio
async def test_dashboard_initializes_settings(admin_client: AsyncClient, db):
    assert settings_service.get_settings_row(db) is None
    a, b = _seed(db, 2)

    resp = await admin_client.get("/admin/dashboard")
    assert resp.status_code == 200
    data = resp.json()
    assert data["settings"] == {"is_commissions_open": True, "queue_limit": 200}
    assert data["pending_count"] == 2
    assert [c["id"] for c in data["commissions"]] == [b.id, a.id]
    assert settings_service.get_settings_row(db) is not None


@pytest.mark.asyncio
async def test_settings_and_dashboard_report_same_defaults(admin_client: AsyncClient):
    before = (await admin_client.get("/admin/settings")).json()
    dashboard = (await admin_client.get("/admin/dashboard")).json()["settings"]
    after = (await admin_client.get("/admin/settings")).json()

    assert before == dashboard == after == {"is_commissions_open": True, "queue_limit": 200}


@pytest.mark.asyncio
async def test_toggle_without_row_uses_default_limit(admin_client: AsyncClient):
    toggled = (await admin_client.post("/admin/settings/toggle")).json()
    assert toggled == {"is_commissions_open": False, "queue_limit": 200}

    dashboard = (await admin_client.get("/admin/dashboard")).json()["settings"]
    assert dashboard == toggled


@pytest.mark.asyncio
async def test_toggle_and_read_settings(admin_client: AsyncClient, open_queue):
    open_queue(queue_limit=5)

    resp = await admin_client.post("/admin/settings/toggle")
    assert resp.json() == {"is_commissions_open": False, "queue_limit": 5}

    resp = await admin_client.get("/admin/settings")
    assert resp.json() == {"is_commissions_open": False, "queue_limit": 5}


# =============================================================================
# Cross-cutting
# =============================================================================

@pytest.mark.asyncio
async def test_robots_header_on_every_response(client: AsyncClient):
    resp = await client.post("/commissions", json=_body())
    assert resp.headers["x-robots-tag"] == "noai, noimageai"

    resp = await client.get("/admin/commissions")
    assert resp.headers["x-robots-tag"] == "noai, noimageai"
