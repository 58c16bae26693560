from sqlalchemy.exc import SQLAlchemyError

from backend.services.stock import StockStore

APOLLO = {"name": "Apollo", "address": "Addr", "contact": "123", "email": "a@b.com"}


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["message"]
    assert body["timestamp"]


def test_save_then_get_stock_end_to_end(client, sender):
    resp = client.post(
        "/saveStock",
        json={"hospitalInfo": APOLLO, "bloodGroups": [{"group": "A+", "needed": 5, "available": 2}]},
    )
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "hospitalId": 1, "emailSent": True}
    assert sender.recipients == ["a@b.com"]

    resp = client.get("/getStock/Apollo")
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["hospital"]["name"] == "Apollo"
    assert body["hospital"]["email"] == "a@b.com"
    assert body["bloodGroups"] == [{"blood_group": "A+", "units_needed": 5, "units_available": 2}]


def test_save_stock_lenient_counts(client):
    client.post(
        "/saveStock",
        json={"hospitalInfo": APOLLO, "bloodGroups": [{"group": "O+", "needed": "abc", "available": "3 units"}]},
    )
    body = client.get("/getStock/Apollo").json()
    assert body["bloodGroups"] == [{"blood_group": "O+", "units_needed": 0, "units_available": 3}]


def test_missing_hospital_field_is_400(client):
    resp = client.post(
        "/saveStock",
        json={"hospitalInfo": {"name": "Apollo", "contact": "123"}, "bloodGroups": []},
    )
    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert "address" in body["error"] and "email" in body["error"]


def test_malformed_body_is_400(client):
    resp = client.post("/saveStock", json={"hospitalInfo": APOLLO, "bloodGroups": "A+"})
    assert resp.status_code == 400
    assert resp.json()["success"] is False


def test_email_failure_still_succeeds(client, sender):
    sender.ok = False
    resp = client.post("/saveStock", json={"hospitalInfo": APOLLO, "bloodGroups": []})

    assert resp.status_code == 200
    assert resp.json()["success"] is True
    assert resp.json()["emailSent"] is False


def test_storage_failure_is_500_without_details(client, monkeypatch):
    def boom(self, hospital_id, lines):
        raise SQLAlchemyError("secret table layout")

    monkeypatch.setattr(StockStore, "replace_stock_lines", boom)
    resp = client.post("/saveStock", json={"hospitalInfo": APOLLO, "bloodGroups": []})

    assert resp.status_code == 500
    assert resp.json() == {"success": False, "error": "Database error while saving stock"}

    monkeypatch.undo()
    assert client.get("/getStock/Apollo").status_code == 404


def test_get_unknown_hospital_is_404(client):
    resp = client.get("/getStock/Nowhere")
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "error": "Hospital not found"}


def test_list_hospitals(client):
    client.post("/saveStock", json={"hospitalInfo": APOLLO, "bloodGroups": []})
    client.post("/saveStock", json={"hospitalInfo": {**APOLLO, "name": "Fortis"}, "bloodGroups": []})

    resp = client.get("/hospitals")
    assert resp.status_code == 200
    names = {h["name"] for h in resp.json()["hospitals"]}
    assert names == {"Apollo", "Fortis"}


def test_oversized_count_is_stored_as_zero(client):
    resp = client.post(
        "/saveStock",
        json={
            "hospitalInfo": APOLLO,
            "bloodGroups": [{"group": "A+", "needed": "99999999999999999999", "available": 1}],
        },
    )
    assert resp.status_code == 200
    assert resp.json()["success"] is True

    body = client.get("/getStock/Apollo").json()
    assert body["bloodGroups"] == [{"blood_group": "A+", "units_needed": 0, "units_available": 1}]


def test_numeric_hospital_fields_are_accepted(client):
    resp = client.post(
        "/saveStock",
        json={"hospitalInfo": {**APOLLO, "contact": 9876543210}, "bloodGroups": []},
    )
    assert resp.status_code == 200

    hospital = client.get("/getStock/Apollo").json()["hospital"]
    assert hospital["contact"] == "9876543210"


def test_long_group_label_is_kept(client):
    label = "A+ (irradiated, leukoreduced)"
    client.post(
        "/saveStock",
        json={"hospitalInfo": APOLLO, "bloodGroups": [{"group": label, "needed": 1, "available": 1}]},
    )
    body = client.get("/getStock/Apollo").json()
    assert body["bloodGroups"][0]["blood_group"] == label
