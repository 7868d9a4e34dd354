import pytest

from dentalcare.domain.inventory.stock import apply_quantity_change, stock_status
from dentalcare.models import Notification


def item_payload(**overrides):
    payload = {
        "name": "Nitrile gloves",
        "category": "supplies",
        "quantity": 20,
        "minQuantity": 5,
        "unitPrice": 0.2,
        "supplier": "MedSupply",
    }
    payload.update(overrides)
    return payload


def test_stock_status_threshold_is_inclusive():
    assert stock_status(5, 5) == "low_stock"
    assert stock_status(4, 5) == "low_stock"
    assert stock_status(6, 5) == "in_stock"


def test_quantity_operations():
    assert apply_quantity_change(10, "add", 5) == 15
    assert apply_quantity_change(10, "subtract", 4) == 6
    assert apply_quantity_change(10, "subtract", 40) == 0
    assert apply_quantity_change(10, "set", 3) == 3
    with pytest.raises(ValueError):
        apply_quantity_change(10, "multiply", 2)


def test_create_item_derives_status(client, doctor):
    in_stock = client.post("/inventory", json=item_payload(), headers=doctor[0])
    low = client.post("/inventory", json=item_payload(name="Lidocaine", category="medications", quantity=2), headers=doctor[0])

    assert in_stock.status_code == 201
    assert in_stock.json()["status"] == "in_stock"
    assert low.json()["status"] == "low_stock"


def test_inventory_is_doctor_only(client, patient):
    assert client.post("/inventory", json=item_payload(), headers=patient[0]).status_code == 403
    assert client.get("/inventory", headers=patient[0]).json() == []
    assert client.get("/inventory/low-stock", headers=patient[0]).json() == []


def test_list_filters_by_category(client, doctor):
    client.post("/inventory", json=item_payload(), headers=doctor[0])
    client.post("/inventory", json=item_payload(name="Mirror", category="instruments"), headers=doctor[0])

    items = client.get("/inventory", params={"category": "instruments"}, headers=doctor[0]).json()

    assert [i["name"] for i in items] == ["Mirror"]
    assert len(client.get("/inventory", headers=doctor[0]).json()) == 2


def test_subtract_into_low_stock_alerts_doctor(client, db_session, doctor):
    item_id = client.post("/inventory", json=item_payload(), headers=doctor[0]).json()["id"]

    response = client.patch(
        f"/inventory/{item_id}/quantity",
        json={"quantity": 30, "operation": "subtract", "reason": "Used in surgery"},
        headers=doctor[0],
    )

    assert response.status_code == 200
    assert response.json()["quantity"] == 0
    assert response.json()["status"] == "low_stock"

    alerts = db_session.query(Notification).filter(Notification.type == "low_stock").all()
    assert len(alerts) == 1
    assert alerts[0].user_id == doctor[1]

    low_stock = client.get("/inventory/low-stock", headers=doctor[0]).json()
    assert [i["id"] for i in low_stock] == [item_id]


def test_restock_returns_to_in_stock(client, doctor):
    item_id = client.post("/inventory", json=item_payload(quantity=1), headers=doctor[0]).json()["id"]

    response = client.patch(
        f"/inventory/{item_id}/quantity", json={"quantity": 50, "operation": "add"}, headers=doctor[0]
    )

    assert response.json()["quantity"] == 51
    assert response.json()["status"] == "in_stock"


def test_every_change_is_logged(client, doctor):
    item_id = client.post("/inventory", json=item_payload(), headers=doctor[0]).json()["id"]
    client.patch(f"/inventory/{item_id}/quantity", json={"quantity": 5, "operation": "add"}, headers=doctor[0])
    client.patch(f"/inventory/{item_id}/quantity", json={"quantity": 8, "operation": "set"}, headers=doctor[0])

    logs = client.get(f"/inventory/{item_id}/logs", headers=doctor[0]).json()

    assert [(entry["operation"], entry["previousQuantity"], entry["newQuantity"]) for entry in logs] == [
        ("set", 25, 8),
        ("add", 20, 25),
        ("set", 0, 20),
    ]
    assert all(entry["userId"] == doctor[1] for entry in logs)


def test_update_unknown_item(client, doctor):
    response = client.patch("/inventory/999/quantity", json={"quantity": 1, "operation": "add"}, headers=doctor[0])

    assert response.status_code == 404


def test_negative_quantity_rejected(client, doctor):
    item_id = client.post("/inventory", json=item_payload(), headers=doctor[0]).json()["id"]

    response = client.patch(
        f"/inventory/{item_id}/quantity", json={"quantity": -1, "operation": "set"}, headers=doctor[0]
    )

    assert response.status_code == 422
