def test_zones_are_public_and_seeded(client):
    r = client.get("/api/v1/zones")
    assert r.status_code == 200
    zones = {z["name"]: z["price_per_hour"] for z in r.json()}
    assert zones == {"Green Zone": 100, "Yellow Zone": 200, "Red Zone": 300}


def test_vehicle_crud(client, register, create_vehicle):
    _, headers = register()

    vehicle = create_vehicle(headers, plate="IT-CRUD-1")
    assert vehicle["plate_number"] == "IT-CRUD-1"

    r = client.get("/api/v1/vehicles", headers=headers)
    assert [v["id"] for v in r.json()] == [vehicle["id"]]

    r = client.put(
        f"/api/v1/vehicles/{vehicle['id']}",
        json={"plate_number": "IT-CRUD-2", "description": "Family car"},
        headers=headers,
    )
    assert r.status_code == 202
    assert r.json()["description"] == "Family car"

    r = client.get(f"/api/v1/vehicles/{vehicle['id']}", headers=headers)
    assert r.json()["plate_number"] == "IT-CRUD-2"

    r = client.delete(f"/api/v1/vehicles/{vehicle['id']}", headers=headers)
    assert r.status_code == 204

    assert client.get(f"/api/v1/vehicles/{vehicle['id']}", headers=headers).status_code == 404
    assert client.get("/api/v1/vehicles", headers=headers).json() == []


def test_vehicles_are_scoped_to_owner(client, register, create_vehicle):
    _, owner = register()
    _, other = register()
    vehicle = create_vehicle(owner)

    assert client.get(f"/api/v1/vehicles/{vehicle['id']}", headers=other).status_code == 404
    assert client.get("/api/v1/vehicles", headers=other).json() == []
