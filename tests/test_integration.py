from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from src.fleet.api.dependencies import clock_dependency, store_dependency
from src.fleet.data.store import FleetStore
from src.fleet.main import create_app

NOW = datetime(2024, 1, 16, 10, 0)


def _vehicle_payload(vehicle_id: str, plate: str = "DL01AB1235", **overrides) -> dict:
    payload = {
        "id": vehicle_id,
        "type": "van",
        "capacity": {"weight": 1000, "volume": 5},
        "location": {"latitude": 28.6139, "longitude": 77.2090},
        "compliance": {
            "pollution_certificate": True,
            "pollution_level": "BS6",
            "permit_valid": True,
            "time_restrictions": [
                {
                    "zone_type": "residential",
                    "restricted_hours": {"start": "23:00", "end": "07:00"},
                    "days_applicable": ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"],
                }
            ],
        },
        "specs": {
            "plate_number": plate,
            "fuel_type": "diesel",
            "vehicle_age": 3,
            "manufacturing_year": 2021,
        },
        "access_privileges": {"residential_zones": True, "commercial_zones": True},
    }
    payload.update(overrides)
    return payload


def _route_payload(route_id: str, vehicle_id: str) -> dict:
    return {
        "id": route_id,
        "vehicle_id": vehicle_id,
        "estimated_duration": 150,
        "estimated_distance": 30.5,
        "estimated_fuel_consumption": 4.2,
        "stops": [
            {
                "id": "S1",
                "sequence": 1,
                "location": {"latitude": 28.62, "longitude": 77.21},
                "type": "delivery",
                "estimated_arrival_time": "2024-01-16T23:30:00",
                "estimated_departure_time": "2024-01-16T23:45:00",
                "duration": 15,
            },
            {
                "id": "S2",
                "sequence": 2,
                "location": {"latitude": 28.64, "longitude": 77.22},
                "type": "delivery",
                "estimated_arrival_time": "2024-01-17T09:00:00",
                "estimated_departure_time": "2024-01-17T09:10:00",
                "duration": 10,
            },
        ],
    }


def _hub_payload(buffer_ids: list[str]) -> dict:
    return {
        "id": "H1",
        "name": "Okhla Hub",
        "location": {"latitude": 28.53, "longitude": 77.27},
        "capacity": {
            "max_vehicles": 20,
            "current_vehicles": 4,
            "storage_area": 1000,
            "loading_bays": 4,
            "buffer_vehicle_slots": 3,
        },
        "operating_hours": {"open": "06:00", "close": "22:00"},
        "buffer_vehicle_ids": buffer_ids,
        "storage_in_use": 250,
    }


@pytest.fixture
def api_client() -> TestClient:
    app = create_app()
    store = FleetStore()
    app.dependency_overrides[store_dependency] = lambda: store
    app.dependency_overrides[clock_dependency] = lambda: (lambda: NOW)
    return TestClient(app)


def test_health_endpoint(api_client: TestClient):
    response = api_client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_vehicle_registration_and_compliance(api_client: TestClient):
    created = api_client.post("/api/vehicles", json=_vehicle_payload("V1"))
    assert created.status_code == 201
    assert created.json()["status"] == "available"

    duplicate = api_client.post("/api/vehicles", json=_vehicle_payload("V1"))
    assert duplicate.status_code == 400
    assert duplicate.json()["detail"]["field"] == "id"

    circulation = api_client.get("/api/vehicles/V1/circulation").json()
    assert circulation["compliant"] is False
    assert circulation["plate_parity"] == "odd"
    assert circulation["date_parity"] == "even"

    restriction = api_client.get(
        "/api/vehicles/V1/time-restriction",
        params={"zone_type": "residential", "at": "2024-01-16T23:30:00"},
    ).json()
    assert restriction["allowed"] is False
    assert restriction["alternatives"] == [{"start": "07:00", "end": "23:00"}]

    compliance = api_client.get("/api/vehicles/V1/compliance", params={"zone_type": "commercial"}).json()
    assert compliance["compliant"] is False
    assert compliance["violations"] == ["Odd-even rule violation: Odd plate on even date"]


def test_vehicle_validation_errors(api_client: TestClient):
    bad_plate = api_client.post("/api/vehicles", json=_vehicle_payload("V2", plate="NOPLATE"))
    assert bad_plate.status_code == 400
    assert bad_plate.json()["detail"]["field"] == "specs.plate_number"

    api_client.post("/api/vehicles", json=_vehicle_payload("V3"))
    bad_location = api_client.put("/api/vehicles/V3/location", json={"latitude": 91, "longitude": 77})
    assert bad_location.status_code == 400
    assert bad_location.json()["detail"] == {"field": "location.latitude", "reason": "must be between -90 and 90"}

    moved = api_client.put("/api/vehicles/V3/location", json={"latitude": 28.7, "longitude": 77.1})
    assert moved.status_code == 200
    assert moved.json()["location"]["timestamp"] == "2024-01-16T10:00:00"

    assert api_client.get("/api/vehicles/missing").status_code == 404


def test_route_lifecycle_over_http(api_client: TestClient):
    api_client.post("/api/vehicles", json=_vehicle_payload("V1"))
    created = api_client.post("/api/routes", json=_route_payload("R1", "V1"))
    assert created.status_code == 201
    assert created.json()["status"] == "planned"

    unknown_vehicle = api_client.post("/api/routes", json=_route_payload("R2", "ghost"))
    assert unknown_vehicle.status_code == 400

    assert api_client.post("/api/routes/R1/complete").json()["status"] == "planned"
    assert api_client.post("/api/routes/R1/start").json()["status"] == "active"

    stop = api_client.put("/api/routes/R1/stops/S1", json={"status": "arrived"})
    assert stop.json()["stops"][0]["actual_arrival_time"] == "2024-01-16T10:00:00"
    assert api_client.put("/api/routes/R1/stops/S9", json={"status": "arrived"}).status_code == 404

    traffic = {
        "segment_id": "seg-1",
        "from_location": {"latitude": 28.62, "longitude": 77.21},
        "to_location": {"latitude": 28.63, "longitude": 77.21},
        "traffic_level": "severe",
        "delay_minutes": 20,
    }
    reported = api_client.post("/api/routes/R1/traffic", json=traffic).json()
    assert len(reported["traffic_factors"]) == 1

    efficiency = api_client.get("/api/routes/R1/efficiency").json()
    assert efficiency["fuel_efficiency"] == 7.26
    assert efficiency["total_traffic_delay"] == 20

    suggestions = api_client.get("/api/routes/R1/suggestions").json()
    assert [item["type"] for item in suggestions] == ["alternative_route"]


def test_route_compliance_over_http(api_client: TestClient):
    api_client.post("/api/vehicles", json=_vehicle_payload("V1"))
    api_client.post("/api/routes", json=_route_payload("R1", "V1"))

    snapshot = api_client.post(
        "/api/routes/R1/compliance",
        json={"zone_types": ["residential", "commercial"]},
    ).json()

    assert snapshot["is_compliant"] is False
    assert [item["route_stop_id"] for item in snapshot["violations"]] == ["S1"]
    assert snapshot["violations"][0]["penalty"] == 5000

    efficiency = api_client.get("/api/routes/R1/efficiency").json()
    assert efficiency["compliance_score"] == 50.0


def test_hub_allocation_over_http(api_client: TestClient):
    api_client.post("/api/vehicles", json=_vehicle_payload("V1"))
    big = _vehicle_payload("B1", capacity={"weight": 1000, "volume": 5})
    small = _vehicle_payload("B2", capacity={"weight": 600, "volume": 3})
    api_client.post("/api/vehicles", json=big)
    api_client.post("/api/vehicles", json=small)
    api_client.post("/api/routes", json=_route_payload("R1", "V1"))

    unknown = api_client.post("/api/hubs", json=_hub_payload(["B1", "nope"]))
    assert unknown.status_code == 400

    hub = api_client.post("/api/hubs", json=_hub_payload(["B1", "B2"]))
    assert hub.status_code == 201
    assert [vehicle["id"] for vehicle in hub.json()["buffer_vehicles"]] == ["B1", "B2"]

    capacity = api_client.get("/api/hubs/H1/capacity").json()
    assert capacity["vehicle_utilization"] == 20.0
    assert capacity["storage_utilization"] == 25.0
    assert capacity["buffer_vehicle_availability"] == 2

    hours = api_client.get("/api/hubs/H1/operating-hours").json()
    assert hours["is_open"] is True
    assert hours["minutes_until_close"] == 720

    allocation = api_client.post(
        "/api/hubs/H1/allocate",
        json={"vehicle_type": "van", "min_capacity": {"weight": 500, "volume": 2.5}, "route_id": "R1"},
    ).json()
    assert allocation["success"] is True
    assert allocation["vehicle"]["id"] == "B2"
    assert allocation["vehicle"]["status"] == "in-transit"

    assert api_client.get("/api/routes/R1").json()["vehicle_id"] == "B2"
    assert api_client.get("/api/vehicles/V1").json()["status"] == "breakdown"

    removed = api_client.delete("/api/hubs/H1/buffer/B1").json()
    assert removed == {"success": True, "message": "Vehicle B1 removed from buffer"}

    exhausted = api_client.post("/api/hubs/H1/allocate", json={}).json()
    assert exhausted["success"] is False
    assert exhausted["message"] == "No buffer vehicles available at this hub"

    readded = api_client.post("/api/hubs/H1/buffer", json={"vehicle_id": "B1"}).json()
    assert readded["success"] is True
    assert api_client.get("/api/hubs/missing").status_code == 404


def test_buffered_vehicle_status_update_over_http(api_client: TestClient):
    api_client.post("/api/vehicles", json=_vehicle_payload("B1"))
    api_client.post("/api/hubs", json=_hub_payload(["B1"]))

    updated = api_client.put("/api/vehicles/B1/status", json={"status": "maintenance"})
    assert updated.status_code == 200
    assert updated.json()["status"] == "maintenance"

    result = api_client.post("/api/hubs/H1/allocate", json={}).json()
    assert result["success"] is False
    assert result["message"] == "No buffer vehicles available at this hub"
