from datetime import datetime, timezone

import pytest

from src.fleet.models.domain import (
    AccessPrivileges,
    Capacity,
    ComplianceInfo,
    FuelType,
    GeoLocation,
    Hub,
    HubCapacity,
    HubStatus,
    OperatingHours,
    PollutionLevel,
    TimeWindow,
    Vehicle,
    VehicleSpecs,
    VehicleStatus,
    VehicleType,
)
from src.fleet.services.hubs import (
    capacity_status,
    distance_between_hubs,
    update_current_vehicle_count,
    update_hub_status,
    validate_operating_hours,
)


def _vehicle(vehicle_id: str, status: VehicleStatus = VehicleStatus.AVAILABLE) -> Vehicle:
    return Vehicle(
        id=vehicle_id,
        type=VehicleType.TEMPO,
        sub_type=None,
        capacity=Capacity(weight=1500, volume=8),
        location=GeoLocation(latitude=28.6, longitude=77.2),
        status=status,
        compliance=ComplianceInfo(pollution_certificate=True, pollution_level=PollutionLevel.BS6, permit_valid=True),
        specs=VehicleSpecs(plate_number="DL01CD4321", fuel_type=FuelType.CNG, vehicle_age=4, manufacturing_year=2020),
        access_privileges=AccessPrivileges(),
    )


def _hub(
    open_time: str = "06:00",
    close_time: str = "22:00",
    current: int = 5,
    buffer: list[Vehicle] | None = None,
    special_hours: dict[str, TimeWindow] | None = None,
    location: GeoLocation | None = None,
) -> Hub:
    return Hub(
        id="H1",
        name="Okhla Hub",
        location=location or GeoLocation(latitude=28.53, longitude=77.27),
        capacity=HubCapacity(max_vehicles=10, current_vehicles=current, storage_area=1000, loading_bays=4, buffer_vehicle_slots=5),
        operating_hours=OperatingHours(open=open_time, close=close_time, special_hours=special_hours or {}),
        buffer_vehicles=buffer if buffer is not None else [_vehicle("B1"), _vehicle("B2")],
    )


def test_capacity_status_derives_utilisation_from_counters():
    hub = _hub(current=5)
    hub.storage_in_use = 500
    hub.active_loading_bays = 1

    status = capacity_status(hub)

    assert status.vehicle_utilization == 50.0
    assert status.storage_utilization == 50.0
    assert status.loading_bay_utilization == 25.0
    assert status.buffer_vehicle_availability == 2
    assert status.is_at_capacity is False
    assert status.recommended_actions == []


def test_capacity_status_flags_crowded_hub():
    hub = _hub(current=9, buffer=[_vehicle("B1"), _vehicle("B2", VehicleStatus.IN_TRANSIT)])

    status = capacity_status(hub, storage_utilization=85.0, loading_bay_utilization=50.0)

    assert status.vehicle_utilization == 90.0
    assert status.storage_utilization == 85.0
    assert status.is_at_capacity is True
    assert status.recommended_actions == [
        "Consider redirecting new vehicles to alternative hubs",
        "Replenish buffer vehicle inventory",
        "Expedite outbound shipments to free storage space",
    ]


def test_empty_buffer_means_at_capacity():
    status = capacity_status(_hub(current=1, buffer=[]))

    assert status.buffer_vehicle_availability == 0
    assert status.is_at_capacity is True


@pytest.mark.parametrize(
    ("moment", "is_open", "minutes_until_close", "next_open_time"),
    [
        (datetime(2024, 1, 16, 10, 0), True, 720, None),
        (datetime(2024, 1, 16, 23, 0), False, None, "06:00 (next day)"),
        (datetime(2024, 1, 16, 5, 0), False, None, "06:00"),
        (datetime(2024, 1, 16, 22, 0), False, None, "06:00 (next day)"),
        (datetime(2024, 1, 16, 6, 0), True, 960, None),
    ],
)
def test_daytime_operating_hours(moment, is_open, minutes_until_close, next_open_time):
    status = validate_operating_hours(_hub(), moment)

    assert status.is_open is is_open
    assert status.minutes_until_close == minutes_until_close
    assert status.next_open_time == next_open_time
    assert status.current_time == moment.strftime("%H:%M")


def test_overnight_operating_hours():
    hub = _hub(open_time="22:00", close_time="06:00")

    at_two = validate_operating_hours(hub, datetime(2024, 1, 16, 2, 0))
    at_eleven_pm = validate_operating_hours(hub, datetime(2024, 1, 16, 23, 0))
    at_noon = validate_operating_hours(hub, datetime(2024, 1, 16, 12, 0))

    assert at_two.is_open is True
    assert at_two.minutes_until_close == 240
    assert at_eleven_pm.minutes_until_close == 420
    assert at_noon.is_open is False
    assert at_noon.next_open_time == "22:00"


def test_special_hours_override_weekday():
    hub = _hub(special_hours={"sunday": TimeWindow(start="10:00", end="14:00")})

    sunday = validate_operating_hours(hub, datetime(2024, 1, 21, 15, 0))
    tuesday = validate_operating_hours(hub, datetime(2024, 1, 16, 15, 0))

    assert sunday.is_open is False
    assert sunday.open_time == "10:00"
    assert sunday.close_time == "14:00"
    assert tuesday.is_open is True


def test_operating_hours_use_injected_clock():
    status = validate_operating_hours(_hub(), clock=lambda: datetime(2024, 1, 16, 21, 30))

    assert status.minutes_until_close == 30


def test_hub_status_and_vehicle_count_updates():
    hub = _hub()
    stamp = datetime(2024, 1, 16, 12, 0)

    update_hub_status(hub, HubStatus.INACTIVE, clock=lambda: stamp)
    update_current_vehicle_count(hub, 25, clock=lambda: stamp)
    assert hub.status == HubStatus.INACTIVE
    assert hub.capacity.current_vehicles == 10
    assert hub.updated_at == stamp

    update_current_vehicle_count(hub, -3, clock=lambda: stamp)
    assert hub.capacity.current_vehicles == 0


def test_distance_between_hubs():
    delhi = _hub(location=GeoLocation(latitude=28.6139, longitude=77.2090))
    gurgaon = _hub(location=GeoLocation(latitude=28.4595, longitude=77.0266))

    assert distance_between_hubs(delhi, gurgaon) == pytest.approx(24.6, abs=0.5)
    assert distance_between_hubs(delhi, delhi) == 0.0


def test_operating_hours_convert_aware_times():
    # 04:30 UTC is 10:00 in Asia/Kolkata.
    status = validate_operating_hours(_hub(), datetime(2024, 1, 16, 4, 30, tzinfo=timezone.utc))

    assert status.is_open is True
    assert status.current_time == "10:00"
    assert status.minutes_until_close == 720
