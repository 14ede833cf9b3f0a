from datetime import datetime, timedelta

import pytest

from ZonePark.api.DataAccess.AccessParkings import AccessParkings
from ZonePark.api.DataAccess.AccessZones import AccessZones
from ZonePark.api.Models.Parking import Parking, ACTIVE, SETTLED
from ZonePark.api.errors import Conflict, NotFound, InvalidInput


def _start(access_parkings, conn, user, vehicle, start_time):
    parking = Parking(
        user_id=user.id,
        vehicle=vehicle,
        zone=AccessZones(conn=conn).get_zone(1),
        start_time=start_time,
    )
    access_parkings.add_parking(parking)
    return parking


def test_add_find_active_and_stop(conn, make_user, make_vehicle):
    user = make_user()
    vehicle = make_vehicle(user)
    access_parkings = AccessParkings(conn=conn)
    now = datetime(2024, 5, 1, 12, 0, 0)

    parking = _start(access_parkings, conn, user, vehicle, now)
    assert parking.id is not None

    active = access_parkings.find_active(vehicle.id)
    assert active is not None
    assert active.id == parking.id
    assert active.zone.price_per_hour == 100
    assert active.vehicle.plate_number == "UNIT-123"

    parking.stop_time = now + timedelta(minutes=30)
    parking.total_price = 50
    assert access_parkings.stop_parking(parking) is True

    assert access_parkings.find_active(vehicle.id) is None
    fetched = access_parkings.get_parking(parking.id, user=user)
    assert fetched.stop_time == now + timedelta(minutes=30)
    assert fetched.total_price == 50
    assert fetched.state == SETTLED


def test_stop_is_applied_only_once(conn, make_user, make_vehicle):
    user = make_user()
    vehicle = make_vehicle(user)
    access_parkings = AccessParkings(conn=conn)
    now = datetime(2024, 5, 1, 12, 0, 0)
    parking = _start(access_parkings, conn, user, vehicle, now)

    parking.stop_time = now + timedelta(minutes=30)
    parking.total_price = 50
    assert access_parkings.stop_parking(parking)

    parking.stop_time = now + timedelta(minutes=90)
    parking.total_price = 150
    assert access_parkings.stop_parking(parking) is False

    fetched = access_parkings.get_parking(parking.id)
    assert fetched.total_price == 50


def test_second_active_insert_raises_conflict(conn, make_user, make_vehicle):
    user = make_user()
    vehicle = make_vehicle(user)
    access_parkings = AccessParkings(conn=conn)
    now = datetime(2024, 5, 1, 12, 0, 0)

    _start(access_parkings, conn, user, vehicle, now)
    with pytest.raises(Conflict):
        _start(access_parkings, conn, user, vehicle, now)


def test_parking_of_other_user_is_not_found(conn, make_user, make_vehicle):
    owner = make_user("owner@example.com")
    other = make_user("other@example.com")
    access_parkings = AccessParkings(conn=conn)
    parking = _start(access_parkings, conn, owner, make_vehicle(owner), datetime(2024, 5, 1))

    with pytest.raises(NotFound):
        access_parkings.get_parking(parking.id, user=other)


def test_list_by_user_and_state(conn, make_user, make_vehicle):
    user = make_user()
    first = make_vehicle(user, plate="ONE-1")
    second = make_vehicle(user, plate="TWO-2")
    access_parkings = AccessParkings(conn=conn)

    stopped = _start(access_parkings, conn, user, first, datetime(2024, 5, 1, 8, 0))
    stopped.stop_time = datetime(2024, 5, 1, 9, 0)
    stopped.total_price = 100
    access_parkings.stop_parking(stopped)
    active = _start(access_parkings, conn, user, second, datetime(2024, 5, 1, 10, 0))

    assert [p.id for p in access_parkings.get_parkings_byuser(user)] == [active.id, stopped.id]
    assert [p.id for p in access_parkings.get_parkings_byuser(user, state=ACTIVE)] == [active.id]
    assert [p.id for p in access_parkings.get_parkings_byuser(user, state=SETTLED)] == [stopped.id]

    with pytest.raises(InvalidInput):
        access_parkings.get_parkings_byuser(user, state="cancelled")
