from datetime import datetime

import pytest

from ZonePark.api.DBConnection import DBConnection
from ZonePark.api.DataAccess.AccessUsers import AccessUsers
from ZonePark.api.DataAccess.AccessVehicles import AccessVehicles
from ZonePark.api.Models.User import User
from ZonePark.api.Models.Vehicle import Vehicle


@pytest.fixture()
def conn(tmp_path):
    conn = DBConnection(str(tmp_path / "test.db"))
    yield conn
    conn.close_connection()


@pytest.fixture()
def make_user(conn):
    access_users = AccessUsers(conn=conn)

    def _make(email="unit_user@example.com"):
        user = User(
            name="Unit User",
            email=email,
            password="pw",
            created_at=datetime.now().replace(microsecond=0),
        )
        access_users.add_user(user)
        return user

    return _make


@pytest.fixture()
def make_vehicle(conn):
    access_vehicles = AccessVehicles(conn=conn)

    def _make(user, plate="UNIT-123"):
        vehicle = Vehicle(
            user=user,
            plate_number=plate,
            description="Golf",
            created_at=datetime.now().replace(microsecond=0),
        )
        access_vehicles.add_vehicle(vehicle)
        return vehicle

    return _make
