import sqlite3
from datetime import datetime
from typing import Optional
from ZonePark.api.DBConnection import DBConnection, DATETIME_FORMAT
from ZonePark.api.DataAccess.AccessVehicles import AccessVehicles
from ZonePark.api.DataAccess.AccessZones import AccessZones
from ZonePark.api.Models.Parking import Parking, ACTIVE, SETTLED
from ZonePark.api.Models.User import User
from ZonePark.api.errors import Conflict, NotFound, InvalidInput

class AccessParkings:
    """
    Storage for parking sessions.

    The parkings table has a partial unique index on vehicle_id for rows
    without a stop_time, so the database itself refuses a second active
    parking for the same vehicle. stop_parking only touches rows that are
    still active, which makes the settle step a compare-and-set.
    """

    def __init__(self, conn: DBConnection):
        self.cursor = conn.cursor
        self.conn = conn.connection
        self.lock = conn.lock
        self.accessvehicles = AccessVehicles(conn=conn)
        self.accesszones = AccessZones(conn=conn)


    def _to_parking(self, row):
        parking_dict = dict(row)
        parking_dict["start_time"] = datetime.strptime(parking_dict["start_time"], DATETIME_FORMAT)
        if parking_dict.get("stop_time") is not None:
            parking_dict["stop_time"] = datetime.strptime(parking_dict["stop_time"], DATETIME_FORMAT)

        # deleted vehicles still show up in their old parkings
        parking_dict["vehicle"] = self.accessvehicles.get_vehicle(parking_dict.pop("vehicle_id"), with_deleted=True)
        parking_dict["zone"] = self.accesszones.get_zone(parking_dict.pop("zone_id"))
        return Parking(**parking_dict)


    def get_parking(self, id, user: User = None):
        query = """
        SELECT * FROM parkings
        WHERE id = ?
        """
        params = [id]
        if user is not None:
            query += " AND user_id = ?"
            params.append(user.id)

        with self.lock:
            self.cursor.execute(query, params)
            row = self.cursor.fetchone()
            if row is None:
                raise NotFound(f"Parking {id} not found.")
            return self._to_parking(row)


    def find_active(self, vehicle_id) -> Optional[Parking]:
        query = """
        SELECT * FROM parkings
        WHERE vehicle_id = ?
        AND stop_time IS NULL;
        """
        with self.lock:
            self.cursor.execute(query, [vehicle_id])
            row = self.cursor.fetchone()
            if row is None:
                return None
            return self._to_parking(row)


    def get_parkings_byuser(self, user: User, state: str = None):
        query = """
        SELECT * FROM parkings
        WHERE user_id = ?
        """
        if state == ACTIVE:
            query += " AND stop_time IS NULL"
        elif state == SETTLED:
            query += " AND stop_time IS NOT NULL"
        elif state is not None:
            raise InvalidInput(f"Unknown parking state: {state}")
        query += " ORDER BY start_time DESC, id DESC"

        with self.lock:
            self.cursor.execute(query, [user.id])
            rows = self.cursor.fetchall()
            return [self._to_parking(row) for row in rows]


    def add_parking(self, parking: Parking):
        query = """
        INSERT INTO parkings
            (user_id, vehicle_id, zone_id, start_time, stop_time, total_price)
        VALUES
            (:user_id, :vehicle_id, :zone_id, :start_time, NULL, NULL)
        RETURNING id;
        """
        payload = {
            "user_id": parking.user_id,
            "vehicle_id": parking.vehicle.id,
            "zone_id": parking.zone.id,
            "start_time": parking.start_time.strftime(DATETIME_FORMAT),
        }
        with self.lock:
            try:
                self.cursor.execute(query, payload)
                parking.id = self.cursor.fetchone()[0]
                self.conn.commit()
            except sqlite3.IntegrityError as e:
                self.conn.rollback()
                if "UNIQUE" in str(e):
                    raise Conflict("Vehicle already has an active session.")
                raise


    def stop_parking(self, parking: Parking) -> bool:
        """Persist stop_time and total_price. Returns False when the row was already stopped."""
        query = """
        UPDATE parkings
        SET stop_time = :stop_time,
            total_price = :total_price
        WHERE id = :id
        AND stop_time IS NULL;
        """
        payload = {
            "id": parking.id,
            "stop_time": parking.stop_time.strftime(DATETIME_FORMAT),
            "total_price": parking.total_price,
        }
        with self.lock:
            self.cursor.execute(query, payload)
            updated = self.cursor.rowcount == 1
            self.conn.commit()
            return updated
