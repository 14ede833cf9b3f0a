from datetime import datetime
from ZonePark.api.DBConnection import DBConnection, DATETIME_FORMAT
from ZonePark.api.DataAccess.AccessUsers import AccessUsers
from ZonePark.api.Models.Vehicle import Vehicle
from ZonePark.api.Models.User import User
from ZonePark.api.errors import NotFound
from ZonePark.api import crypto_utils, price_calculator

class AccessVehicles:

    def __init__(self, conn: DBConnection):
        self.cursor = conn.cursor
        self.conn = conn.connection
        self.lock = conn.lock
        self.accessusers = AccessUsers(conn=conn)


    def _to_vehicle(self, row):
        vehicle_dict = dict(row)
        vehicle_dict["created_at"] = datetime.strptime(vehicle_dict["created_at"], DATETIME_FORMAT)
        if vehicle_dict.get("deleted_at") is not None:
            vehicle_dict["deleted_at"] = datetime.strptime(vehicle_dict["deleted_at"], DATETIME_FORMAT)

        # kenteken staat versleuteld in de db als er een key is
        vehicle_dict["plate_number"] = crypto_utils.decrypt_str(vehicle_dict["plate_number"])
        vehicle_dict["user"] = self.accessusers.get_user_byid(id=vehicle_dict["user_id"])
        del vehicle_dict["user_id"]
        return Vehicle(**vehicle_dict)


    def get_vehicle(self, id, user: User = None, with_deleted: bool = False):
        """
        Load a vehicle by id. With a user only that user's vehicles match, and
        soft-deleted vehicles only match when with_deleted is set.
        """
        query = """
        SELECT * FROM vehicles
        WHERE id = ?
        """
        params = [id]
        if user is not None:
            query += " AND user_id = ?"
            params.append(user.id)
        if not with_deleted:
            query += " AND deleted_at IS NULL"

        with self.lock:
            self.cursor.execute(query, params)
            row = self.cursor.fetchone()

        if row is None:
            raise NotFound(f"Vehicle {id} not found.")
        return self._to_vehicle(row)


    def get_vehicles_byuser(self, user: User):
        query = """
        SELECT * FROM vehicles
        WHERE user_id = ?
        AND deleted_at IS NULL
        ORDER BY created_at DESC, id DESC;
        """
        with self.lock:
            self.cursor.execute(query, [user.id])
            rows = self.cursor.fetchall()

        return [self._to_vehicle(row) for row in rows]


    def add_vehicle(self, vehicle: Vehicle):
        query = """
        INSERT INTO vehicles
            (user_id, plate_number, description, created_at)
        VALUES
            (:user_id, :plate_number, :description, :created_at)
        RETURNING id;
        """
        payload = {
            "user_id": vehicle.user.id,
            "plate_number": crypto_utils.protect(vehicle.plate_number),
            "description": vehicle.description,
            "created_at": vehicle.created_at.strftime(DATETIME_FORMAT),
        }
        with self.lock:
            self.cursor.execute(query, payload)
            vehicle.id = self.cursor.fetchone()[0]
            self.conn.commit()


    def update_vehicle(self, vehicle: Vehicle):
        query = """
        UPDATE vehicles
        SET plate_number = :plate_number,
            description = :description
        WHERE id = :id;
        """
        payload = {
            "id": vehicle.id,
            "plate_number": crypto_utils.protect(vehicle.plate_number),
            "description": vehicle.description,
        }
        with self.lock:
            self.cursor.execute(query, payload)
            self.conn.commit()


    def delete_vehicle(self, vehicle: Vehicle):
        # soft delete, parkings keep pointing at the row
        vehicle.deleted_at = price_calculator.utcnow()
        query = """
        UPDATE vehicles
        SET deleted_at = :deleted_at
        WHERE id = :id;
        """
        with self.lock:
            self.cursor.execute(query, {"id": vehicle.id, "deleted_at": vehicle.deleted_at.strftime(DATETIME_FORMAT)})
            self.conn.commit()
