from datetime import datetime
from ZonePark.api.DBConnection import DBConnection, DATETIME_FORMAT
from ZonePark.api.Models.Zone import Zone
from ZonePark.api.errors import NotFound

class AccessZones:
    """Read side of the zone rate table. Zones are seeded by DBConnection."""

    def __init__(self, conn: DBConnection):
        self.cursor = conn.cursor
        self.conn = conn.connection
        self.lock = conn.lock


    def _to_zone(self, row):
        zone_dict = dict(row)
        zone_dict["created_at"] = datetime.strptime(zone_dict["created_at"], DATETIME_FORMAT)
        return Zone(**zone_dict)


    def get_all_zones(self):
        query = """
        SELECT * FROM zones
        ORDER BY created_at DESC, id DESC;
        """
        with self.lock:
            self.cursor.execute(query)
            rows = self.cursor.fetchall()

        return [self._to_zone(row) for row in rows]


    def get_zone(self, id):
        query = """
        SELECT * FROM zones
        WHERE id = ?;
        """
        with self.lock:
            self.cursor.execute(query, [id])
            row = self.cursor.fetchone()

        if row is None:
            raise NotFound(f"Zone {id} not found.")
        return self._to_zone(row)


    def get_hourly_rate(self, id) -> int:
        query = """
        SELECT price_per_hour FROM zones
        WHERE id = ?;
        """
        with self.lock:
            self.cursor.execute(query, [id])
            row = self.cursor.fetchone()

        if row is None:
            raise NotFound(f"Zone {id} not found.")
        return int(row["price_per_hour"])
