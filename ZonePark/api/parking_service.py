import logging
from datetime import datetime
from typing import Callable, List, Optional

from ZonePark.api.DBConnection import DBConnection
from ZonePark.api.DataAccess.AccessParkings import AccessParkings
from ZonePark.api.DataAccess.AccessVehicles import AccessVehicles
from ZonePark.api.DataAccess.AccessZones import AccessZones
from ZonePark.api.Models.Parking import Parking
from ZonePark.api.Models.User import User
from ZonePark.api.errors import Conflict, InvalidState
from ZonePark.api import crypto_utils, price_calculator

logger = logging.getLogger(__name__)


class ParkingService:
    """
    Start, stop and read parking sessions for the acting user.

    Every operation takes the user explicitly and only sees that user's
    vehicles and parkings. A vehicle can have one active parking at a time;
    a parking is stopped exactly once and its price is fixed at that moment.
    """

    def __init__(self, conn: DBConnection, clock: Callable[[], datetime] = None):
        self.lock = conn.lock
        self.accessparkings = AccessParkings(conn=conn)
        self.accessvehicles = AccessVehicles(conn=conn)
        self.accesszones = AccessZones(conn=conn)
        self.clock = clock or price_calculator.utcnow


    def _now(self) -> datetime:
        # stored timestamps have no sub-second part, settle with the same value
        return self.clock().replace(microsecond=0)


    def start_session(self, user: User, vehicle_id: int, zone_id: int) -> Parking:
        vehicle = self.accessvehicles.get_vehicle(vehicle_id, user=user)
        zone = self.accesszones.get_zone(zone_id)

        # check and insert under one lock; the unique index backs this up
        with self.lock:
            if self.accessparkings.find_active(vehicle.id) is not None:
                logger.info("Refused start for vehicle %s: already parked", vehicle.id)
                raise Conflict("Can't start parking twice using same vehicle. Please stop currently active parking.")

            parking = Parking(
                user_id=user.id,
                vehicle=vehicle,
                zone=zone,
                start_time=self._now(),
            )
            self.accessparkings.add_parking(parking)

        logger.info(
            "Parking %s started for vehicle %s in zone %s",
            parking.id, crypto_utils.mask_value(vehicle.plate_number, keep=2), zone.name
        )
        return parking


    def stop_session(self, user: User, parking_id: int) -> Parking:
        with self.lock:
            parking = self.accessparkings.get_parking(parking_id, user=user)
            if not parking.is_active:
                raise InvalidState(f"Parking {parking.id} is already stopped.")

            rate = self.accesszones.get_hourly_rate(parking.zone.id)
            stop_time = self._now()
            if stop_time < parking.start_time:
                logger.warning("Clock went backwards for parking %s, billing zero minutes", parking.id)
                stop_time = parking.start_time

            parking.stop_time = stop_time
            parking.total_price = price_calculator.calculate_price(rate, parking.start_time, stop_time)

            if not self.accessparkings.stop_parking(parking):
                raise InvalidState(f"Parking {parking.id} is already stopped.")

        logger.info("Parking %s stopped, total price %s", parking.id, parking.total_price)
        return parking


    def get_session(self, user: User, parking_id: int) -> Parking:
        return self.accessparkings.get_parking(parking_id, user=user)


    def list_sessions(self, user: User, state: Optional[str] = None) -> List[Parking]:
        return self.accessparkings.get_parkings_byuser(user, state=state)
