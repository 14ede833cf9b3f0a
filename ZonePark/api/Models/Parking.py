from datetime import datetime
from typing import Optional
from .Vehicle import Vehicle
from .Zone import Zone

ACTIVE = "active"
SETTLED = "settled"

class Parking:
    """
    One start-to-stop parking event of a vehicle in a zone.

    A parking without a stop_time is active. Stopping it sets stop_time and
    total_price together, after which the record never changes again.
    """

    def __init__(self,
                 user_id: int,
                 vehicle: Vehicle,
                 zone: Zone,
                 start_time: datetime,
                 stop_time: Optional[datetime] = None,
                 total_price: Optional[int] = None,
                 id: int = None):

        self.id = id
        self.user_id = user_id
        self.vehicle = vehicle
        self.zone = zone
        self.start_time = start_time
        self.stop_time = stop_time
        self.total_price = total_price


    @property
    def state(self) -> str:
        return ACTIVE if self.stop_time is None else SETTLED


    @property
    def is_active(self) -> bool:
        return self.stop_time is None


    def __repr__(self):
        return f"Parking({self.id}, {self.vehicle!r}, {self.state})"
