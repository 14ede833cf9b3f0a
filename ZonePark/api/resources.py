from datetime import datetime, timezone
from typing import Optional

from ZonePark.api.Models.Parking import Parking
from ZonePark.api.Models.Vehicle import Vehicle
from ZonePark.api.Models.Zone import Zone
from ZonePark.api import price_calculator


def _iso(value: Optional[datetime]):
    # stored times are naive UTC, mark them as such for the client
    if value is None:
        return None
    return value.replace(tzinfo=timezone.utc).isoformat()


def zone_resource(zone: Zone) -> dict:
    return {
        "id": zone.id,
        "name": zone.name,
        "price_per_hour": zone.price_per_hour,
    }


def vehicle_resource(vehicle: Vehicle) -> dict:
    return {
        "id": vehicle.id,
        "plate_number": vehicle.plate_number,
        "description": vehicle.description,
    }


def parking_resource(parking: Parking, now: Optional[datetime] = None) -> dict:
    """
    User facing view of a parking.

    An active parking gets a live price up to `now` which is never written
    back. A stopped parking always shows the price stored when it stopped.
    """
    if parking.is_active:
        total_price = price_calculator.calculate_price(
            parking.zone.price_per_hour, parking.start_time, now or price_calculator.utcnow()
        )
    else:
        total_price = parking.total_price

    return {
        "id": parking.id,
        "zone": zone_resource(parking.zone),
        "vehicle": vehicle_resource(parking.vehicle),
        "start_time": _iso(parking.start_time),
        "stop_time": _iso(parking.stop_time),
        "total_price": total_price,
    }
