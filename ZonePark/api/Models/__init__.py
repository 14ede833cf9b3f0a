from .User import User
from .Zone import Zone
from .Vehicle import Vehicle
from .Parking import Parking, ACTIVE, SETTLED
