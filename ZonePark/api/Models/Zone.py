from datetime import datetime

class Zone:

    def __init__(self,
                 name: str,
                 price_per_hour: int,
                 created_at: datetime,
                 id: int = None):

        self.id = id
        self.name = name
        self.price_per_hour = price_per_hour
        self.created_at = created_at


    def __repr__(self):
        return f"{self.name} ({self.price_per_hour}/h)"
