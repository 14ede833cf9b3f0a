from datetime import datetime
from typing import Optional
from .User import User

class Vehicle:

    def __init__(self,
                 user: User,
                 plate_number: str,
                 created_at: datetime,
                 description: Optional[str] = None,
                 deleted_at: Optional[datetime] = None,
                 id: int = None):

        self.id = id
        self.user = user
        self.plate_number = plate_number
        self.description = description
        self.created_at = created_at
        self.deleted_at = deleted_at


    @property
    def deleted(self) -> bool:
        return self.deleted_at is not None


    def __repr__(self):
        return self.plate_number
