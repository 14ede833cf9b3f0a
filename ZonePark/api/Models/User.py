from datetime import datetime

class User:

    def __init__(self,
                 name: str,
                 email: str,
                 password: str,
                 created_at: datetime,
                 id: int = None):

        self.id = id
        self.name = name
        self.email = email
        self.password = password
        self.created_at = created_at


    def __repr__(self):
        return self.email
