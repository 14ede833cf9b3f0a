import sqlite3
from datetime import datetime
from ZonePark.api.DBConnection import DBConnection, DATETIME_FORMAT
from ZonePark.api.Models.User import User
from ZonePark.api.errors import Conflict

class AccessUsers:

    def __init__(self, conn: DBConnection):
        self.cursor = conn.cursor
        self.conn = conn.connection
        self.lock = conn.lock


    def _to_user(self, row):
        if row is None:
            return None
        user_dict = dict(row)
        user_dict["created_at"] = datetime.strptime(user_dict["created_at"], DATETIME_FORMAT)
        return User(**user_dict)


    def get_user_byemail(self, email: str):
        query = """
        SELECT * FROM users
        WHERE email = ?;
        """
        with self.lock:
            self.cursor.execute(query, [email.lower()])
            return self._to_user(self.cursor.fetchone())


    def get_user_byid(self, id):
        query = """
        SELECT * FROM users
        WHERE id = ?;
        """
        with self.lock:
            self.cursor.execute(query, [id])
            return self._to_user(self.cursor.fetchone())


    def add_user(self, user: User):
        query = """
        INSERT INTO users
            (name, email, password, created_at)
        VALUES
            (:name, :email, :password, :created_at)
        RETURNING id;
        """
        payload = {
            "name": user.name,
            "email": user.email.lower(),
            "password": user.password,
            "created_at": user.created_at.strftime(DATETIME_FORMAT),
        }
        with self.lock:
            try:
                self.cursor.execute(query, payload)
                user.id = self.cursor.fetchone()[0]
                self.conn.commit()
            except sqlite3.IntegrityError:
                self.conn.rollback()
                raise Conflict("The email has already been taken.")


    def update_user(self, user: User):
        query = """
        UPDATE users
        SET name = :name,
            email = :email,
            password = :password
        WHERE id = :id;
        """
        payload = {
            "id": user.id,
            "name": user.name,
            "email": user.email.lower(),
            "password": user.password,
        }
        with self.lock:
            try:
                self.cursor.execute(query, payload)
                self.conn.commit()
            except sqlite3.IntegrityError:
                self.conn.rollback()
                raise Conflict("The email has already been taken.")
