import sqlite3
import threading

from ZonePark.api import price_calculator

DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"

DEFAULT_ZONES = [
    ("Green Zone", 100),
    ("Yellow Zone", 200),
    ("Red Zone", 300),
]

class DBConnection:

    def __init__(self, database_path):
        # one connection shared by all requests, every access goes through self.lock
        self.connection = sqlite3.connect(database_path, check_same_thread=False)
        self.connection.row_factory = sqlite3.Row
        self.cursor = self.connection.cursor()
        self.lock = threading.RLock()

        self.cursor.execute("PRAGMA foreign_keys = ON")
        self.connection.commit()

        self.create_database_and_tables()
        self.seed_zones()


    def create_database_and_tables(self):
        tables_query = """
        CREATE TABLE IF NOT EXISTS users(
            id INTEGER PRIMARY KEY,
            name VARCHAR(255) NOT NULL,
            email VARCHAR(255) NOT NULL UNIQUE,
            password VARCHAR(255) NOT NULL,
            created_at DATETIME NOT NULL
        );

        CREATE TABLE IF NOT EXISTS zones(
            id INTEGER PRIMARY KEY,
            name VARCHAR(255) NOT NULL,
            price_per_hour INTEGER NOT NULL CHECK (price_per_hour >= 0),
            created_at DATETIME NOT NULL
        );

        CREATE TABLE IF NOT EXISTS vehicles(
            id INTEGER PRIMARY KEY,
            user_id INTEGER NOT NULL,
            plate_number VARCHAR(255) NOT NULL,
            description VARCHAR(255),
            created_at DATETIME NOT NULL,
            deleted_at DATETIME,
            FOREIGN KEY (user_id) REFERENCES users(id)
        );

        CREATE TABLE IF NOT EXISTS parkings(
            id INTEGER PRIMARY KEY,
            user_id INTEGER NOT NULL,
            vehicle_id INTEGER NOT NULL,
            zone_id INTEGER NOT NULL,
            start_time DATETIME NOT NULL,
            stop_time DATETIME,
            total_price INTEGER,
            CHECK ((stop_time IS NULL) = (total_price IS NULL)),
            FOREIGN KEY (user_id) REFERENCES users(id),
            FOREIGN KEY (vehicle_id) REFERENCES vehicles(id),
            FOREIGN KEY (zone_id) REFERENCES zones(id)
        );

        CREATE UNIQUE INDEX IF NOT EXISTS parkings_one_active_per_vehicle
            ON parkings (vehicle_id)
            WHERE stop_time IS NULL;
        """

        with self.lock:
            self.cursor.executescript(tables_query)


    def seed_zones(self):
        with self.lock:
            self.cursor.execute("SELECT COUNT(*) FROM zones")
            if self.cursor.fetchone()[0] > 0:
                return

            created_at = price_calculator.utcnow().strftime(DATETIME_FORMAT)
            self.cursor.executemany(
                "INSERT INTO zones (name, price_per_hour, created_at) VALUES (?, ?, ?)",
                [(name, price, created_at) for name, price in DEFAULT_ZONES]
            )
            self.connection.commit()


    def close_connection(self):
        with self.lock:
            self.cursor.close()
            self.connection.close()
