import base64

import pytest

from ZonePark.api import crypto_utils
from ZonePark.api.crypto_utils import encrypt_str, decrypt_str, mask_value, protect
from ZonePark.api.DataAccess.AccessVehicles import AccessVehicles


@pytest.fixture()
def aes_key_env(monkeypatch):
    key = b"\x01" * 32  # AES-256
    monkeypatch.setenv("ZONEPARK_AES_KEY", base64.b64encode(key).decode("ascii"))


def test_encrypt_decrypt_roundtrip(aes_key_env):
    encrypted = encrypt_str("AB-123-CD")

    assert encrypted != "AB-123-CD"
    assert encrypted.startswith(crypto_utils.PREFIX)
    assert decrypt_str(encrypted) == "AB-123-CD"


def test_encryption_is_non_deterministic(aes_key_env):
    assert encrypt_str("AB-123-CD") != encrypt_str("AB-123-CD")


def test_associated_data_must_match(aes_key_env):
    encrypted = encrypt_str("AB-123-CD", associated_data=b"vehicle:1")

    assert decrypt_str(encrypted, associated_data=b"vehicle:1") == "AB-123-CD"
    with pytest.raises(Exception):
        decrypt_str(encrypted, associated_data=b"vehicle:2")


def test_protect_without_key_keeps_plain_value(monkeypatch):
    monkeypatch.delenv("ZONEPARK_AES_KEY", raising=False)
    assert protect("AB-123-CD") == "AB-123-CD"
    assert decrypt_str("AB-123-CD") == "AB-123-CD"


def test_invalid_key_length_is_rejected(monkeypatch):
    monkeypatch.setenv("ZONEPARK_AES_KEY", base64.b64encode(b"short").decode("ascii"))
    with pytest.raises(RuntimeError):
        encrypt_str("AB-123-CD")


def test_plate_is_encrypted_at_rest(aes_key_env, conn, make_user, make_vehicle):
    user = make_user()
    vehicle = make_vehicle(user, plate="AB-123-CD")

    conn.cursor.execute("SELECT plate_number FROM vehicles WHERE id = ?", [vehicle.id])
    stored = conn.cursor.fetchone()[0]
    assert stored != "AB-123-CD"
    assert stored.startswith(crypto_utils.PREFIX)

    assert AccessVehicles(conn=conn).get_vehicle(vehicle.id).plate_number == "AB-123-CD"


def test_mask_value():
    assert mask_value("AB-123-CD", keep=2) == "AB*******"
    assert mask_value("A") == "*"
    assert mask_value(None) is None
