from types import SimpleNamespace
from ZonePark.api.authentication import extract_bearer_token, hash_password, verify_password

def make_headers(hdict):
    return SimpleNamespace(get=hdict.get, **hdict)

def test_happy_bearer():
    headers = make_headers({"Authorization": "Bearer abc123"})
    assert extract_bearer_token(headers) == "abc123"

def test_missing_header():
    headers = make_headers({})
    assert extract_bearer_token(headers) is None

def test_wrong_scheme():
    headers = make_headers({"Authorization": "Basic abc"})
    assert extract_bearer_token(headers) is None

def test_bad_format():
    headers = make_headers({"Authorization": "Bearer"})
    assert extract_bearer_token(headers) is None

def test_password_hash_verifies():
    hashed = hash_password("Secret123!")
    assert hashed.startswith("$2b$")
    assert verify_password("Secret123!", hashed)
    assert not verify_password("wrong", hashed)

def test_verify_against_non_bcrypt_value_is_false():
    assert not verify_password("Secret123!", "plain-text")
