import hashlib

from jotbin.utils import auth_hash


def test_hash_and_verify():
    pw = "correct horse battery staple"
    h = auth_hash.hash_password(pw)
    assert isinstance(h, str) and len(h) == 64
    assert auth_hash.verify_password(pw, h) is True


def test_wrong_password_fails():
    h = auth_hash.hash_password("s3cret")
    assert auth_hash.verify_password("wrong", h) is False


def test_hash_is_plain_sha256_hex():
    # same digest a browser computes, so it can be sent to /verify
    pw = "abcdef"
    assert auth_hash.hash_password(pw) == hashlib.sha256(pw.encode()).hexdigest()
    assert auth_hash.hash_password(pw) == auth_hash.hash_password(pw)


def test_verify_tolerates_missing_or_malformed_hash():
    assert auth_hash.verify_password("pw", None) is False
    assert auth_hash.verify_password("pw", "not-a-digest") is False
