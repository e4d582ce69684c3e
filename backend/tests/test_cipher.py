import pytest

from jotbin.client.cipher import DecryptionError, FernetPasswordCipher

cipher = FernetPasswordCipher(iterations=1_000)


def test_round_trip_unicode():
    text = "ghi chú bí mật 🌈\nline two"
    blob = cipher.encrypt(text, "abcdef")
    assert text not in blob
    assert cipher.decrypt(blob, "abcdef") == text


def test_same_input_encrypts_differently():
    assert cipher.encrypt("x", "abcdef") != cipher.encrypt("x", "abcdef")


def test_wrong_password_raises():
    blob = cipher.encrypt("x", "abcdef")
    with pytest.raises(DecryptionError):
        cipher.decrypt(blob, "abcdeg")


@pytest.mark.parametrize("blob", ["", "no-separator", '{"content": "x"}', "c2FsdHNhbHRzYWx0c2FsdA==$not-a-token"])
def test_garbage_raises(blob):
    with pytest.raises(DecryptionError):
        cipher.decrypt(blob, "abcdef")


def test_tampered_token_raises():
    blob = cipher.encrypt("hello", "abcdef")
    i = len(blob) // 2 + 10
    tampered = blob[:i] + ("A" if blob[i] != "A" else "B") + blob[i + 1:]
    with pytest.raises(DecryptionError):
        cipher.decrypt(tampered, "abcdef")
