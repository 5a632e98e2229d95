from threadboard.core import security


def test_hash_and_verify_password() -> None:
    hashed = security.hash_password("passw0rd")
    assert hashed != "passw0rd"
    assert security.verify_password("passw0rd", hashed)
    assert not security.verify_password("wrong-pass", hashed)


def test_hashes_are_salted() -> None:
    assert security.hash_password("passw0rd") != security.hash_password("passw0rd")


def test_verify_rejects_malformed_hash() -> None:
    assert not security.verify_password("passw0rd", "not-a-hash")


def test_session_tokens_are_128_bit_and_url_safe() -> None:
    tokens = {security.new_session_token() for _ in range(50)}
    assert len(tokens) == 50
    for token in tokens:
        # 16 random bytes encode to 22 URL-safe base64 characters.
        assert len(token) == 22
        assert set(token) <= set(
            "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-_"
        )
