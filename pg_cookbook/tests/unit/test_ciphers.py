import pytest

from pg_cookbook.crypto import cipher_available, load_private_key, pem_encrypt, priv_key_file_valid


@pytest.mark.parametrize("name", ["aes-256-cbc", "aes-128-cbc", "des-ede3-cbc"])
def test_common_ciphers_available(name: str) -> None:
    assert cipher_available(name)


@pytest.mark.parametrize("name", ["", "rot13", "aes-999-cbc"])
def test_unknown_ciphers_unavailable(name: str) -> None:
    assert not cipher_available(name)


def test_pem_encrypt_uses_password(ec_key) -> None:
    pem = pem_encrypt(ec_key, "hunter22", "aes-256-cbc")
    assert pem.startswith("-----BEGIN")
    assert priv_key_file_valid(pem, "hunter22")


def test_pem_encrypt_rejects_empty_password(ec_key) -> None:
    with pytest.raises(ValueError):
        pem_encrypt(ec_key, "", "aes-256-cbc")


def test_pem_encrypt_rejects_non_key() -> None:
    with pytest.raises(TypeError):
        pem_encrypt("not a key", "hunter22", "aes-256-cbc")


@pytest.mark.parametrize(
    "name",
    ["camellia-256-cbc", "aria-256-cbc", "aes-256-cfb", "aes-256-ofb", "sm4-cbc", "bf-cbc", "des-cbc"],
)
def test_other_ciphers_read_back_with_same_password(name: str, rsa_key, ec_key) -> None:
    if not cipher_available(name):
        pytest.skip(f"{name} is not provided by this OpenSSL build")
    for key in (rsa_key, ec_key):
        pem = pem_encrypt(key, "s3cret", name)
        assert priv_key_file_valid(pem, "s3cret")
        assert not priv_key_file_valid(pem, "wrong")
        loaded = load_private_key(pem, "s3cret")
        assert loaded.private_numbers() == key.private_numbers()
