"""OpenSSL helper exports."""
from .ciphers import cipher_available, pem_encrypt
from .dhparam import dhparam_pem, dhparam_pem_valid, gen_dhparam
from .keys import (
    EC_CURVES,
    MIN_KEY_LENGTH,
    encrypt_ec_key,
    encrypt_rsa_key,
    gen_ec_priv_key,
    gen_ec_pub_key,
    gen_rsa_priv_key,
    gen_rsa_pub_key,
    get_key_filename,
    key_length_valid,
    load_private_key,
    priv_key_file_valid,
    private_pem,
)

__all__ = [
    "EC_CURVES",
    "MIN_KEY_LENGTH",
    "cipher_available",
    "dhparam_pem",
    "dhparam_pem_valid",
    "encrypt_ec_key",
    "encrypt_rsa_key",
    "gen_dhparam",
    "gen_ec_priv_key",
    "gen_ec_pub_key",
    "gen_rsa_priv_key",
    "gen_rsa_pub_key",
    "get_key_filename",
    "key_length_valid",
    "load_private_key",
    "pem_encrypt",
    "priv_key_file_valid",
    "private_pem",
]
