from __future__ import annotations

import pytest

from pg_cookbook.crypto import gen_dhparam, gen_ec_priv_key, gen_rsa_priv_key, private_pem


@pytest.fixture(scope="session")
def rsa_key():
    return gen_rsa_priv_key(1024)


@pytest.fixture(scope="session")
def ec_key():
    return gen_ec_priv_key("prime256v1")


@pytest.fixture(scope="session")
def rsa_pem(rsa_key) -> str:
    return private_pem(rsa_key)


@pytest.fixture(scope="session")
def ec_pem(ec_key) -> str:
    return private_pem(ec_key)


@pytest.fixture(scope="session")
def dh_parameters():
    # 1024 bits keeps safe-prime generation to a few seconds
    return gen_dhparam(1024, 2)
