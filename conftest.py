"""Configures pytest further and provides shared key fixtures."""
import pytest
from cryptography.hazmat.primitives.asymmetric import rsa

from tbrsa import RSAPrivKey


def pytest_addoption(parser):
    parser.addoption("--skip-slow", action="store_true", default=False, help="skip slower tests")
    parser.addoption("--run-extreme", action="store_true", default=False, help="run extreme value extremely slow tests")


def pytest_collection_modifyitems(config, items):
    skipdict = {}
    if config.getoption("--skip-slow"):
        skipdict["slow"] = pytest.mark.skip(reason="Slow test: needs no --skip-slow option")
    if not config.getoption("--run-extreme"):
        skipdict["extreme"] = pytest.mark.skip(reason="Extreme test: needs --run-extreme option")
    if not skipdict:
        return
    for item in items:
        for k, v in skipdict.items():
            if k in item.keywords:
                item.add_marker(v)


@pytest.fixture(scope="session")
def key_512() -> RSAPrivKey:
    """A freshly generated 512-bit key, shared to keep the suite fast."""
    return RSAPrivKey.generate(512)


@pytest.fixture(scope="session")
def reference_keys() -> dict[int, rsa.RSAPrivateKey]:
    """Keys from an independent implementation, by size."""
    return {size: rsa.generate_private_key(public_exponent=65537, key_size=size) for size in (1024, 2048)}
