# tests/conftest.py
import pytest

from aastar_bls.clients.signer import Signer
from aastar_bls.utils.crypto import derive_secret_key, secret_key_to_bytes


@pytest.fixture(scope="session")
def zero_seed():
    """全零的 32 字节种子。"""
    return bytes(32)


@pytest.fixture(scope="session")
def one_seed():
    """全 0x01 的 32 字节种子。"""
    return b"\x01" * 32


@pytest.fixture(scope="session")
def message():
    """所有签名者共同签名的消息。"""
    return b"hello world"


@pytest.fixture(scope="session")
def make_secret_keys():
    """按下标确定性地生成 n 个 32 字节私钥。"""
    def _make(n):
        return [secret_key_to_bytes(derive_secret_key(bytes([i + 1]) * 32)) for i in range(n)]
    return _make


@pytest.fixture(scope="session")
def two_signers(zero_seed, one_seed):
    """由全零与全一种子派生的两个签名者。"""
    return [Signer.from_seed(zero_seed), Signer.from_seed(one_seed)]
