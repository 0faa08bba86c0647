# test_bls12381.py
import hashlib
import os

import pytest
from py_ecc.bls.hash_to_curve import hash_to_G2
from py_ecc.optimized_bls12_381 import G1, G2, Z1, Z2, add, b, b2, curve_order, is_on_curve, multiply, neg

from aastar_bls.clients.errors import (
    EmptyInputSet,
    HashToCurveFailure,
    InputValidationError,
    InvalidScalar,
    PointNotInSubgroup,
    PointNotOnCurve,
)
from aastar_bls.constants import DEFAULT_DST
from aastar_bls.utils import bls12381
from aastar_bls.utils.bls12381 import p


# --- Pytest Fixtures ---

@pytest.fixture(scope="module")
def domain():
    """提供一个标准的域分隔符 (DST) 用于测试。"""
    return DEFAULT_DST


@pytest.fixture(scope="module")
def messages():
    """提供一组标准的消息用于测试。"""
    return {
        "msg1": b"Hello, world!",
        "msg2": b"This is a test message.",
        "msg3": b"Another message for aggregation.",
    }


@pytest.fixture(scope="module")
def secret_keys():
    """提供三个固定的私钥标量。"""
    return [123456789, 987654321, curve_order - 2]


# --- 测试类 ---

class TestHashToG2:

    def test_deterministic_and_valid(self, messages, domain):
        """相同输入的哈希结果必须相同，且位于 G2 子群内。"""
        h1 = bls12381.hash_to_g2(messages["msg1"], domain)
        assert is_on_curve(h1, b2), "哈希结果必须在 G2 曲线上"
        assert bls12381.subgroup_check(h1)
        assert bls12381.points_equal(h1, bls12381.hash_to_g2(messages["msg1"], domain))

        h2 = bls12381.hash_to_g2(messages["msg2"], domain)
        assert not bls12381.points_equal(h1, h2), "不同消息的哈希结果必须不同"

        h3 = bls12381.hash_to_g2(messages["msg1"], b"DIFFERENT_DOMAIN")
        assert not bls12381.points_equal(h1, h3), "不同域的哈希结果必须不同"

    def test_matches_py_ecc(self, messages, domain):
        """结果应与 py_ecc 的 RFC 9380 实现一致。"""
        ours = bls12381.hash_to_g2(messages["msg3"], domain)
        ref = hash_to_G2(messages["msg3"], domain, hashlib.sha256)
        assert bls12381.points_equal(ours, ref)

    def test_dst_validation(self, messages):
        """测试域分隔符 (DST) 的长度验证。"""
        with pytest.raises(InputValidationError, match="DST length must be between 1 and 255 bytes"):
            bls12381.hash_to_g2(messages["msg1"], b"")
        with pytest.raises(InputValidationError, match="DST length must be between 1 and 255 bytes"):
            bls12381.hash_to_g2(messages["msg1"], os.urandom(256))

    def test_library_failure_is_wrapped(self, monkeypatch, domain):
        """底层库抛出的 ValueError 应包装为 HashToCurveFailure。"""
        def boom(*args, **kwargs):
            raise ValueError("boom")
        monkeypatch.setattr(bls12381, "hash_to_G2", boom)
        with pytest.raises(HashToCurveFailure):
            bls12381.hash_to_g2(b"m", domain)

    def test_infinity_result_rejected(self, monkeypatch, domain):
        """映射结果为无穷远点时必须失败。"""
        monkeypatch.setattr(bls12381, "hash_to_G2", lambda *args: Z2)
        with pytest.raises(HashToCurveFailure, match="infinity"):
            bls12381.hash_to_g2(b"m", domain)


class TestKeysAndSignatures:

    def test_sk_to_pk(self, secret_keys):
        """pk = sk * G1。"""
        sk = secret_keys[0]
        pk = bls12381.sk_to_pk(sk)
        assert is_on_curve(pk, b)
        assert bls12381.points_equal(pk, multiply(G1, sk))

    @pytest.mark.parametrize("sk", [0, curve_order, curve_order + 1, -1])
    def test_invalid_scalar(self, sk, domain):
        """范围 [1, r-1] 之外的私钥必须被拒绝。"""
        with pytest.raises(InvalidScalar):
            bls12381.sk_to_pk(sk)
        with pytest.raises(InvalidScalar):
            bls12381.sign(b"m", sk, domain)

    def test_sign_verify_single(self, secret_keys, messages, domain):
        """测试一个有效的单一签名和验证流程。"""
        sk = secret_keys[0]
        pk = bls12381.sk_to_pk(sk)
        h = bls12381.hash_to_g2(messages["msg1"], domain)
        sig = bls12381.sign(messages["msg1"], sk, domain)
        assert bls12381.pairing_check(pk, h, sig), "有效签名必须验证通过"

        other_h = bls12381.hash_to_g2(messages["msg2"], domain)
        assert not bls12381.pairing_check(pk, other_h, sig), "使用错误的消息必须验证失败"
        assert not bls12381.pairing_check(pk, h, add(sig, G2)), "篡改后的签名必须验证失败"

    def test_pairing_check_rejects_infinity(self, messages, domain):
        """无穷远公钥配无穷远签名不能通过验证。"""
        h = bls12381.hash_to_g2(messages["msg1"], domain)
        assert not bls12381.pairing_check(Z1, h, Z2)


class TestAggregation:

    def test_aggregate(self, secret_keys, messages, domain):
        """测试公钥和签名的聚合功能。"""
        pks = [bls12381.sk_to_pk(sk) for sk in secret_keys]
        sigs = [bls12381.sign(messages["msg1"], sk, domain) for sk in secret_keys]

        agg_pk = bls12381.aggregate_pks(pks)
        assert bls12381.points_equal(agg_pk, add(add(pks[0], pks[1]), pks[2]))
        assert bls12381.points_equal(agg_pk, bls12381.aggregate_pks(pks[::-1])), "聚合结果应与顺序无关"

        agg_sig = bls12381.aggregate_sigs(sigs)
        assert bls12381.points_equal(agg_sig, add(add(sigs[0], sigs[1]), sigs[2]))

        h = bls12381.hash_to_g2(messages["msg1"], domain)
        assert bls12381.pairing_check(agg_pk, h, agg_sig), "快速聚合签名必须验证通过"

    def test_aggregate_empty(self):
        """空输入的聚合必须报错。"""
        with pytest.raises(EmptyInputSet):
            bls12381.aggregate_pks([])
        with pytest.raises(EmptyInputSet):
            bls12381.aggregate_sigs([])

    def test_aggregate_pairing_check(self, secret_keys, messages, domain):
        """测试对不同消息的聚合签名进行验证。"""
        msgs = [messages["msg1"], messages["msg2"], messages["msg3"]]
        pks = [bls12381.sk_to_pk(sk) for sk in secret_keys]
        sigs = [bls12381.sign(m, sk, domain) for m, sk in zip(msgs, secret_keys)]
        agg_sig = bls12381.aggregate_sigs(sigs)
        hashes = bls12381.hash_to_g2_points(msgs, domain)

        assert bls12381.aggregate_pairing_check(pks, hashes, agg_sig), "有效聚合签名必须验证通过"
        assert not bls12381.aggregate_pairing_check(pks, [hashes[0], hashes[2], hashes[1]], agg_sig)
        assert not bls12381.aggregate_pairing_check([], [], agg_sig)

        with pytest.raises(InputValidationError, match="Number of public keys and messages must be equal"):
            bls12381.aggregate_pairing_check(pks, hashes[:2], agg_sig)


class TestValidation:

    def test_point_outside_subgroup(self):
        """(0, 2) 在 G1 曲线上但阶为 3，不属于素数阶子群。"""
        pt = bls12381.g1_from_affine(0, 2)
        assert is_on_curve(pt, b)
        with pytest.raises(PointNotInSubgroup):
            bls12381.validate_g1(pt)

    def test_point_not_on_curve(self):
        """不满足曲线方程的点必须被拒绝。"""
        x, y = bls12381.g1_to_affine(G1)
        with pytest.raises(PointNotOnCurve):
            bls12381.validate_g1(bls12381.g1_from_affine(x, (y + 1) % p))

        (x0, x1), (y0, y1) = bls12381.g2_to_affine(G2)
        with pytest.raises(PointNotOnCurve):
            bls12381.validate_g2(bls12381.g2_from_affine((x0, x1), ((y0 + 1) % p, y1)))

    def test_generators_are_valid(self):
        """生成元必须通过校验。"""
        assert bls12381.validate_g1(G1) is G1
        assert bls12381.validate_g2(G2) is G2
        assert bls12381.points_equal(neg(neg(G1)), G1)
