import logging

import pytest
from py_ecc.bls import G2ProofOfPossession

from aastar_bls.clients.errors import (
    EmptyInputSet,
    InputValidationError,
    InvalidFieldElement,
    LocalVerificationFailed,
)
from aastar_bls.clients.signature_aggregator import SignatureAggregator
from aastar_bls.clients.signer import Signer
from aastar_bls.clients.verifier import LocalVerifier
from aastar_bls.config import BLSConfig
from aastar_bls.constants import DEFAULT_DST
from aastar_bls.types import AggregateSignatureResult, DistinctMessageAggregate, SolidityArguments
from aastar_bls.utils.bls12381 import p


@pytest.fixture(scope="module")
def aggregator():
    return SignatureAggregator()


@pytest.fixture(scope="module")
def verifier():
    return LocalVerifier()


# --- 输入校验 ------------------------------------------------------------

def test_empty_inputs_raise(aggregator):
    """空的私钥与消息列表必须报错"""
    with pytest.raises(InputValidationError):
        aggregator.generate_aggregate_signature([], [])


def test_mismatched_lengths_raise(aggregator, make_secret_keys, message):
    """私钥数量与消息数量不一致时必须报错"""
    with pytest.raises(InputValidationError):
        aggregator.generate_aggregate_signature(make_secret_keys(2), [message])
    with pytest.raises(InputValidationError):
        aggregator.generate_distinct_message_aggregate(make_secret_keys(1), [b"a", b"b"])


def test_different_messages_raise(aggregator, make_secret_keys):
    """公共消息模式下消息必须完全相同"""
    with pytest.raises(InputValidationError, match="generate_distinct_message_aggregate"):
        aggregator.generate_aggregate_signature(make_secret_keys(2), [b"a", b"b"])


def test_aggregate_empty_list_raises():
    with pytest.raises(EmptyInputSet):
        SignatureAggregator.aggregate_signatures([])
    with pytest.raises(EmptyInputSet):
        SignatureAggregator.aggregate_public_keys([])


# --- 端到端流程 ----------------------------------------------------------

def test_two_signer_scenario(aggregator, verifier, two_signers, message):
    """全零与全一种子的两个签名者对 "hello world" 签名，结果确定且可验证"""
    result = aggregator.generate_aggregate_signature(two_signers, [message, message])
    again = aggregator.generate_aggregate_signature(two_signers, [message, message])

    assert isinstance(result, AggregateSignatureResult)
    assert result == again, "相同输入必须得到相同结果"
    assert len(result.aggPk) == 128
    assert len(result.hashedMsg) == 256
    assert len(result.aggSig) == 256
    assert verifier.verify_eip2537(result.aggPk, result.hashedMsg, result.aggSig)

    pks = [s.derive_public_key() for s in two_signers]
    sigs = [s.sign(message) for s in two_signers]
    assert G2ProofOfPossession.FastAggregateVerify(pks, message, G2ProofOfPossession.Aggregate(sigs))


@pytest.mark.parametrize("n", [3, 5, 10])
def test_n_signers_verify(aggregator, verifier, make_secret_keys, n):
    """3、5、10 个签名者的聚合签名都能通过本地验证"""
    msg = f"userop for {n} signers".encode()
    result = aggregator.generate_aggregate_signature(make_secret_keys(n), [msg] * n)
    assert verifier.verify_eip2537(result.aggPk, result.hashedMsg, result.aggSig)


def test_permutation_invariance(aggregator, make_secret_keys, message):
    """聚合结果与签名者顺序无关"""
    sks = make_secret_keys(3)
    forward = aggregator.generate_aggregate_signature(sks, [message] * 3)
    backward = aggregator.generate_aggregate_signature(sks[::-1], [message] * 3)
    assert forward == backward

    signers = [Signer(sk) for sk in sks]
    pks = [s.derive_public_key() for s in signers]
    sigs = [s.sign(message) for s in signers]
    assert SignatureAggregator.aggregate_public_keys(pks) == SignatureAggregator.aggregate_public_keys(pks[::-1])
    assert SignatureAggregator.aggregate_signatures(sigs) == SignatureAggregator.aggregate_signatures(
        [sigs[1], sigs[2], sigs[0]]
    )


def test_bit_flip_fails_verification(aggregator, verifier, make_secret_keys, message):
    """聚合签名中任意一位被翻转后验证失败"""
    result = aggregator.generate_aggregate_signature(make_secret_keys(2), [message] * 2)
    for index in (100, 200, 255):
        tampered = bytearray(result.aggSig)
        tampered[index] ^= 0x01
        assert not verifier.verify_eip2537(result.aggPk, result.hashedMsg, bytes(tampered))


def test_hash_message(aggregator, two_signers, message):
    """hash_message 与结果中的 H(m) 一致"""
    result = aggregator.generate_fast_aggregate_signature(two_signers, message)
    assert aggregator.hash_message(message) == result.hashedMsg
    assert aggregator.hash_message(b"other") != result.hashedMsg


def test_build_result_from_remote_signatures(aggregator, make_secret_keys, message):
    """由远程签名者提交的公钥与签名构建的结果与本地签名一致"""
    sks = make_secret_keys(3)
    signers = [Signer(sk) for sk in sks]
    result = aggregator.build_result(
        [s.derive_public_key() for s in signers],
        [s.sign(message) for s in signers],
        message,
    )
    assert result == aggregator.generate_aggregate_signature(sks, [message] * 3)


def test_build_result_rejects_bad_input(aggregator, two_signers, message):
    pks = [s.derive_public_key() for s in two_signers]
    sigs = [s.sign(message) for s in two_signers]
    with pytest.raises(InputValidationError):
        aggregator.build_result(pks, sigs[:1], message)
    with pytest.raises(InputValidationError, match="infinity"):
        aggregator.build_result([pks[0], bytes([0xc0]) + bytes(47)], sigs, message)


def test_local_verification_gate(two_signers, message, caplog):
    """签名与消息不符时本地验证拦截，关闭验证后则直接编码"""
    pks = [s.derive_public_key() for s in two_signers]
    wrong_sigs = [s.sign(b"not the message") for s in two_signers]

    gated = SignatureAggregator(logger=logging.getLogger("aastar_bls.test.gate"))
    with caplog.at_level(logging.WARNING, logger="aastar_bls.test.gate"):
        with pytest.raises(LocalVerificationFailed):
            gated.build_result(pks, wrong_sigs, message)
    assert "local verification failed" in caplog.text

    ungated = SignatureAggregator(config=BLSConfig(verify_locally=False))
    result = ungated.build_result(pks, wrong_sigs, message)
    assert not ungated.verifier.verify_eip2537(result.aggPk, result.hashedMsg, result.aggSig)


def test_distinct_message_aggregate(aggregator, verifier, make_secret_keys):
    """每个签名者签署各自的消息"""
    msgs = [b"alpha", b"beta", b"gamma"]
    agg = aggregator.generate_distinct_message_aggregate(make_secret_keys(3), msgs)
    assert isinstance(agg, DistinctMessageAggregate)
    assert len(agg.aggSig) == 96
    assert agg.messages == msgs
    assert verifier.verify_distinct(agg.publicKeys, agg.messages, agg.aggSig)


def test_generate_dispatches_on_kind(aggregator, make_secret_keys, message):
    """按请求类型分派到公共消息或逐签名者消息模式"""
    sks = make_secret_keys(2)
    common = aggregator.generate(sks, {"kind": "common", "message": message})
    assert isinstance(common, AggregateSignatureResult)
    assert common == aggregator.generate_aggregate_signature(sks, [message, message])

    per_signer = aggregator.generate(sks, {"kind": "per_signer", "messages": [b"a", b"b"]})
    assert isinstance(per_signer, DistinctMessageAggregate)

    with pytest.raises(InputValidationError):
        aggregator.generate(sks, object())


def test_to_solidity_arguments(aggregator, two_signers, message):
    """结果可以转换为合约调用参数"""
    result = aggregator.generate_aggregate_signature(two_signers, [message, message])
    args = SignatureAggregator.to_solidity_arguments(result.aggPk, result.hashedMsg, result.aggSig)
    assert isinstance(args, SolidityArguments)
    assert all(v < p for v in args.aggPk.as_tuple())
    assert all(v < p for pair in args.aggSig.as_tuple() for v in pair)

    with pytest.raises(InvalidFieldElement):
        SignatureAggregator.to_solidity_arguments(b"\x01" + result.aggPk[1:], result.hashedMsg, result.aggSig)


def test_signer_with_other_dst_rejected(aggregator, make_secret_keys, message):
    """调用方传入的 Signer 若使用不同的 DST，必须在签名前报错"""
    other = Signer(make_secret_keys(1)[0], config=BLSConfig(dst=b"AASTAR_OTHER_DST"))
    with pytest.raises(InputValidationError, match="DST"):
        aggregator.generate_fast_aggregate_signature([other], message)
    with pytest.raises(InputValidationError, match="DST"):
        aggregator.generate_distinct_message_aggregate([other], [message])

    same = Signer(make_secret_keys(1)[0], config=BLSConfig(dst=DEFAULT_DST))
    assert isinstance(aggregator.generate_fast_aggregate_signature([same], message), AggregateSignatureResult)
