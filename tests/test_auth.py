# tests/test_auth.py
"""
测试认证握手：变体判别、摘要计算与失败分类。
"""

import hashlib

import pytest

from basex_core.exceptions import AuthError, AuthErrorCode
from basex_core.protocols import (
    LegacyChallenge,
    RealmChallenge,
    authenticate,
    build_auth_response,
    encode_credential,
    parse_challenge,
)


def _md5(data: bytes) -> str:
    return hashlib.md5(data).hexdigest()


@pytest.mark.parametrize(
    "token, expected, description",
    [
        (b"1634abf2", LegacyChallenge(b"1634abf2"), "旧版：纯时间戳"),
        (
            b"admin:1634abf2",
            RealmChallenge(b"admin", b"1634abf2"),
            "新版：realm:timestamp",
        ),
        (
            b"BaseX:12:34",
            RealmChallenge(b"BaseX", b"12:34"),
            "新版：只按第一个 ':' 切分",
        ),
        (b":1634", RealmChallenge(b"", b"1634"), "新版：空 realm"),
        (b"", LegacyChallenge(b""), "旧版：空挑战串"),
    ],
)
def test_parse_challenge(token, expected, description):
    assert parse_challenge(token) == expected, description


def test_legacy_reference_response():
    """admin/admin，时间戳 abc123: md5(md5("admin") + "abc123")"""
    expected = _md5(_md5(b"admin").encode() + b"abc123")
    got = build_auth_response(LegacyChallenge(b"abc123"), "admin", "admin")
    assert got == expected
    assert len(got) == 32
    assert got == got.lower()


def test_realm_reference_response():
    expected = _md5(_md5(b"admin:BaseX:secret").encode() + b"1634abf2")
    got = build_auth_response(RealmChallenge(b"BaseX", b"1634abf2"), "admin", "secret")
    assert got == expected


def test_colon_in_password_does_not_switch_variant():
    challenge = parse_challenge(b"1634abf2")
    assert isinstance(challenge, LegacyChallenge)

    expected = _md5(_md5(b"pa:ss").encode() + b"1634abf2")
    assert build_auth_response(challenge, "us:er", "pa:ss") == expected


def test_authenticate_legacy_wire_order(make_conn):
    conn = make_conn(b"abc123\x00" + b"\x00")

    challenge = authenticate(conn, "admin", "admin")

    assert challenge.variant == "legacy"
    expected = _md5(_md5(b"admin").encode() + b"abc123")
    assert conn.sent == [b"admin\x00", expected.encode() + b"\x00"]
    assert conn.inbound == b""


def test_authenticate_realm_wire_order(make_conn):
    conn = make_conn(b"BaseX:1634abf2\x00" + b"\x00")

    challenge = authenticate(conn, "admin", "admin")

    assert challenge.variant == "realm"
    expected = _md5(_md5(b"admin:BaseX:admin").encode() + b"1634abf2")
    assert conn.sent == [b"admin\x00", expected.encode() + b"\x00"]


def test_authenticate_rejected(make_conn):
    conn = make_conn(b"BaseX:1634abf2\x00" + b"\x01")

    with pytest.raises(AuthError, match="Authentication failed") as exc_info:
        authenticate(conn, "admin", "wrong")

    err = exc_info.value
    assert err.rejected is True
    assert err.error_code == 0x01
    assert err.error_code_enum is AuthErrorCode.ACCESS_DENIED


def test_authenticate_unknown_status_byte(make_conn):
    conn = make_conn(b"abc\x00" + b"\x7f")
    with pytest.raises(AuthError) as exc_info:
        authenticate(conn, "admin", "admin")
    assert exc_info.value.rejected is True
    assert exc_info.value.error_code_enum is None


@pytest.mark.parametrize(
    "inbound, send_error_at, description",
    [
        (b"", None, "连接后立即断开 (无挑战串)"),
        (b"abc1", None, "挑战串未读完即断开"),
        (b"abc123\x00", None, "发送响应后、状态字节前断开"),
        (b"abc123\x00\x00", 0, "发送用户名失败"),
        (b"abc123\x00\x00", 1, "发送响应失败"),
    ],
)
def test_authenticate_connection_lost(make_conn, inbound, send_error_at, description):
    conn = make_conn(inbound, send_error_at=send_error_at)

    with pytest.raises(AuthError, match="Connection lost") as exc_info:
        authenticate(conn, "admin", "admin")

    # 网络层失败不能被误判为凭据被拒绝
    assert exc_info.value.rejected is False, description


def test_auth_error_message_uses_code_description():
    assert AuthErrorCode.ACCESS_DENIED.description == "Access denied"

    err = AuthError("Authentication failed", error_code=0x01)
    assert str(err) == "Authentication failed: Access denied"

    # 未知状态码保持原始消息
    assert str(AuthError("Authentication failed", error_code=0x7F)) == (
        "Authentication failed"
    )
    assert str(AuthError("Connection lost")) == "Connection lost"


@pytest.mark.parametrize(
    "username, password, description",
    [
        ("ad\x00min", "admin", "用户名含 \\0"),
        ("admin", "pa\x00ss", "密码含 \\0"),
        ("ad\udc80min", "admin", "用户名无法按 UTF-8 编码"),
        ("admin", "pa\udc80ss", "密码无法按 UTF-8 编码"),
    ],
)
def test_authenticate_rejects_unframeable_credentials(
    make_conn, username, password, description
):
    conn = make_conn(b"BaseX:1634abf2\x00" + b"\x00")

    with pytest.raises(ValueError):
        authenticate(conn, username, password)

    # 校验发生在任何收发之前，连接上没有留下半个握手
    assert conn.sent == [], description
    assert conn.inbound == b"BaseX:1634abf2\x00\x00", description


def test_encode_credential():
    assert encode_credential("ädmin", "username") == "ädmin".encode("utf-8")
    with pytest.raises(ValueError, match="username"):
        encode_credential("a\x00b", "username")
