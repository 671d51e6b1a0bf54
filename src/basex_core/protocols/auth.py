# src/basex_core/protocols/auth.py
"""
BaseX 协议层 - 认证握手 (Authentication)

连接建立后服务器立即发送一个挑战串 (Challenge Token)，其格式取决于服务器版本:

    旧版 (BaseX 7.x):  {timestamp}
    新版 (BaseX 8.0+): {realm}:{timestamp}

客户端无法预先得知服务器版本，因此每次连接都根据挑战串中是否含有 ':' 自动判别。

    S -> C: {challenge}\\0
    C -> S: {username}\\0
    C -> S: {md5(md5(codeword) + timestamp)}\\0
    S -> C: 0x00 (成功) | 非零 (失败)
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

from ..exceptions import AuthError, NetworkError
from ..utils import md5_hex
from .constants import AuthConst, Frame, Status
from .reader import read_delimited, read_status

if TYPE_CHECKING:
    from ..network import Connection

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LegacyChallenge:
    """旧版挑战：整个挑战串即为时间戳。"""

    timestamp: bytes

    variant = AuthConst.VARIANT_LEGACY

    def first_digest(self, username: bytes, password: bytes) -> str:
        return md5_hex(password)


@dataclass(frozen=True)
class RealmChallenge:
    """新版挑战：{realm}:{timestamp}。"""

    realm: bytes
    timestamp: bytes

    variant = AuthConst.VARIANT_REALM

    def first_digest(self, username: bytes, password: bytes) -> str:
        sep = AuthConst.CODEWORD_SEPARATOR
        codeword = username + sep + self.realm + sep + password
        return md5_hex(codeword)


Challenge = Union[LegacyChallenge, RealmChallenge]


def parse_challenge(token: bytes) -> Challenge:
    """解析挑战串。

    判别只依据挑战串本身，与用户名、密码的内容无关。
    realm 取第一个 ':' 之前的部分，timestamp 取其后的全部内容。
    """
    realm, sep, timestamp = token.partition(AuthConst.REALM_SEPARATOR)
    if not sep:
        return LegacyChallenge(timestamp=token)
    return RealmChallenge(realm=realm, timestamp=timestamp)


def encode_credential(value: str, name: str) -> bytes:
    """按 UTF-8 编码用户名或密码。

    Raises:
        ValueError: 含有 \\0 (会破坏帧边界)，或无法编码 (UnicodeEncodeError)。
    """
    data = value.encode(AuthConst.ENCODING)
    if Frame.TERMINATOR in data:
        raise ValueError(f"{name} 中不能包含 \\0 字节")
    return data


def build_auth_response(challenge: Challenge, username: str, password: str) -> str:
    """计算握手响应 md5(digest1 + timestamp)。

    digest1 以十六进制文本形式与时间戳直接拼接，中间没有分隔符。
    """
    usr_bytes = encode_credential(username, "username")
    pwd_bytes = encode_credential(password, "password")

    digest1 = challenge.first_digest(usr_bytes, pwd_bytes)
    return md5_hex(digest1.encode("ascii") + challenge.timestamp)


def authenticate(conn: "Connection", username: str, password: str) -> Challenge:
    """在刚建立的连接上执行认证握手。

    Args:
        conn: 已连接但尚未认证的连接。
        username: 数据库用户名。
        password: 数据库密码。

    Returns:
        Challenge: 本次握手所用的挑战 (可用于判断服务器版本)。

    Raises:
        ValueError: 用户名或密码含有 \\0 或无法编码，此时不会收发任何数据。
        AuthError: 凭据被拒绝 (rejected=True)，或握手途中连接丢失 (rejected=False)。
    """
    # 在读写任何数据之前校验凭据
    usr_bytes = encode_credential(username, "username")
    encode_credential(password, "password")

    try:
        # 1. 读取挑战串
        token = read_delimited(conn)
        # 2. 发送用户名
        conn.send(usr_bytes + Frame.TERMINATOR)
    except (NetworkError, OSError) as e:
        raise AuthError("Connection lost") from e

    # 3. 判别协议变体并计算响应
    challenge = parse_challenge(token)
    logger.debug(f"认证挑战变体: {challenge.variant}")
    response = build_auth_response(challenge, username, password)

    try:
        # 4. 发送响应
        conn.send(response.encode("ascii") + Frame.TERMINATOR)
        # 5. 读取认证状态
        status = read_status(conn)
    except (NetworkError, OSError) as e:
        raise AuthError("Connection lost") from e

    if status != Status.SUCCESS:
        logger.debug(f"认证被拒绝，状态字节: {status:#04x}")
        raise AuthError("Authentication failed", error_code=status)

    logger.debug("认证成功。")
    return challenge
