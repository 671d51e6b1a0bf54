# src/basex_core/protocols/__init__.py
"""
BaseX 协议层 (Protocol Layer)

本包负责线路协议的帧编码、解析与握手流程。

- 只依赖最小的 Connection 接口 (send / recv)，不创建 Socket。
- 不包含任何会话状态管理 (State)。
- 不依赖于 session 层。
"""

from . import constants
from .auth import (
    Challenge,
    LegacyChallenge,
    RealmChallenge,
    authenticate,
    build_auth_response,
    encode_credential,
    parse_challenge,
)
from .command import (
    CommandResponse,
    CommandStatus,
    encode_command,
    execute_command,
    send_exit,
)
from .reader import GrowableBuffer, read_delimited, read_status

# 公共 API
__all__ = [
    "constants",
    "read_delimited",
    "read_status",
    "GrowableBuffer",
    "Challenge",
    "LegacyChallenge",
    "RealmChallenge",
    "parse_challenge",
    "build_auth_response",
    "encode_credential",
    "authenticate",
    "CommandResponse",
    "CommandStatus",
    "encode_command",
    "execute_command",
    "send_exit",
]
