# tests/conftest.py
import sys
from pathlib import Path

import pytest

# 确保 src 目录在 sys.path 中
src_path = Path(__file__).resolve().parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from basex_core.config import BaseXConfig
from basex_core.exceptions import NetworkError


class FakeConnection:
    """脚本化的内存连接：按顺序吐出预设的入站字节，并记录所有发送内容。"""

    def __init__(self, inbound: bytes = b"", send_error_at: int | None = None):
        self.inbound = bytearray(inbound)
        self.sent: list[bytes] = []
        self.closed = False
        # 第 N 次 send (从 0 开始) 抛出 NetworkError
        self.send_error_at = send_error_at

    def send(self, data: bytes) -> int:
        if self.send_error_at is not None and len(self.sent) == self.send_error_at:
            raise NetworkError("Mock send error")
        self.sent.append(bytes(data))
        return len(data)

    def recv(self, n: int) -> bytes:
        chunk = bytes(self.inbound[:n])
        del self.inbound[:n]
        return chunk

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def make_conn():
    """[Fixture] 返回 FakeConnection 构造器。"""
    return FakeConnection


@pytest.fixture
def valid_config():
    """[Fixture] 返回一个合法的 BaseXConfig 对象。"""
    return BaseXConfig(
        host="localhost",
        port=1984,
        username="admin",
        password="admin",
    )
