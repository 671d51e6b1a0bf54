# src/basex_core/protocols/reader.py
"""
BaseX 协议层 - 变长字段读取

从连接中逐字节读取以 \\0 结尾的字符串。
缓冲区容量从 32 字节起按 2 倍增长，达到 10 MiB 上限即失败。
"""

import logging
from typing import TYPE_CHECKING

from ..exceptions import BufferLimitExceeded, ConnectionClosedError, NetworkError
from .constants import Frame, ReaderConst

if TYPE_CHECKING:
    from ..network import Connection

logger = logging.getLogger(__name__)


class GrowableBuffer:
    """带硬上限的可增长字节缓冲区。

    真实存储交给 bytearray，这里只负责容量记账：
    容量始终是 INITIAL_SIZE 的 2^k 倍，且严格小于 max_size。
    存储长度最多为 capacity - 1 (为结束符预留一个位置)。
    """

    def __init__(
        self,
        initial_size: int | None = None,
        max_size: int | None = None,
    ) -> None:
        self.data = bytearray()
        self.capacity = initial_size or ReaderConst.INITIAL_SIZE
        self.max_size = max_size or ReaderConst.MAX_SIZE

    def __len__(self) -> int:
        return len(self.data)

    def append(self, b: int) -> None:
        if len(self.data) >= self.capacity - 1:
            self._grow()
        self.data.append(b)

    def _grow(self) -> None:
        new_capacity = self.capacity * 2
        if new_capacity >= self.max_size:
            raise BufferLimitExceeded(
                f"变长字段超出上限 {self.max_size} 字节", limit=self.max_size
            )
        self.capacity = new_capacity


def _recv_byte(conn: "Connection") -> int:
    """从连接读取恰好 1 个字节。"""
    try:
        b = conn.recv(1)
    except OSError as e:
        raise NetworkError(f"接收错误: {e}") from e

    if not b:
        raise ConnectionClosedError("连接已被对端关闭")
    return b[0]


def read_delimited(conn: "Connection", max_size: int | None = None) -> bytes:
    """读取一个以 \\0 结尾的字段。

    结束符会被消费，但不包含在返回值中。每次调用都使用独立的缓冲区，
    调用之间不保留任何状态。

    Args:
        conn: 已建立的连接。
        max_size: 缓冲区容量上限，为 None 时使用 ReaderConst.MAX_SIZE (10 MiB)。

    Returns:
        bytes: 结束符之前的全部字节。

    Raises:
        BufferLimitExceeded: 在上限之内没有遇到结束符。
        ConnectionClosedError: 读取途中对端关闭连接。
        NetworkError: 底层传输错误。
    """
    buf = GrowableBuffer(max_size=max_size)

    while True:
        b = _recv_byte(conn)
        if b == Frame.TERMINATOR_BYTE:
            return bytes(buf.data)
        buf.append(b)


def read_status(conn: "Connection") -> int:
    """读取单个状态字节。"""
    status = _recv_byte(conn)
    logger.debug(f"状态字节: {status:#04x}")
    return status
