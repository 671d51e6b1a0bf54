# src/basex_core/network.py
"""
BaseX 客户端核心库 - 网络模块 (Network)

封装 TCP Socket 的连接、发送、接收与关闭。
该模块屏蔽了底层 Socket 的复杂性，向协议层提供纯粹的 bytes 收发接口。

全部操作均为阻塞 I/O 且不设超时：对端挂起时调用方也会一直挂起。
"""

import logging
import socket
from typing import Protocol

from .exceptions import ConnectionClosedError, NetworkError

logger = logging.getLogger(__name__)

RECV_CHUNK_SIZE = 8192


class Connection(Protocol):
    """协议层所需的最小连接接口。

    NetworkClient 是它的标准实现；测试中可以用任何具备
    这三个方法的对象替代。
    """

    def send(self, data: bytes) -> int: ...

    def recv(self, n: int) -> bytes: ...

    def close(self) -> None: ...


class NetworkClient:
    """封装阻塞 TCP 连接的客户端。

    协议按字节逐个读取 \\0 结尾的字段，因此内部维护一个接收缓冲区，
    recv(1) 只在缓冲区耗尽时才触发一次系统调用。

    This is *not* a threadsafe object--do not share!
    """

    def __init__(self, sock: socket.socket) -> None:
        self.sock: socket.socket | None = sock
        self._buf = bytearray()
        self._pos = 0

    @classmethod
    def connect(cls, host: str, port: int | str) -> "NetworkClient":
        """连接到 (host, port)。

        Raises:
            NetworkError: 参数缺失、端口非法或连接失败。
        """
        if not host or port is None:
            raise NetworkError(f"缺少主机名 '{host}' 或端口 '{port}'")
        try:
            port_num = int(port)
        except (TypeError, ValueError):
            raise NetworkError(f"端口格式无效: {port}") from None

        try:
            sock = socket.create_connection((host, port_num))
        except OSError as e:
            raise NetworkError(f"连接失败 {host}:{port_num}: {e}") from e

        logger.debug(f"TCP 连接已建立: {host}:{port_num}")
        return cls(sock)

    def send(self, data: bytes) -> int:
        """发送全部数据，返回发送的字节数。"""
        if self.sock is None:
            raise NetworkError("连接已关闭")
        try:
            self.sock.sendall(data)
        except OSError as e:
            raise NetworkError(f"发送失败: {e}") from e
        return len(data)

    def recv(self, n: int) -> bytes:
        """接收最多 n 个字节 (至少 1 个)。

        Raises:
            ConnectionClosedError: 对端已关闭连接。
            NetworkError: 底层 Socket 错误。
        """
        if self.sock is None:
            raise NetworkError("连接已关闭")

        if self._pos >= len(self._buf):
            try:
                chunk = self.sock.recv(max(n, RECV_CHUNK_SIZE))
            except OSError as e:
                raise NetworkError(f"接收错误: {e}") from e
            if not chunk:
                raise ConnectionClosedError("连接已被对端关闭")
            self._buf = bytearray(chunk)
            self._pos = 0

        end = min(self._pos + n, len(self._buf))
        data = bytes(self._buf[self._pos : end])
        self._pos = end
        return data

    def close(self) -> None:
        """关闭 Socket。重复调用无副作用。"""
        if self.sock is not None:
            try:
                self.sock.close()
            finally:
                self.sock = None
                self._buf = bytearray()
                self._pos = 0
            logger.debug("TCP 连接已关闭")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
