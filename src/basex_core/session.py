# File: src/basex_core/session.py
"""
BaseX 会话 (Session)

职责：
1. 资源组装：State + Network + Protocol。
2. 生命周期：Open -> Execute* -> Close。
3. 错误归类：把认证失败折叠为 NetworkError，把命令失败抛为 CommandError。

会话对象不是线程安全的：协议严格一问一答，同一时刻只能有一条命令在途，
多个调用方共享时需自行加锁。
"""

import logging
from dataclasses import replace

from .config import BaseXConfig
from .exceptions import (
    AuthError,
    CommandError,
    NetworkError,
    ProtocolError,
    StateError,
)
from .network import NetworkClient
from .protocols import CommandResponse, authenticate, execute_command, send_exit
from .state import SessionState, SessionStatus

logger = logging.getLogger(__name__)


class BaseXSession:
    """BaseX 客户端会话。

    用法::

        with BaseXSession("localhost", 1984, "admin", "admin") as session:
            print(session.execute("xquery 1 + 1"))
    """

    def __init__(
        self,
        host: str | None = None,
        port: int | str | None = None,
        username: str | None = None,
        password: str | None = None,
    ) -> None:
        """创建会话。传入 host 时立即打开连接并完成认证。"""
        self._state = SessionState()
        self.net_client: NetworkClient | None = None

        if host is not None:
            self.open(host, port, username, password)

    @classmethod
    def from_config(cls, config: BaseXConfig) -> "BaseXSession":
        """根据配置对象打开一个会话。"""
        session = cls()
        session.open(config.host, config.port, config.username, config.password)
        return session

    @property
    def state(self) -> SessionState:
        """获取当前会话状态的只读副本。"""
        return replace(self._state)

    @property
    def is_open(self) -> bool:
        return self._state.is_open

    def open(
        self,
        host: str,
        port: int | str | None,
        username: str | None,
        password: str | None,
    ) -> None:
        """连接服务器并完成认证。

        Raises:
            StateError: 会话已处于打开状态。
            ValueError: 缺少用户名或密码，或其中含有 \\0、无法按 UTF-8 编码。
            NetworkError: 无法连接、认证被拒绝或握手途中断线。
        """
        if self._state.is_open:
            raise StateError("会话已打开，不能重复 open()")
        if username is None or password is None:
            raise ValueError("缺少用户名或密码")

        try:
            client = NetworkClient.connect(host, port)
        except NetworkError as e:
            self._state.last_error = str(e)
            raise NetworkError(
                f"Cannot connect to BaseX server at {host} with port {port}"
            ) from e

        try:
            challenge = authenticate(client, username, password)
        except AuthError as ae:
            client.close()
            self._state.last_error = str(ae)
            if ae.rejected:
                raise NetworkError(
                    "Access denied, please verify username and password"
                ) from ae
            raise NetworkError("Connection lost during authentication") from ae
        except BaseException:
            # 凭据编码失败等非网络异常同样不能泄漏已建立的连接
            client.close()
            raise

        self.net_client = client
        self._state.challenge_variant = challenge.variant
        self._state.last_error = ""
        self._update_status(
            SessionStatus.OPEN, f"已连接 {host}:{port} (认证方式: {challenge.variant})"
        )

    def execute(self, command: str | bytes) -> str:
        """执行一条命令并返回结果文本。

        成功时附加信息保存在 ``state.last_info`` 中。

        Raises:
            StateError: 会话未打开。
            CommandError: 服务器报告命令执行失败，会话仍可继续使用。
            NetworkError: 传输层故障，会话随之关闭。
            ProtocolError: 结果不是合法的 UTF-8 文本 (会话仍可继续使用，
                二进制结果请改用 execute_raw())。
        """
        response = self.execute_raw(command)
        if not response.ok or response.result is None:
            message = response.info.decode("utf-8", "replace")
            self._state.last_error = message
            raise CommandError(message, info=response.info)

        try:
            return response.result.decode("utf-8")
        except UnicodeDecodeError as e:
            self._state.last_error = str(e)
            raise ProtocolError(
                f"命令结果不是合法的 UTF-8 文本: {e}", result=response.result
            ) from e

    def execute_raw(self, command: str | bytes) -> CommandResponse:
        """执行一条命令并返回未经解码的完整响应。

        命令失败时不抛出 CommandError，由调用方检查 ``response.ok``。
        """
        if not self._state.is_open or self.net_client is None:
            raise StateError("会话未打开，无法执行命令")

        try:
            response = execute_command(self.net_client, command)
        except NetworkError as e:
            self._state.last_error = str(e)
            logger.error(f"命令执行途中连接丢失: {e}")
            self._release("连接丢失")
            raise

        if response.ok:
            self._state.last_info = response.info
        return response

    def close(self) -> None:
        """发送 exit 并关闭连接。会话未打开时不做任何事。"""
        if not self._state.is_open:
            return

        try:
            if self.net_client is not None:
                send_exit(self.net_client)
        except (NetworkError, OSError) as e:
            logger.warning(f"发送 exit 失败: {e}")
        finally:
            self._release("已关闭")

    def _release(self, msg: str) -> None:
        """[Internal] 无条件释放连接并回到 CLOSED。"""
        client, self.net_client = self.net_client, None
        try:
            if client is not None:
                client.close()
        finally:
            self._update_status(SessionStatus.CLOSED, msg)

    def _update_status(self, status: SessionStatus, msg: str) -> None:
        self._state.status = status
        logger.info(f"[{status.name}] {msg}")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def __del__(self):
        state = getattr(self, "_state", None)
        if state is not None and state.is_open:
            self.close()
