# src/basex_core/protocols/command.py
"""
BaseX 协议层 - 命令执行 (Command)

    C -> S: {command}\\0
    S -> C: {result}\\0{info}\\0 0x00     成功
       或   {result}\\0{error}\\0 0x01    失败 (result 通常为空，内容一律丢弃)
"""

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import TYPE_CHECKING

from ..exceptions import BufferLimitExceeded, NetworkError
from .constants import Frame, Status
from .reader import read_delimited, read_status

if TYPE_CHECKING:
    from ..network import Connection

logger = logging.getLogger(__name__)


class CommandStatus(IntEnum):
    SUCCESS = Status.SUCCESS
    FAILURE = Status.FAILURE


@dataclass(frozen=True)
class CommandResponse:
    """单次命令执行的结果。

    Attributes:
        result: 命令输出，失败时为 None。
        info: 成功时为附加处理信息，失败时为服务器返回的错误信息。
        status: 命令状态。
    """

    result: bytes | None
    info: bytes
    status: CommandStatus

    @property
    def ok(self) -> bool:
        return self.status is CommandStatus.SUCCESS


def encode_command(command: str | bytes) -> bytes:
    """构建命令帧 {command}\\0。

    Raises:
        ValueError: 命令中含有 \\0，会破坏帧边界。
    """
    data = command.encode("utf-8") if isinstance(command, str) else bytes(command)
    if Frame.TERMINATOR in data:
        raise ValueError("命令中不能包含 \\0 字节")
    return data + Frame.TERMINATOR


def execute_command(conn: "Connection", command: str | bytes) -> CommandResponse:
    """发送命令并读取完整响应。

    Raises:
        NetworkError: 发送或接收失败 ("Connection lost")。
        BufferLimitExceeded: 某个字段超出读取上限。
    """
    frame = encode_command(command)

    try:
        conn.send(frame)
    except (NetworkError, OSError) as e:
        raise NetworkError("Connection lost") from e

    try:
        result = read_delimited(conn)
        info = read_delimited(conn)
        status = read_status(conn)
    except BufferLimitExceeded:
        raise
    except (NetworkError, OSError) as e:
        raise NetworkError("Connection lost") from e

    logger.debug(
        f"命令响应: result={len(result)}B info={len(info)}B status={status:#04x}"
    )

    if status != Status.SUCCESS:
        return CommandResponse(result=None, info=info, status=CommandStatus.FAILURE)
    return CommandResponse(result=result, info=info, status=CommandStatus.SUCCESS)


def send_exit(conn: "Connection") -> None:
    """发送 exit\\0 结束会话，不读取任何响应。"""
    conn.send(Frame.EXIT_COMMAND + Frame.TERMINATOR)
