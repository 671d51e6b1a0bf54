# File: src/basex_core/state.py
"""
BaseX 客户端核心库 - 状态模块

负责定义和存储会话的易变状态。
本模块不包含业务逻辑，仅作为数据容器供 Session 读写。
"""

from dataclasses import dataclass
from enum import Enum, auto


class SessionStatus(Enum):
    """会话的生命周期状态枚举。

    状态流转示意:
    CLOSED --open()--> OPEN --execute()--> OPEN --close()--> CLOSED
                         |
                         v  (传输层故障)
                       CLOSED
    """

    CLOSED = auto()
    """未连接，或已关闭。只允许调用 open()。"""

    OPEN = auto()
    """认证已完成，可以执行命令。"""


@dataclass
class SessionState:
    """存储 BaseX 会话的易变状态数据。

    Attributes:
        status: 当前会话状态。
        challenge_variant: 本次握手使用的认证变体 ("legacy" / "realm")，
            打开之前为 None。
        last_info: 最近一次成功命令返回的附加信息 (info 字段)。
        last_error: 最近一次发生的错误信息描述。
    """

    status: SessionStatus = SessionStatus.CLOSED
    challenge_variant: str | None = None
    last_info: bytes = b""
    last_error: str = ""

    @property
    def is_open(self) -> bool:
        return self.status is SessionStatus.OPEN
