# src/basex_core/__init__.py
"""
BaseX-Core v0.1.0
BaseX 数据库服务器客户端/服务器协议的 Python 实现。
"""

# 暴露核心配置
from .config import (
    BaseXConfig,
    create_config_from_dict,
    load_config_from_env,
    load_config_from_toml,
)

# 暴露异常体系 (方便上层 try-except)
from .exceptions import (
    AuthError,
    AuthErrorCode,
    BaseXError,
    BufferLimitExceeded,
    CommandError,
    ConfigError,
    ConnectionClosedError,
    NetworkError,
    ProtocolError,
    StateError,
)
from .network import NetworkClient
from .protocols import CommandResponse, CommandStatus

# 暴露会话与状态
from .session import BaseXSession
from .state import SessionState, SessionStatus

__version__ = "0.1.0"

__all__ = [
    "BaseXSession",
    "BaseXConfig",
    "SessionState",
    "SessionStatus",
    "NetworkClient",
    "CommandResponse",
    "CommandStatus",
    "create_config_from_dict",
    "load_config_from_env",
    "load_config_from_toml",
    "BaseXError",
    "ConfigError",
    "NetworkError",
    "ConnectionClosedError",
    "BufferLimitExceeded",
    "AuthError",
    "AuthErrorCode",
    "CommandError",
    "ProtocolError",
    "StateError",
]
