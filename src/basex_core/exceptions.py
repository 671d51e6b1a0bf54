# File: src/basex_core/exceptions.py
"""
BaseX 客户端核心库 - 异常体系 (Exceptions)

定义库内统一使用的异常类，以便上层应用能区分
"网络断开"、"认证失败"与"命令执行失败"三类错误。
"""

from enum import IntEnum


class BaseXError(Exception):
    """BaseX 核心库所有内部异常的基类。

    上层应用可以通过捕获此异常来处理所有由 basex-core 抛出的已知错误。
    """

    pass


class ConfigError(BaseXError):
    """配置加载或校验失败。

    触发场景:
    1. 缺少必要字段 (如 host/username/password)。
    2. 字段格式错误 (如端口不是合法整数)。
    3. 找不到配置文件或环境变量。
    """

    pass


class NetworkError(BaseXError):
    """网络层面的错误 (I/O 级别)。

    触发场景:
    1. 无法连接到服务器。
    2. 发送 (send) 或 接收 (recv) 失败。
    3. 协议交互途中连接丢失 (包括认证握手阶段)。

    注意: 库内部不做任何重试。发生此错误后会话应视为不可用，
    上层可以关闭并重新打开一个新会话。
    """

    pass


class ConnectionClosedError(NetworkError):
    """对端正常关闭了连接 (recv 返回 0 字节)。"""

    pass


class BufferLimitExceeded(NetworkError):
    """单个以 \\0 结尾的字段超出了读取上限 (10 MiB)。

    这通常意味着对端异常或协议已失去同步，而不是合法的命令失败。
    连接保持原样，由调用方决定是否关闭。
    """

    def __init__(self, message: str, limit: int | None = None) -> None:
        super().__init__(message)
        self.limit = limit


class ProtocolError(BaseXError):
    """协议交互错误 (逻辑级别)。

    帧结构完好，但内容不符合预期，例如成功响应的结果不是合法的 UTF-8 文本。
    连接仍保持同步，会话可以继续使用。

    Attributes:
        result: 服务器回送的原始结果字节。
    """

    def __init__(self, message: str, result: bytes = b"") -> None:
        super().__init__(message)
        self.result = result


class StateError(BaseXError):
    """状态机错误 (FSM Violation)。

    触发场景:
    1. 在已打开的会话上再次调用 open()。
    2. 在未打开或已关闭的会话上调用 execute()。
    """

    pass


class AuthErrorCode(IntEnum):
    """认证状态字节枚举。

    握手最后服务器回送 1 个状态字节，0x00 表示成功，其余均为失败。
    """

    ACCESS_DENIED = 0x01  # 用户名或密码错误

    @property
    def description(self) -> str:
        """获取状态码对应的可读描述。"""
        _DESC_MAP = {
            0x01: "Access denied",
        }
        return _DESC_MAP.get(self.value, f"Unknown status (Code: {hex(self.value)})")


class AuthError(BaseXError):
    """认证握手失败。

    两种情况共用此异常:
    1. 服务器回送了非零状态字节 (凭据被拒绝)，此时 error_code 为该字节。
    2. 握手过程中 I/O 失败，此时 error_code 为 None。

    可通过 ``rejected`` 属性区分两者。
    """

    def __init__(self, message: str, error_code: int | None = None) -> None:
        """初始化认证错误。

        Args:
            message: 错误描述信息。
            error_code: 服务器回送的原始状态字节。构造函数会尝试将其
                转换为 AuthErrorCode 枚举，并把对应描述附加到 message；
                未知值保持原始 message。
        """
        self.error_code_enum: AuthErrorCode | None = None

        if error_code is not None:
            try:
                self.error_code_enum = AuthErrorCode(error_code)
                # 附加标准描述，保证上层显示一致
                message = f"{message}: {self.error_code_enum.description}"
            except ValueError:
                pass

        super().__init__(message)
        self.error_code = error_code

    @property
    def rejected(self) -> bool:
        """服务器是否明确拒绝了凭据 (区别于握手途中断线)。"""
        return self.error_code is not None


class CommandError(BaseXError):
    """服务器已理解请求，但命令本身执行失败 (如查询语法错误)。

    会话在此之后仍可继续使用。

    Attributes:
        info: 服务器回送的原始错误信息字节。
    """

    def __init__(self, message: str, info: bytes = b"") -> None:
        super().__init__(message)
        self.info = info
