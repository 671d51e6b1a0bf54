"""
BaseX 协议层 - 常量定义

本模块定义了所有协议相关的分隔符、状态字节与读取上限。
采用命名空间 (Class Namespace) 组织。
"""

# =========================================================================
# 1. 帧格式 (Framing)
# =========================================================================


class Frame:
    """所有变长字段都以单个 \\0 结尾，协议不使用长度前缀。"""

    TERMINATOR = b"\x00"
    TERMINATOR_BYTE = 0x00

    # 会话结束时发送的命令 (不读取响应)
    EXIT_COMMAND = b"exit"


# =========================================================================
# 2. 状态字节 (Status Byte)
# =========================================================================


class Status:
    SUCCESS = 0x00
    FAILURE = 0x01


# =========================================================================
# 3. 认证阶段常量
# =========================================================================


class AuthConst:
    # 新版 (BaseX 8.0+) 挑战串格式为 {realm}:{timestamp}
    REALM_SEPARATOR = b":"
    CODEWORD_SEPARATOR = b":"

    VARIANT_LEGACY = "legacy"
    VARIANT_REALM = "realm"

    ENCODING = "utf-8"


# =========================================================================
# 4. 读取缓冲区
# =========================================================================


class ReaderConst:
    INITIAL_SIZE = 32
    MAX_SIZE = 1024 * 1024 * 10  # 10 MiB
