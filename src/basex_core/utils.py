# File: src/basex_core/utils.py
"""
BaseX 客户端核心库 - 通用工具
"""

import hashlib


def md5_hex(data: bytes) -> str:
    """计算 MD5 摘要，返回 32 位小写十六进制字符串。

    BaseX 认证协议的两轮摘要都以十六进制文本形式参与下一步拼接，
    因此这里返回 str 而不是原始 16 字节。

    Args:
        data: 输入字节流。

    Returns:
        str: 小写十六进制摘要。
    """
    return hashlib.md5(data).hexdigest()
