"""
BaseX 客户端核心库 - 配置模块

负责配置的加载、解析与强类型转换。
支持从 TOML 文件、环境变量 (含 .env 文件) 或字典中加载配置。
"""

import logging
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from .exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_PORT = 1984


@dataclass(frozen=True)
class BaseXConfig:
    """BaseXSession 的强类型配置对象。

    所有字段均为只读 (frozen=True)，确保配置在运行时不可变。

    Attributes:
        host: BaseX 服务器主机名或 IP 地址。
        port: BaseX 服务器端口 (默认 1984)。
        username: 数据库用户名。
        password: 数据库密码。
    """

    host: str
    port: int
    username: str
    password: str

    def __repr__(self) -> str:
        """隐藏密码字段，防止日志泄露敏感信息。"""
        return (
            f"<{self.__class__.__name__} "
            f"server={self.host}:{self.port}, "
            f"username='{self.username}', "
            f"password='******'>"
        )


def create_config_from_dict(raw_data: dict[str, Any]) -> BaseXConfig:
    """通用工厂：将字典转换为强类型配置对象。

    Args:
        raw_data: 原始配置字典 (来自 TOML 或 Env)。

    Returns:
        BaseXConfig: 验证并转换后的配置对象。

    Raises:
        ConfigError: 当必要字段缺失或格式错误时抛出。
    """
    try:

        def _req(key: str) -> Any:
            """获取必要字段，缺失则报错"""
            if key not in raw_data or raw_data[key] in (None, ""):
                raise ConfigError(f"配置缺失: 缺少必要字段 '{key}'")
            return raw_data[key]

        def _to_port(key: str, default: int) -> int:
            val = raw_data.get(key, default)
            try:
                port = int(str(val).strip())
            except ValueError:
                raise ConfigError(f"端口格式无效 '{key}': {val}")
            if not 0 < port < 65536:
                raise ConfigError(f"端口超出范围 '{key}': {port}")
            return port

        return BaseXConfig(
            host=str(_req("host")),
            port=_to_port("port", DEFAULT_PORT),
            username=str(_req("username")),
            password=str(_req("password")),
        )

    except Exception as e:
        if isinstance(e, ConfigError):
            raise
        raise ConfigError(f"配置生成失败: {e}") from e


def load_config_from_toml(file_path: Path, profile: str = "default") -> BaseXConfig:
    """从 TOML 文件加载配置。

    支持多层级查找策略:
    1. [profile.xxx]: 优先查找指定的 profile 块。
    2. [basex]: 单一配置块。
    3. Root: 兼容根目录直接配置。

    Args:
        file_path: TOML 文件路径。
        profile: 配置预设名。默认为 "default"。

    Raises:
        ConfigError: 文件读取失败或 Profile 不存在。
    """
    if not file_path.exists():
        raise ConfigError(f"配置文件未找到: {file_path}")

    try:
        with open(file_path, "rb") as f:
            data = tomllib.load(f)
    except Exception as e:
        raise ConfigError(f"读取 TOML 失败: {e}") from e

    if "profile" in data:
        if profile not in data["profile"]:
            raise ConfigError(f"未找到预设: [profile.{profile}]")
        raw_config = data["profile"][profile]
    elif "basex" in data:
        if profile != "default":
            logger.warning(f"配置仅包含 [basex] 节，忽略 profile='{profile}'。")
        raw_config = data["basex"]
    else:
        raw_config = data

    return create_config_from_dict(raw_config)


def load_config_from_env(dotenv_path: Path | None = None) -> BaseXConfig:
    """从环境变量加载配置。

    先尝试加载 .env 文件 (不覆盖已存在的环境变量)，
    再读取所有 `BASEX_` 前缀的变量，例如 `BASEX_HOST` -> `host`。

    Args:
        dotenv_path: .env 文件路径。为 None 时由 python-dotenv 自动向上查找。

    Raises:
        ConfigError: 未检测到任何相关环境变量。
    """
    if dotenv_path is not None and not dotenv_path.exists():
        raise ConfigError(f".env 文件未找到: {dotenv_path}")
    load_dotenv(dotenv_path=dotenv_path, override=False)

    env_map = {
        "host": "HOST",
        "port": "PORT",
        "username": "USERNAME",
        "password": "PASSWORD",
    }

    raw_data = {}
    for cfg_key, env_suffix in env_map.items():
        val = os.environ.get(f"BASEX_{env_suffix}")
        if val is not None:
            raw_data[cfg_key] = val

    if not raw_data:
        raise ConfigError("未检测到 BASEX_ 前缀的环境变量")

    return create_config_from_dict(raw_data)
