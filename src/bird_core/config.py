"""
BIRD 控制客户端 - 配置模块

负责配置的加载、解析与强类型转换。
支持从 TOML 文件、环境变量 (.env) 或字典中加载配置。
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

DEFAULT_SOCKET_PATH = "/run/bird/bird.ctl"
DEFAULT_CONNECT_TIMEOUT = 10.0


@dataclass(frozen=True)
class BirdConfig:
    """BirdClient 的强类型配置对象。

    所有字段均为只读 (frozen=True)，确保配置在运行时不可变。

    Attributes:
        socket_path: BIRD 控制 Socket 路径 (Unix Domain Socket)。
        connect_timeout: 打开 Socket 并等待欢迎语的超时 (秒)。None 表示无限等待。
        command_timeout: 单条命令等待响应的超时 (秒)。None 表示无限等待 (默认)。
        encoding: 守护进程输出的文本编码。
    """

    socket_path: str = DEFAULT_SOCKET_PATH
    connect_timeout: float | None = DEFAULT_CONNECT_TIMEOUT
    command_timeout: float | None = None
    encoding: str = "utf-8"


def create_config_from_dict(raw_data: dict[str, Any]) -> BirdConfig:
    """通用工厂：将字典转换为强类型配置对象。

    负责字段的清洗、默认值注入和类型转换。

    Args:
        raw_data: 原始配置字典 (来自 TOML 或 Env)。

    Returns:
        BirdConfig: 验证并转换后的配置对象。

    Raises:
        ConfigError: 当字段格式错误时抛出。
    """

    def _timeout(key: str, default: float | None) -> float | None:
        """解析超时字段，支持 "none"/空串 表示不限时"""
        if key not in raw_data:
            return default
        val = raw_data[key]
        if val is None or str(val).strip().lower() in ("", "none"):
            return None
        try:
            seconds = float(val)
        except (TypeError, ValueError):
            raise ConfigError(f"超时格式无效 '{key}': {val}") from None
        if seconds <= 0:
            raise ConfigError(f"超时必须为正数 '{key}': {val}")
        return seconds

    socket_path = str(raw_data.get("socket_path", DEFAULT_SOCKET_PATH)).strip()
    if not socket_path:
        raise ConfigError("socket_path 不能为空")

    encoding = str(raw_data.get("encoding", "utf-8"))
    try:
        "".encode(encoding)
    except LookupError:
        raise ConfigError(f"未知编码: {encoding}") from None

    return BirdConfig(
        socket_path=socket_path,
        connect_timeout=_timeout("connect_timeout", DEFAULT_CONNECT_TIMEOUT),
        command_timeout=_timeout("command_timeout", None),
        encoding=encoding,
    )


def _read_toml(file_path: Path) -> dict[str, Any]:
    try:
        return tomllib.loads(file_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise ConfigError(f"配置文件未找到: {file_path}") from None
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"读取 TOML 失败: {e}") from e


def _select_section(data: dict[str, Any], profile: str) -> dict[str, Any]:
    """按 [profile.<name>] -> [bird] -> 根层级的顺序选出配置节。

    [profile] 表存在但没有 default 预设时返回空字典 (全部取默认值)。
    """
    profiles = data.get("profile")
    if profiles is not None:
        if not isinstance(profiles, dict):
            raise ConfigError("[profile] 必须是表 (table)")
        section = profiles.get(profile)
        if section is None:
            if profile != "default":
                raise ConfigError(f"未找到预设: [profile.{profile}]")
            section = {}
        where = f"[profile.{profile}]"
    elif "bird" in data:
        if profile != "default":
            logger.warning(f"配置仅包含 [bird] 节，忽略 profile='{profile}'。")
        section = data["bird"]
        where = "[bird]"
    else:
        return data

    if not isinstance(section, dict):
        raise ConfigError(f"{where} 必须是表 (table)")
    return section


def load_config_from_toml(file_path: Path, profile: str = "default") -> BirdConfig:
    """从 TOML 文件加载配置。

    查找顺序: ``[profile.<profile>]``，其次 ``[bird]``，都没有时使用根层级的键。
    只有 ``[bird]`` 节时 profile 参数被忽略 (记录一条警告)。

    Raises:
        ConfigError: 文件不存在、无法解析、预设不存在或配置节不是表。
    """
    section = _select_section(_read_toml(file_path), profile)
    logger.debug(f"从 {file_path} 加载配置 (profile={profile})")
    return create_config_from_dict(section)


def load_config_from_env(env_file: Path | None = None) -> BirdConfig:
    """从环境变量加载配置 (Docker/Systemd Friendly)。

    读取所有以 `BIRD_` 开头的相关环境变量，并映射到配置字段。
    例如: `BIRD_SOCKET_PATH` -> `socket_path`。

    Args:
        env_file: 可选的 .env 文件路径，存在时先加载其中的变量 (覆盖已有值)。

    Returns:
        BirdConfig: 配置对象。

    Raises:
        ConfigError: .env 文件不存在，或未检测到任何相关环境变量。
    """
    if env_file is not None:
        if not env_file.exists():
            raise ConfigError(f".env 文件未找到: {env_file}")
        load_dotenv(dotenv_path=env_file, override=True)
        logger.debug(f"已加载 .env: {env_file}")

    env_map = {
        "socket_path": "SOCKET_PATH",
        "connect_timeout": "CONNECT_TIMEOUT",
        "command_timeout": "COMMAND_TIMEOUT",
        "encoding": "ENCODING",
    }

    raw_data = {}
    for cfg_key, env_suffix in env_map.items():
        val = os.environ.get(f"BIRD_{env_suffix}")
        if val is not None:
            raw_data[cfg_key] = val

    if not raw_data:
        raise ConfigError("未检测到 BIRD_ 前缀的环境变量")

    return create_config_from_dict(raw_data)
