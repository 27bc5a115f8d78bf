# src/bird_core/protocols/configure.py
import logging

from .constants import Command, ConfigureReply

logger = logging.getLogger(__name__)


def build_configure_check_command() -> str:
    """构建配置语法检查命令。"""
    return Command.CONFIGURE_CHECK


def parse_configure_check_response(text: str) -> tuple[bool, str]:
    """解析 `configure check` 应答。

    Returns:
        tuple: (是否通过, 守护进程原文)。不通过不是异常情况，原文用于诊断。
    """
    ok = ConfigureReply.CHECK_OK in text
    if not ok:
        logger.debug(f"配置检查未通过: {text!r}")
    return ok, text


def build_configure_command() -> str:
    """构建配置应用命令。"""
    return Command.CONFIGURE


def parse_configure_response(text: str) -> tuple[bool, str]:
    """解析 `configure` 应答，包含 ``Reconfigured`` 即视为成功。"""
    ok = ConfigureReply.RECONFIGURED in text
    if not ok:
        logger.debug(f"配置应用未确认: {text!r}")
    return ok, text
