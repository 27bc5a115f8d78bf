# example.py
"""
这是一个 bird-core API 的最小示例。

它演示了如何将 bird-core 作为一个库导入到你自己的项目中：
连接 BIRD 控制 Socket，打印协议摘要与 BGP 邻居，并检查配置文件语法。

运行此示例：
1. (可选) 在根目录创建 .env 文件，例如 BIRD_SOCKET_PATH=/run/bird/bird.ctl
2. 确保已安装依赖： pip install -e .
3. 从项目根目录运行： python example.py
"""

import asyncio
import logging
import sys
from pathlib import Path

# 日志配置开始
logging.basicConfig(
    level=logging.DEBUG, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("BirdExample")
# 日志配置结束

try:
    from src.bird_core import (
        BgpProtocol,
        BirdClient,
        BirdConfig,
        BirdError,
        ConfigError,
        ConnectError,
        PassiveBgpSession,
        load_config_from_env,
    )

    logger.info("成功导入 bird_core。")
except ImportError as ie:
    logger.critical(f"导入 bird_core 失败: {ie}")
    logger.critical("请确保你是从项目根目录运行此脚本 (python example.py)")
    sys.exit(1)


def load_config() -> BirdConfig:
    """优先使用 .env / 环境变量，缺省时回退到默认 Socket 路径"""
    env_file = Path(".env")
    try:
        return load_config_from_env(env_file if env_file.exists() else None)
    except ConfigError as e:
        logger.info(f"未使用环境变量配置 ({e})，使用默认配置。")
        return BirdConfig()


def print_status(status, msg) -> None:
    logger.info(f"状态变更 -> {status.name}: {msg}")


async def main() -> int:
    """
    程序主入口点。
    查询一次协议状态后退出。
    """
    config = load_config()
    logger.info(f"启动 BIRD 客户端 (API 示例模式)，Socket: {config.socket_path}")

    try:
        async with BirdClient(config, status_callback=print_status) as client:
            logger.info(f"已连接 BIRD {client.state.version}")

            for proto in await client.show_protocols():
                logger.info(
                    f"{proto.name:<16} {proto.proto.value:<8} "
                    f"{proto.state:<6} {proto.info}"
                )

            # 详细输出中只关心 BGP 会话
            for proto in await client.show_protocols(all=True):
                if not isinstance(proto, BgpProtocol) or proto.bgp is None:
                    continue
                if isinstance(proto.bgp, PassiveBgpSession):
                    logger.info(f"{proto.name}: 被动监听 {proto.bgp.neighbor_range}")
                else:
                    logger.info(
                        f"{proto.name}: {proto.bgp.neighbor_address} "
                        f"AS{proto.bgp.neighbor_as} ({proto.bgp.state})"
                    )

            if await client.configure_check():
                logger.info("配置文件语法检查通过。")
            else:
                logger.warning(f"配置文件有误:\n{client.state.last_error}")

    except ConnectError as e:
        logger.error(f"无法连接 BIRD: {e}")
        return 1
    except BirdError:
        logger.critical("查询过程中发生错误。", exc_info=True)
        return 1

    logger.info("BIRD 客户端 (示例) 已停止。")
    return 0


# 程序入口
if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
