# File: src/bird_core/exceptions.py
"""
BIRD 控制客户端 - 异常体系 (Exceptions)

定义库内统一使用的异常类，以便上层应用（如监控脚本/Web 面板）能进行精细的错误处理。
"""


class BirdError(Exception):
    """bird-core 所有内部异常的基类。

    上层应用可以通过捕获此异常来处理所有由 bird-core 抛出的已知错误。
    """

    pass


class ConfigError(BirdError):
    """配置加载或校验失败。

    触发场景:
    1. 字段格式错误 (如超时时间不是数字或为负数)。
    2. 找不到配置文件、Profile 或环境变量。
    """

    pass


class ConnectError(BirdError):
    """建立控制连接失败。

    触发场景:
    1. Socket 文件不存在、权限不足或连接被拒绝。
    2. 等待欢迎语 (Greeting) 超时，或在欢迎语之前连接被关闭。
    3. 欢迎语格式不符合 ``BIRD <version> ready.``。

    底层原因通过 ``raise ... from`` 保留在 ``__cause__`` 中。
    """

    def __init__(self, message: str, greeting: str | None = None) -> None:
        super().__init__(message)
        self.greeting = greeting


class NotConnectedError(BirdError):
    """在 connect() 成功之前，或 close() 之后发送命令。"""

    pass


class NetworkError(BirdError):
    """已建立连接上的 I/O 错误。

    触发场景:
    1. 写入命令失败。
    2. 读取响应过程中连接被对端关闭或出现 Socket 错误。

    注意: 该错误会同时传递给正在执行的命令以及所有排队中的命令。
    重连策略由上层调用者决定。
    """

    pass


class CommandTimeoutError(NetworkError):
    """单条命令等待响应超时 (command_timeout)。

    连接本身不会被关闭，超时命令的迟到响应会在下一条命令发出前被丢弃。
    """

    pass


class ParseError(BirdError):
    """守护进程输出与期望的结构不符。

    触发场景:
    1. 缺少必要字段 (如 BGP 会话的 Neighbor address / AS 号)。
    2. 无法识别的协议类型 (Proto 列)。
    3. 数值字段格式错误。
    """

    def __init__(
        self,
        message: str,
        protocol: str | None = None,
        field: str | None = None,
    ) -> None:
        """初始化解析错误。

        Args:
            message: 错误描述信息。
            protocol: 出错的协议实例名 (如 ``bgp1``)，未知时为 None。
            field: 缺失或格式错误的字段标签 (如 ``Neighbor AS``)。
        """
        if protocol is not None:
            message = f"[{protocol}] {message}"
        super().__init__(message)
        self.protocol = protocol
        self.field = field


class StateError(BirdError):
    """生命周期错误 (FSM Violation)。

    触发场景:
    1. 在已连接 (或正在连接) 状态下重复调用 connect()。
    """

    pass
