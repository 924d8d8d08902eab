"""
JDBC 驱动管理工具自定义异常模块

提供项目专用的异常类层次结构，用于区分驱动下载、驱动目录、驱动加载等不同环节的错误。
所有异常均为终止性错误，内部不做重试，由调用方修正条件（路径、网络、数据库类型）后重新调用。

异常类层次结构：
DriverToolError
├── ConfigError (配置文件相关异常)
├── DriverPathError (驱动目录相关异常)
│   ├── MissingDriverPathError (未指定驱动目录)
│   ├── DriverFolderNotFoundError (驱动目录不存在)
│   └── InvalidTargetError (驱动目录指向一个文件)
├── UnsupportedEngineError (不支持的数据库类型)
├── DownloadFailedError (下载或解压失败)
├── InvalidPatternError (jar 文件名匹配模式无效)
├── NoMatchingDriverError (目录中没有匹配的 jar 文件)
├── DriverClassNotFoundError (驱动类无法加载)
└── DriverConnectError (驱动不接受连接地址)
"""

from typing import Any, Dict, Iterable

# 下载说明提示，附加在驱动目录相关错误信息之后
DOWNLOAD_HINT = "请将数据库对应的 JDBC 驱动下载到该目录，参见 `jdbc-driver-tool download --help`。"


class DriverToolError(Exception):
    """
    JDBC 驱动管理工具基础异常类

    所有自定义异常的基类，提供统一的异常处理接口。
    支持错误代码、详细信息和字典格式转换。

    Attributes:
        message (str): 异常描述信息
        error_code (str | None): 错误代码，用于错误分类和识别
        details (Dict[str, Any]): 详细的错误信息字典

    Example:
        >>> try:
        ...     raise DriverToolError("测试异常", "TEST_001", {"key": "value"})
        ... except DriverToolError as e:
        ...     print(e.to_dict())
        {'error_type': 'DriverToolError', 'message': '测试异常',
         'error_code': 'TEST_001', 'details': {'key': 'value'}}
    """

    default_error_code: str | None = None

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: Dict[str, Any] | None = None,
    ) -> None:
        """
        初始化基础异常

        Args:
            message: 异常描述信息，应清晰描述错误原因
            error_code: 错误代码，未指定时使用子类的默认错误代码
            details: 详细的错误信息字典，包含相关上下文信息
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}

    def __str__(self) -> str:
        """
        返回异常的字符串表示

        Returns:
            str: 格式化的异常信息字符串

        Example:
            >>> str(DriverToolError("下载失败", "DL_001"))
            'DriverToolError: 下载失败 (错误代码: DL_001)'
        """
        base_str = f"{self.__class__.__name__}: {self.message}"
        if self.error_code:
            base_str += f" (错误代码: {self.error_code})"
        return base_str

    def to_dict(self) -> Dict[str, Any]:
        """
        将异常信息转换为字典格式，便于序列化和日志记录

        Returns:
            Dict[str, Any]: 包含异常类型、信息、错误代码和详细信息的字典
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "details": self.details,
        }


class ConfigError(DriverToolError):
    """
    配置相关异常

    处理设置文件读取、解析、验证等过程中出现的错误。

    Attributes:
        config_file (str | None): 相关的配置文件路径
        config_key (str | None): 相关的配置键名称
    """

    default_error_code = "CONFIG_001"

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        config_file: str | None = None,
        config_key: str | None = None,
        details: Dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, error_code, details)
        self.config_file = config_file
        self.config_key = config_key

        # 自动填充配置相关的详细信息
        if config_file:
            self.details["config_file"] = config_file
        if config_key:
            self.details["config_key"] = config_key


class DriverPathError(DriverToolError):
    """
    驱动目录异常基类

    驱动目录必须存在且为目录（不能是文件）后才能查找 jar 文件。

    Attributes:
        path (str | None): 出错的驱动目录路径
    """

    default_error_code = "PATH_001"

    def __init__(
        self,
        message: str,
        path: str | None = None,
        error_code: str | None = None,
        details: Dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, error_code, details)
        self.path = path
        if path is not None:
            self.details["path"] = path


class MissingDriverPathError(DriverPathError):
    """未指定驱动目录，且环境变量 DATABASECONNECTOR_JAR_FOLDER 也未设置"""

    default_error_code = "PATH_002"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(
            message
            or (
                "未指定 path_to_driver 参数。请设置 JDBC 驱动所在目录，"
                "或设置环境变量 DATABASECONNECTOR_JAR_FOLDER。"
            )
        )


class DriverFolderNotFoundError(DriverPathError):
    """驱动目录不存在"""

    default_error_code = "PATH_003"

    def __init__(self, path: str) -> None:
        super().__init__(f"驱动目录 '{path}' 不存在。{DOWNLOAD_HINT}", path=path)


class InvalidTargetError(DriverPathError):
    """驱动目录路径指向一个文件，而不是目录"""

    default_error_code = "PATH_004"

    def __init__(self, path: str) -> None:
        super().__init__(
            f"驱动目录 path_to_driver = '{path}' 指向一个文件，应当指向一个目录。",
            path=path,
        )


class UnsupportedEngineError(DriverToolError):
    """
    不支持的数据库类型

    Attributes:
        dbms (str): 调用方传入的数据库类型
        supported (tuple): 支持的数据库类型列表
    """

    default_error_code = "ENGINE_001"

    def __init__(self, dbms: Any, supported: Iterable[str]) -> None:
        self.dbms = dbms
        self.supported = tuple(supported)
        super().__init__(
            f"不支持的数据库类型: {dbms!r}，支持的类型: {', '.join(self.supported)}",
            details={"dbms": dbms, "supported": list(self.supported)},
        )


class DownloadFailedError(DriverToolError):
    """
    驱动下载或解压失败

    Attributes:
        dbms (str): 下载失败的数据库类型
        path (str): 目标驱动目录
    """

    default_error_code = "DOWNLOAD_001"

    def __init__(self, dbms: str, path: str, reason: str | None = None) -> None:
        self.dbms = dbms
        self.path = path
        message = f"{dbms} JDBC 驱动下载并解压到 '{path}' 失败。"
        if reason:
            message += f" 原因: {reason}"
        super().__init__(message, details={"dbms": dbms, "path": path})


class InvalidPatternError(DriverToolError):
    """
    jar 文件名匹配模式不是合法的正则表达式

    Attributes:
        pattern (str): 文件名匹配模式
    """

    default_error_code = "DRIVER_004"

    def __init__(self, pattern: str, reason: str) -> None:
        self.pattern = pattern
        super().__init__(
            f"无效的文件名匹配模式 '{pattern}': {reason}",
            details={"pattern": pattern},
        )


class NoMatchingDriverError(DriverToolError):
    """
    驱动目录中没有文件名匹配指定模式的 jar 文件

    Attributes:
        pattern (str): 文件名匹配模式
        path (str): 查找的驱动目录
    """

    default_error_code = "DRIVER_001"

    def __init__(self, pattern: str, path: str) -> None:
        self.pattern = pattern
        self.path = path
        super().__init__(
            f"在目录 '{path}' 中没有找到匹配模式 '{pattern}' 的驱动。\n{DOWNLOAD_HINT}",
            details={"pattern": pattern, "path": path},
        )


class DriverClassNotFoundError(DriverToolError):
    """
    加入类路径后仍无法找到 JDBC 驱动类

    Attributes:
        driver_class (str): 驱动类的全限定名
        class_path (str): 已加入的类路径
    """

    default_error_code = "DRIVER_002"

    def __init__(self, driver_class: str, class_path: str) -> None:
        self.driver_class = driver_class
        self.class_path = class_path
        super().__init__(
            f"无法找到 JDBC 驱动类 {driver_class}",
            details={"driver_class": driver_class, "class_path": class_path},
        )


class DriverConnectError(DriverToolError):
    """
    驱动不接受连接地址（Driver.connect 返回 null）

    Attributes:
        driver_class (str): 驱动类的全限定名
        url (str): JDBC 连接地址
    """

    default_error_code = "DRIVER_003"

    def __init__(self, driver_class: str, url: str) -> None:
        self.driver_class = driver_class
        self.url = url
        super().__init__(
            f"驱动 {driver_class} 不接受连接地址: {url}",
            details={"driver_class": driver_class, "url": url},
        )
