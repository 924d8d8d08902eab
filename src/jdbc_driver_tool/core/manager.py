"""
驱动管理器模块

组合设置、驱动文件管理和驱动注册表，提供面向调用方的统一接口：
下载驱动 -> 查找 jar 文件 -> 加载驱动类 -> 建立 JDBC 连接。
"""

import os
from pathlib import Path
from typing import Any, Dict, List

import jaydebeapi
import jpype

from ..utils.logging_utils import get_logger
from .artifacts import ArtifactManager, ConfirmCallback
from .catalog import is_embedded, resolve
from .config import JAR_FOLDER_ENV_VAR, SettingsManager
from .exceptions import DriverConnectError, MissingDriverPathError
from .registry import DriverRegistry
from .transport import Transport

# 获取模块级别的日志记录器
logger = get_logger(__name__)


def _jdbc_converters() -> Dict[int, Any]:
    """
    返回 jaydebeapi 的 JDBC 类型转换器表

    jaydebeapi 只在自身的 connect 中初始化类型表，这里按相同方式从 java.sql.Types 构建。
    """
    if not jaydebeapi._jdbc_name_to_const:
        types = jpype.JClass("java.sql.Types")
        modifier = jpype.JClass("java.lang.reflect.Modifier")
        types_map = {}
        for field in types.class_.getFields():
            if modifier.isStatic(field.getModifiers()):
                types_map[str(field.getName())] = int(field.get(None))
        jaydebeapi._init_types(types_map)
    return jaydebeapi._converters


def download_jdbc_drivers(
    dbms: str,
    path_to_driver: str | Path | None = None,
    method: str = "auto",
    confirm: str | ConfirmCallback = "ask",
    transport: Transport | None = None,
    **download_kwargs: Any,
) -> Path:
    """
    下载 JDBC 驱动 jar 文件

    从 https://ohdsi.github.io/DatabaseConnectorJars/ 下载并解压驱动。

    Args:
        dbms: 要下载驱动的数据库类型：
            - "postgresql": PostgreSQL
            - "redshift": Amazon Redshift
            - "sql server"、"pdw" 或 "synapse": Microsoft SQL Server
            - "oracle": Oracle
            - "spark": Spark
            - "snowflake": Snowflake
            - "all": 以上全部
        path_to_driver: 驱动目录，默认使用环境变量 DATABASECONNECTOR_JAR_FOLDER
        method: 下载方式（auto/requests/urllib）
        confirm: Redshift 旧 jar 文件的删除确认策略（ask/delete/keep 或回调）
        transport: 自定义下载传输，指定后忽略 method
        **download_kwargs: 透传给下载传输的参数

    Returns:
        Path: 下载成功时返回驱动目录

    Raises:
        MissingDriverPathError: 未指定驱动目录且环境变量未设置时
        InvalidTargetError: 驱动目录路径指向一个文件时
        UnsupportedEngineError: 数据库类型不受支持时
        DownloadFailedError: 下载或解压失败时

    Example:
        >>> download_jdbc_drivers("redshift", "~/jdbc", confirm="delete")
    """
    env_folder = os.environ.get(JAR_FOLDER_ENV_VAR, "")
    if not path_to_driver:
        path_to_driver = env_folder
    if not path_to_driver:
        raise MissingDriverPathError(
            "必须指定 path_to_driver 参数。建议设置环境变量 "
            f"{JAR_FOLDER_ENV_VAR}，或执行 `jdbc-driver-tool config set jar_folder <目录>`。"
        )

    if str(path_to_driver) != env_folder:
        logger.info(
            f"建议设置环境变量 {JAR_FOLDER_ENV_VAR}='{path_to_driver}'，"
            "以后无需再指定驱动目录。"
        )

    artifacts = ArtifactManager(transport=transport, confirm=confirm)
    return artifacts.fetch_drivers(
        dbms,
        path_to_driver,
        method=None if transport is not None else method,
        **download_kwargs,
    )


class DriverManager:
    """
    驱动管理器类

    Attributes:
        settings (SettingsManager): 设置管理器
        path_to_driver (str): 驱动目录，可能为空字符串（尚未配置）
        artifacts (ArtifactManager): 驱动文件管理器
        registry (DriverRegistry): 驱动注册表，由本管理器持有

    Example:
        >>> manager = DriverManager("~/jdbc")
        >>> manager.download("postgresql")
        >>> conn = manager.connect(
        ...     "postgresql", "jdbc:postgresql://localhost:5432/db", "user", "secret"
        ... )
    """

    def __init__(
        self,
        path_to_driver: str | Path | None = None,
        registry: DriverRegistry | None = None,
        artifacts: ArtifactManager | None = None,
        settings: SettingsManager | None = None,
    ) -> None:
        self.settings = settings if settings is not None else SettingsManager()
        self.path_to_driver = self.settings.resolve_jar_folder(path_to_driver)
        self.registry = registry if registry is not None else DriverRegistry()
        self.artifacts = (
            artifacts
            if artifacts is not None
            else ArtifactManager(confirm=self.settings.get("redshift_cleanup"))
        )
        logger.debug(f"驱动管理器初始化: 驱动目录='{self.path_to_driver}'")

    def download(self, dbms: str, method: str | None = None, **download_kwargs: Any) -> Path:
        """
        下载数据库驱动到本管理器的驱动目录

        未指定 method 且没有注入传输时使用设置文件中的下载方式和超时。
        """
        if method is None and self.artifacts.transport is None:
            method = self.settings.get("download_method")
            download_kwargs.setdefault("timeout", self.settings.get("download_timeout"))
        return self.artifacts.fetch_drivers(
            dbms, self.path_to_driver, method=method, **download_kwargs
        )

    def find_jars(self, dbms: str) -> List[Path]:
        """查找数据库对应的驱动 jar 文件；嵌入式数据库返回空列表"""
        if is_embedded(dbms):
            return []
        descriptor = resolve(dbms)
        return self.artifacts.locate_jar(descriptor.jar_pattern, self.path_to_driver, dbms)

    def get_driver(self, dbms: str) -> Any:
        """
        获取数据库的 JDBC 驱动实例（每个驱动只实例化一次）

        Returns:
            Any: 驱动实例；嵌入式数据库返回 None

        Raises:
            NoMatchingDriverError: 驱动目录中没有该数据库的 jar 文件时
            DriverClassNotFoundError: 无法加载驱动类时
        """
        if is_embedded(dbms):
            return None
        descriptor = resolve(dbms)
        jars = self.find_jars(dbms)
        return self.registry.get_or_load(descriptor.driver_class, jars)

    def connect(
        self,
        dbms: str,
        url: str,
        user: str | None = None,
        password: str | None = None,
        properties: Dict[str, Any] | None = None,
    ) -> jaydebeapi.Connection:
        """
        通过已加载的驱动实例建立 DB-API 连接

        直接调用驱动实例的 connect 方法，JVM 启动后才加入类路径的驱动同样可用。

        Args:
            dbms: 数据库类型
            url: JDBC 连接地址
            user: 用户名
            password: 密码
            properties: 其他驱动连接属性

        Returns:
            jaydebeapi.Connection: DB-API 2.0 连接对象

        Raises:
            NoMatchingDriverError: 驱动目录中没有该数据库的 jar 文件时
            DriverClassNotFoundError: 无法加载驱动类时
            DriverConnectError: 驱动不接受该连接地址时
        """
        descriptor = resolve(dbms)
        driver = self.registry.get_or_load(descriptor.driver_class, self.find_jars(dbms))

        driver_args = {key: str(value) for key, value in (properties or {}).items()}
        if user is not None:
            driver_args["user"] = user
        if password is not None:
            driver_args["password"] = password

        info = jpype.JClass("java.util.Properties")()
        for key, value in driver_args.items():
            info.setProperty(key, value)

        logger.info(f"建立 {descriptor.dbms} 连接: {url}")
        jconn = driver.connect(url, info)
        if jconn is None:
            logger.error(f"驱动 {descriptor.driver_class} 不接受连接地址: {url}")
            raise DriverConnectError(descriptor.driver_class, url)
        return jaydebeapi.Connection(jconn, _jdbc_converters())

    def __repr__(self) -> str:
        return f"DriverManager(path_to_driver='{self.path_to_driver}', registry={self.registry!r})"
