"""
JDBC 驱动目录模块

维护受支持数据库的驱动描述表（压缩包文件名、驱动版本、驱动类、jar 文件匹配模式），
并负责数据库类型别名的规范化与 "all" 选择器的展开。驱动描述表在导入时构建，之后不可修改。

当前使用的驱动版本：
- PostgreSQL: V42.2.18
- RedShift: V2.1.0.9
- SQL Server: V9.2.0
- Oracle: V19.8
- Spark: V2.6.21
- Snowflake: V3.13.22
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import List, Mapping, Tuple

from .exceptions import UnsupportedEngineError

# 驱动压缩包托管地址
BASE_URL = "https://ohdsi.github.io/DatabaseConnectorJars/"

# 选择全部数据库的特殊选择器
ALL_SELECTOR = "all"

# 数据库类型别名
DBMS_ALIASES: Mapping[str, str] = MappingProxyType(
    {
        "pdw": "sql server",
        "synapse": "sql server",
    }
)

# 无需外部 JDBC 驱动的嵌入式数据库
EMBEDDED_DBMS: Tuple[str, ...] = ("sqlite", "sqlite extended")


@dataclass(frozen=True)
class DriverDescriptor:
    """
    单个数据库的 JDBC 驱动描述

    Attributes:
        dbms (str): 规范化后的数据库类型
        archive_file_name (str): 托管地址上的驱动压缩包文件名
        version (str): 驱动版本号
        driver_class (str): JDBC 驱动类的全限定名
        jar_pattern (str): 在驱动目录中查找该驱动 jar 文件的文件名模式
    """

    dbms: str
    archive_file_name: str
    version: str
    driver_class: str
    jar_pattern: str

    @property
    def url(self) -> str:
        """驱动压缩包在默认托管地址上的下载地址"""
        return archive_url(self)


_DESCRIPTORS = (
    DriverDescriptor(
        "postgresql",
        "postgresqlV42.2.18.zip",
        "42.2.18",
        "org.postgresql.Driver",
        r"^postgresql-.*\.jar$",
    ),
    DriverDescriptor(
        "redshift",
        "redShiftV2.1.0.9.zip",
        "2.1.0.9",
        "com.amazon.redshift.jdbc.Driver",
        r"^RedshiftJDBC.*\.jar$|^redshift-jdbc.*\.jar$",
    ),
    DriverDescriptor(
        "sql server",
        "sqlServerV9.2.0.zip",
        "9.2.0",
        "com.microsoft.sqlserver.jdbc.SQLServerDriver",
        r"^mssql-jdbc.*\.jar$",
    ),
    DriverDescriptor(
        "oracle",
        "oracleV19.8.zip",
        "19.8",
        "oracle.jdbc.driver.OracleDriver",
        r"^ojdbc.*\.jar$",
    ),
    DriverDescriptor(
        "spark",
        "SimbaSparkV2.6.21.zip",
        "2.6.21",
        "com.simba.spark.jdbc.Driver",
        r"^SparkJDBC.*\.jar$",
    ),
    DriverDescriptor(
        "snowflake",
        "SnowflakeV3.13.22.zip",
        "3.13.22",
        "net.snowflake.client.jdbc.SnowflakeDriver",
        r"^snowflake-jdbc-.*\.jar$",
    ),
)

# 数据库类型 -> 驱动描述，保持表中顺序
DRIVER_DESCRIPTORS: Mapping[str, DriverDescriptor] = MappingProxyType(
    {descriptor.dbms: descriptor for descriptor in _DESCRIPTORS}
)


def supported_dbms() -> Tuple[str, ...]:
    """返回所有受支持的规范数据库类型，顺序与驱动描述表一致"""
    return tuple(DRIVER_DESCRIPTORS)


def normalize_dbms(dbms: str) -> str:
    """
    规范化数据库类型：去除首尾空白、转为小写并解析别名

    Args:
        dbms: 数据库类型或别名，如 "PostgreSQL"、"synapse"

    Returns:
        str: 规范化后的数据库类型（不校验是否受支持）

    Raises:
        UnsupportedEngineError: 当 dbms 不是字符串时
    """
    if not isinstance(dbms, str):
        raise UnsupportedEngineError(dbms, supported_dbms())
    key = dbms.strip().lower()
    return DBMS_ALIASES.get(key, key)


def is_embedded(dbms: str | None) -> bool:
    """判断数据库类型是否为无需外部驱动的嵌入式数据库"""
    if not isinstance(dbms, str):
        return False
    return dbms.strip().lower() in EMBEDDED_DBMS


def resolve(dbms: str) -> DriverDescriptor:
    """
    将数据库类型（含别名）解析为驱动描述

    Args:
        dbms: 数据库类型，如 "postgresql"、"pdw"

    Returns:
        DriverDescriptor: 对应的驱动描述

    Raises:
        UnsupportedEngineError: 当数据库类型不受支持时

    Example:
        >>> resolve("synapse") is resolve("sql server")
        True
    """
    key = normalize_dbms(dbms)
    try:
        return DRIVER_DESCRIPTORS[key]
    except KeyError:
        raise UnsupportedEngineError(dbms, supported_dbms()) from None


def expand_selector(selector: str) -> List[str]:
    """
    将数据库选择器展开为规范数据库类型列表

    Args:
        selector: 单个数据库类型、别名，或 "all"

    Returns:
        List[str]: "all" 返回全部数据库类型（每个恰好一次），否则返回单元素列表

    Raises:
        UnsupportedEngineError: 当选择器不受支持时
    """
    key = normalize_dbms(selector)
    if key == ALL_SELECTOR:
        return list(DRIVER_DESCRIPTORS)
    return [resolve(selector).dbms]


def archive_url(descriptor: DriverDescriptor, base_url: str = BASE_URL) -> str:
    """拼接驱动压缩包的下载地址"""
    if not base_url.endswith("/"):
        base_url += "/"
    return base_url + descriptor.archive_file_name
