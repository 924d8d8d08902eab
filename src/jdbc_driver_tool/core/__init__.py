"""
JDBC 驱动管理工具核心模块

- 驱动目录：DriverDescriptor 与受支持数据库表
- 驱动文件管理：ArtifactManager，下载、解压、查找 jar 文件
- 驱动注册表：DriverRegistry，缓存已加载的驱动实例
- 设置管理：SettingsManager，TOML 设置文件
- 驱动管理器：DriverManager 与 download_jdbc_drivers()
"""

from .artifacts import ArtifactManager, check_path_to_driver
from .catalog import BASE_URL, DRIVER_DESCRIPTORS, DriverDescriptor, resolve
from .config import SettingsManager
from .exceptions import (
    ConfigError,
    DownloadFailedError,
    DriverClassNotFoundError,
    DriverConnectError,
    DriverFolderNotFoundError,
    DriverPathError,
    DriverToolError,
    InvalidPatternError,
    InvalidTargetError,
    MissingDriverPathError,
    NoMatchingDriverError,
    UnsupportedEngineError,
)
from .manager import DriverManager, download_jdbc_drivers
from .registry import DriverRegistry, JPypeRuntime

# 公共API导出列表

# 按功能模块分组，便于用户理解和导入
__all__ = [
    # ==================== 驱动目录 ====================
    "BASE_URL",
    "DRIVER_DESCRIPTORS",
    "DriverDescriptor",
    "resolve",
    # ==================== 驱动文件管理 ====================
    "ArtifactManager",
    "check_path_to_driver",
    # ==================== 驱动注册表 ====================
    "DriverRegistry",
    "JPypeRuntime",
    # ==================== 设置与管理器 ====================
    "SettingsManager",
    "DriverManager",
    "download_jdbc_drivers",
    # ==================== 异常处理体系 ====================
    "DriverToolError",
    "ConfigError",
    "DriverPathError",
    "MissingDriverPathError",
    "DriverFolderNotFoundError",
    "InvalidTargetError",
    "UnsupportedEngineError",
    "DownloadFailedError",
    "NoMatchingDriverError",
    "DriverClassNotFoundError",
    "DriverConnectError",
    "InvalidPatternError",
]
