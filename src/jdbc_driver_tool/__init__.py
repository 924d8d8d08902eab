# SPDX-FileCopyrightText: 2025-present wangquanqing <wangquanqing1636@sina.com>
#
# SPDX-License-Identifier: MIT
"""
JDBC Driver Tool - JDBC 驱动下载与加载管理模块
=============================================

下载受支持数据库的 JDBC 驱动，查找已安装的 jar 文件，并在 JVM 中加载驱动类。

主要特性:
- 支持 PostgreSQL, Redshift, SQL Server (PDW/Synapse), Oracle, Spark, Snowflake
- 从固定托管地址下载版本化驱动压缩包，解压后删除压缩包
- 驱动注册表缓存已加载的驱动，每个驱动只实例化一次
- 命令行界面和API接口

使用示例:
    >>> from jdbc_driver_tool import DriverManager, download_jdbc_drivers
    >>> download_jdbc_drivers("postgresql", "~/jdbc")
    >>> manager = DriverManager("~/jdbc")
    >>> driver = manager.get_driver("postgresql")
"""

__version__ = "1.0.0"

# 核心模块导入
from .core.artifacts import ArtifactManager
from .core.catalog import DRIVER_DESCRIPTORS, DriverDescriptor
from .core.config import SettingsManager
from .core.exceptions import (
    ConfigError,
    DownloadFailedError,
    DriverClassNotFoundError,
    DriverConnectError,
    DriverToolError,
    InvalidTargetError,
    NoMatchingDriverError,
    UnsupportedEngineError,
)
from .core.manager import DriverManager, download_jdbc_drivers
from .core.registry import DriverRegistry

# 公共API导出列表
__all__ = [
    # 核心管理器
    "DriverManager",
    "download_jdbc_drivers",
    "ArtifactManager",
    "DriverRegistry",
    "SettingsManager",
    # 驱动目录
    "DRIVER_DESCRIPTORS",
    "DriverDescriptor",
    # 异常类
    "DriverToolError",
    "ConfigError",
    "InvalidTargetError",
    "UnsupportedEngineError",
    "DownloadFailedError",
    "NoMatchingDriverError",
    "DriverClassNotFoundError",
    "DriverConnectError",
]
