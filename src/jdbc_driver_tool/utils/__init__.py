"""
JDBC 驱动管理工具通用模块

主要功能模块：
- 日志管理：setup_logging(), get_logger(), set_log_level()
- 路径处理：PathHelper，提供跨平台的配置目录与驱动目录操作

使用示例：
    >>> from jdbc_driver_tool.utils import get_logger, setup_logging, PathHelper
    >>>
    >>> setup_logging(level="INFO", log_to_console=True)
    >>> logger = get_logger(__name__)
    >>> config_dir = PathHelper.get_user_config_dir("jdbc_driver_tool")
"""

from .logging_utils import get_logger, set_log_level, setup_logging
from .path_utils import PathHelper

# 公共API导出列表
__all__ = [
    # ==================== 日志管理模块 ====================
    "setup_logging",  # 初始化日志系统配置
    "get_logger",  # 获取模块级别的日志记录器
    "set_log_level",  # 动态设置日志级别
    # ==================== 路径处理模块 ====================
    "PathHelper",  # 路径助手类
]
