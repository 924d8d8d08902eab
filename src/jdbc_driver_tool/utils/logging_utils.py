"""
JDBC 驱动管理工具日志配置模块

各模块在导入时通过 get_logger(__name__) 获取日志器，只有命令行入口调用 setup_logging
安装 handler。日志器名称以包名为前缀，因此都继承应用日志器的 handler。
"""

import logging
import logging.handlers
import sys
from pathlib import Path

from .path_utils import PathHelper

# 应用根日志器名称，与包名一致
APP_LOGGER_NAME = "jdbc_driver_tool"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s [%(filename)s:%(lineno)d]"

# 日志文件滚动参数
MAX_LOG_FILE_SIZE = 5 * 1024 * 1024
LOG_BACKUP_COUNT = 3

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _validate_log_level(level: str) -> int:
    """
    将日志级别名称（不区分大小写）转换为 logging 常量

    Raises:
        ValueError: 当日志级别无效时
    """
    name = level.upper()
    if name not in VALID_LOG_LEVELS:
        raise ValueError(f"无效的日志级别: '{level}'，有效值为: {', '.join(VALID_LOG_LEVELS)}")
    return logging.getLevelName(name)


def _file_handler(app_name: str, log_dir: str | Path | None) -> logging.Handler:
    directory = Path(log_dir) if log_dir else PathHelper.get_user_config_dir(app_name) / "logs"
    try:
        directory.mkdir(parents=True, exist_ok=True)
        return logging.handlers.RotatingFileHandler(
            directory / f"{app_name}.log",
            maxBytes=MAX_LOG_FILE_SIZE,
            backupCount=LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
    except OSError as e:
        raise OSError(f"无法创建日志文件 {directory / f'{app_name}.log'}: {str(e)}") from e


def setup_logging(
    app_name: str = APP_LOGGER_NAME,
    level: str = "INFO",
    log_to_console: bool = False,
    log_to_file: bool = True,
    log_dir: str | Path | None = None,
) -> logging.Logger:
    """
    配置应用日志器，重复调用时替换已有的 handler

    Args:
        app_name: 日志器名称，同时用作日志文件名
        level: 日志级别：DEBUG, INFO, WARNING, ERROR, CRITICAL
        log_to_console: 是否输出到标准错误
        log_to_file: 是否输出到滚动日志文件
        log_dir: 日志目录，None 时使用用户配置目录下的 logs

    Returns:
        logging.Logger: 配置好的日志器

    Raises:
        ValueError: 当日志级别无效或未启用任何输出方式时
        OSError: 当无法创建日志目录或文件时

    Example:
        >>> logger = setup_logging(level="DEBUG", log_to_console=True, log_to_file=False)
    """
    log_level = _validate_log_level(level)
    if not (log_to_file or log_to_console):
        raise ValueError("至少需要启用一种日志输出方式（控制台或文件）")

    logger = logging.getLogger(app_name)
    logger.setLevel(log_level)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    handlers = []
    if log_to_file:
        handlers.append(_file_handler(app_name, log_dir))
    if log_to_console:
        handlers.append(logging.StreamHandler(sys.stderr))

    formatter = logging.Formatter(LOG_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(log_level)
        logger.addHandler(handler)

    logger.debug(f"日志系统已配置 - 级别: {level.upper()}")
    return logger


def get_logger(name: str) -> logging.Logger:
    """获取指定名称的日志器，模块内使用 ``logger = get_logger(__name__)``"""
    return logging.getLogger(name)


def set_log_level(logger_name: str, level: str) -> None:
    """
    动态设置日志器及其所有 handler 的日志级别

    Raises:
        ValueError: 当日志级别无效时
    """
    log_level = _validate_log_level(level)
    logger = get_logger(logger_name)
    logger.setLevel(log_level)
    for handler in logger.handlers:
        handler.setLevel(log_level)
