"""
JDBC 驱动管理工具路径处理模块

提供跨平台的路径处理功能，包括用户配置目录获取、路径规范化、驱动目录创建等工具方法。
支持 Windows、macOS 和 Linux 系统。
"""

import os
import platform
from pathlib import Path


class PathHelper:
    """
    路径辅助类 - 提供跨平台的路径处理功能

    所有方法均为静态方法，无需实例化即可使用。

    Example:
        >>> config_dir = PathHelper.get_user_config_dir("jdbc_driver_tool")
        >>> jar_dir = PathHelper.expand_path("~/jdbc")
    """

    @staticmethod
    def get_user_config_dir(app_name: str = "jdbc_driver_tool") -> Path:
        """
        获取用户配置目录路径

        根据操作系统类型获取标准的用户配置目录，并创建应用特定的子目录。
        当标准目录创建失败时回退到当前工作目录下的隐藏目录。

        Args:
            app_name (str): 应用名称，默认为"jdbc_driver_tool"

        Returns:
            Path: 配置目录的Path对象

        Raises:
            ValueError: 当应用名称为空或不是字符串时
            OSError: 当无法创建目录时（仅在回退方案也失败时）

        Note:
            - Windows: %APPDATA%\\{app_name}
            - macOS: ~/Library/Application Support/{app_name}
            - Linux: ~/.config/{app_name}
        """
        if not app_name or not isinstance(app_name, str):
            raise ValueError("应用名称不能为空且必须是字符串")

        system = platform.system().lower()

        try:
            if system == "windows":
                base_dir = Path(os.environ.get("APPDATA", Path.home()))
            elif system == "darwin":  # macOS
                base_dir = Path.home() / "Library" / "Application Support"
            else:  # Linux和其他Unix系统
                base_dir = Path.home() / ".config"

            config_dir = base_dir / app_name
            config_dir.mkdir(parents=True, exist_ok=True)

            return config_dir

        except OSError as e:
            # 回退到当前目录（隐藏目录）
            fallback_dir = Path.cwd() / f".{app_name}"
            try:
                fallback_dir.mkdir(exist_ok=True)
                return fallback_dir
            except OSError:
                raise OSError(f"无法创建配置目录: {str(e)}")

    @staticmethod
    def expand_path(path: str | Path) -> Path:
        """
        展开用户主目录(~)，不解析符号链接，也不要求路径存在

        Args:
            path (str | Path): 路径字符串或Path对象

        Returns:
            Path: 展开后的Path对象

        Raises:
            ValueError: 当路径为空时
        """
        if not path:
            raise ValueError("路径不能为空")
        return Path(path).expanduser()

    @staticmethod
    def ensure_dir_exists(dir_path: str | Path) -> bool:
        """
        确保目录存在，如果不存在则递归创建

        Args:
            dir_path (str | Path): 需要确保存在的目录路径

        Returns:
            bool: 目录已存在或创建成功返回True；路径为空或已存在但是文件时返回False

        Raises:
            OSError: 当目录创建失败时（权限不足等）

        Example:
            >>> PathHelper.ensure_dir_exists("/path/to/jdbc")
            True
        """
        if not dir_path:
            return False

        dir_path_obj = Path(dir_path)

        if dir_path_obj.exists():
            return dir_path_obj.is_dir()

        try:
            dir_path_obj.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise OSError(f"无法创建目录 '{dir_path}': {str(e)}") from e
        return True

    @staticmethod
    def list_files(dir_path: str | Path) -> list[Path]:
        """
        非递归列出目录中的普通文件，顺序为文件系统枚举顺序

        Args:
            dir_path (str | Path): 目录路径

        Returns:
            list[Path]: 文件的绝对路径列表
        """
        directory = Path(dir_path).absolute()
        with os.scandir(directory) as entries:
            return [directory / entry.name for entry in entries if entry.is_file()]
