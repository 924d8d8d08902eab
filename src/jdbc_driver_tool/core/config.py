"""
设置管理模块

使用 TOML 格式保存驱动工具的用户设置，如默认驱动目录、下载方式、下载超时、Redshift 旧文件清理策略。

驱动目录的取值优先级：
1. 调用时显式传入的路径
2. 环境变量 DATABASECONNECTOR_JAR_FOLDER
3. 设置文件中的 jar_folder
"""

import os
import shutil
import tomllib
from datetime import datetime
from pathlib import Path
from typing import Any, Dict

import tomli_w

from ..utils.logging_utils import get_logger
from ..utils.path_utils import PathHelper
from .exceptions import ConfigError

# 获取模块级别的日志记录器
logger = get_logger(__name__)

# 提供默认驱动目录的环境变量
JAR_FOLDER_ENV_VAR = "DATABASECONNECTOR_JAR_FOLDER"

SETTINGS_VERSION = "1.0.0"

# 设置项默认值
DEFAULT_SETTINGS: Dict[str, Any] = {
    "jar_folder": "",
    "download_method": "auto",
    "download_timeout": 60.0,
    "redshift_cleanup": "ask",
}

# 设置项取值校验
SETTING_CHOICES: Dict[str, tuple] = {
    "download_method": ("auto", "requests", "urllib"),
    "redshift_cleanup": ("ask", "delete", "keep"),
}


class SettingsManager:
    """
    设置管理器类

    管理驱动工具的 TOML 设置文件，提供读取、修改和备份功能。

    Attributes:
        app_name (str): 应用名称，用于确定配置目录
        settings_file (str): 设置文件名
        config_dir (Path): 配置目录路径
        settings_path (Path): 完整设置文件路径
    """

    def __init__(
        self,
        app_name: str = "jdbc_driver_tool",
        settings_file: str = "settings.toml",
        config_dir: str | Path | None = None,
    ) -> None:
        """
        初始化设置管理器

        Args:
            app_name: 应用名称，用于确定配置目录
            settings_file: 设置文件名，默认为"settings.toml"
            config_dir: 自定义配置目录，None 时使用用户配置目录

        Raises:
            ConfigError: 当设置文件初始化失败时
        """
        self.app_name = app_name
        self.settings_file = settings_file
        self.config_dir = (
            Path(config_dir) if config_dir else PathHelper.get_user_config_dir(app_name)
        )
        self.settings_path = self.config_dir / settings_file
        self._ensure_settings_exist()

    def _ensure_settings_exist(self) -> None:
        try:
            if not self.settings_path.exists():
                self.config_dir.mkdir(parents=True, exist_ok=True)
                self._create_default_settings()
            logger.debug(f"设置文件就绪: {self.settings_path}")
        except ConfigError:
            raise
        except Exception as e:
            logger.error(f"初始化设置文件失败: {str(e)}")
            raise ConfigError(
                f"设置文件初始化失败: {str(e)}", config_file=str(self.settings_path)
            ) from e

    def _create_default_settings(self) -> None:
        created = datetime.now().astimezone().isoformat()
        default_config = {
            "version": SETTINGS_VERSION,
            "app_name": self.app_name,
            "settings": dict(DEFAULT_SETTINGS),
            "metadata": {
                "created": created,
                "last_modified": created,
            },
        }
        self._save(default_config)
        logger.info(f"创建默认设置文件: {self.settings_path}")

    def _validate(self, config: Dict[str, Any]) -> None:
        """
        验证设置文件结构

        Raises:
            ConfigError: 缺少 version, app_name, settings, metadata 字段时
        """
        required_fields = ["version", "app_name", "settings", "metadata"]
        for field in required_fields:
            if field not in config:
                raise ConfigError(
                    f"设置文件缺少必需字段: {field}",
                    config_file=str(self.settings_path),
                    config_key=field,
                )

    def _load(self) -> Dict[str, Any]:
        try:
            with open(self.settings_path, "rb") as f:
                config = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            logger.error(f"设置文件TOML格式错误: {str(e)}")
            raise ConfigError(
                f"设置文件格式无效: {str(e)}", config_file=str(self.settings_path)
            ) from e
        except OSError as e:
            logger.error(f"加载设置文件失败: {str(e)}")
            raise ConfigError(
                f"设置文件加载失败: {str(e)}", config_file=str(self.settings_path)
            ) from e

        self._validate(config)
        return config

    def _save(self, config: Dict[str, Any]) -> None:
        config["metadata"]["last_modified"] = datetime.now().astimezone().isoformat()
        self._validate(config)
        try:
            with open(self.settings_path, "wb") as f:
                f.write(tomli_w.dumps(config).encode("utf-8"))
        except OSError as e:
            logger.error(f"保存设置文件失败: {str(e)}")
            raise ConfigError(
                f"设置文件保存失败: {str(e)}", config_file=str(self.settings_path)
            ) from e
        logger.debug(f"设置文件已保存: {self.settings_path}")

    def get_all(self) -> Dict[str, Any]:
        """返回全部设置项，缺失项以默认值补齐"""
        return {**DEFAULT_SETTINGS, **self._load()["settings"]}

    def get(self, key: str) -> Any:
        """
        获取单个设置项

        Raises:
            ConfigError: 设置项不存在时
        """
        if key not in DEFAULT_SETTINGS:
            raise ConfigError(f"未知的设置项: {key}", config_key=key)
        return self.get_all()[key]

    def set(self, key: str, value: Any) -> None:
        """
        修改单个设置项并保存

        Args:
            key: 设置项名称
            value: 新值，类型会转换为默认值的类型

        Raises:
            ConfigError: 设置项不存在或取值无效时

        Example:
            >>> settings = SettingsManager()
            >>> settings.set("jar_folder", "~/jdbc")
        """
        if key not in DEFAULT_SETTINGS:
            raise ConfigError(f"未知的设置项: {key}", config_key=key)

        try:
            value = type(DEFAULT_SETTINGS[key])(value)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"设置项 {key} 的取值无效: {value!r}", config_key=key) from e

        choices = SETTING_CHOICES.get(key)
        if choices and value not in choices:
            raise ConfigError(
                f"设置项 {key} 的取值无效: {value!r}，有效值为: {', '.join(choices)}",
                config_key=key,
            )

        config = self._load()
        config["settings"][key] = value
        self._save(config)
        logger.info(f"设置项已更新: {key} = {value!r}")

    def resolve_jar_folder(self, path_to_driver: str | Path | None = None) -> str:
        """
        按优先级确定驱动目录：显式参数 > 环境变量 > 设置文件

        Returns:
            str: 驱动目录，未配置时返回空字符串
        """
        if path_to_driver:
            return str(path_to_driver)
        env_value = os.environ.get(JAR_FOLDER_ENV_VAR, "")
        if env_value:
            return env_value
        return self.get("jar_folder")

    def backup_settings(self, backup_path: Path | None = None) -> Path:
        """
        备份设置文件

        Args:
            backup_path: 备份文件路径，如果为None则自动生成带时间戳的文件名

        Returns:
            Path: 备份文件路径

        Raises:
            ConfigError: 当备份失败时
        """
        if backup_path is None:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            backup_path = self.config_dir / f"{self.settings_file}.backup.{timestamp}"

        try:
            shutil.copy2(self.settings_path, backup_path)
        except OSError as e:
            logger.error(f"备份设置文件失败: {str(e)}")
            raise ConfigError(f"设置文件备份失败: {str(e)}") from e

        logger.info(f"设置文件已备份: {backup_path}")
        return backup_path

    def __repr__(self) -> str:
        return (
            f"SettingsManager(app_name='{self.app_name}', "
            f"settings_path='{self.settings_path}')"
        )
