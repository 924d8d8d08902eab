"""
JDBC Driver Tool CLI 工具
========================

提供命令行界面来下载 JDBC 驱动、查找已安装的 jar 文件和管理设置。

使用示例:
    jdbc-driver-tool list
    jdbc-driver-tool download postgresql --path ~/jdbc
    jdbc-driver-tool download all --yes
    jdbc-driver-tool locate Snowflake --path ~/jdbc
    jdbc-driver-tool config set jar_folder ~/jdbc
"""

import argparse
import sys
from typing import List, NoReturn, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .core.artifacts import ArtifactManager
from .core.catalog import DRIVER_DESCRIPTORS, supported_dbms
from .core.config import DEFAULT_SETTINGS, JAR_FOLDER_ENV_VAR, SettingsManager
from .core.exceptions import DriverToolError
from .core.manager import download_jdbc_drivers
from .core.transport import TRANSPORTS
from .utils.logging_utils import get_logger, setup_logging

logger = get_logger(__name__)


class DriverToolCLI:
    """
    JDBC Driver Tool 命令行接口主类

    Attributes:
        console (Console): rich 控制台实例
        settings (Optional[SettingsManager]): 设置管理器，首次使用时创建
    """

    def __init__(
        self, console: Console | None = None, settings: SettingsManager | None = None
    ) -> None:
        self.console = console or Console()
        self.settings = settings

    def _ensure_settings(self) -> SettingsManager:
        if self.settings is None:
            try:
                self.settings = SettingsManager()
            except DriverToolError as e:
                self._fail(f"初始化设置失败: {e.message}")
        return self.settings

    def _fail(self, message: str) -> NoReturn:
        logger.error(message)
        self.console.print(f"❌ [bold red]{escape(message)}[/bold red]")
        sys.exit(1)

    def download(self, args: argparse.Namespace) -> None:
        """
        下载 JDBC 驱动

        Args:
            args (argparse.Namespace): 包含 dbms, path, method, cleanup

        Raises:
            SystemExit: 下载失败时退出程序
        """
        settings = self._ensure_settings()

        try:
            path = settings.resolve_jar_folder(args.path)
            method = args.method or settings.get("download_method")
            cleanup = args.cleanup or settings.get("redshift_cleanup")
            target = download_jdbc_drivers(
                args.dbms,
                path,
                method=method,
                confirm=cleanup,
                timeout=settings.get("download_timeout"),
            )
        except (DriverToolError, ValueError, OSError) as e:
            self._fail(f"下载驱动失败: {e}")

        self.console.print(f"✅ [bold green]{args.dbms} JDBC 驱动已下载到 '{target}'[/bold green]")

    def locate(self, args: argparse.Namespace) -> None:
        """查找匹配模式的 jar 文件并逐行输出其路径"""
        settings = self._ensure_settings()

        try:
            path = settings.resolve_jar_folder(args.path)
            jars = ArtifactManager().locate_jar(args.pattern, path)
        except DriverToolError as e:
            self._fail(e.message)

        for jar in jars:
            self.console.print(str(jar), highlight=False)

    def list_drivers(self, _args: argparse.Namespace) -> None:
        """以表格形式列出受支持的数据库及其驱动版本"""
        table = Table(title="📋 受支持的 JDBC 驱动", show_header=True, header_style="bold magenta")
        table.add_column("数据库", style="cyan")
        table.add_column("版本", justify="center")
        table.add_column("压缩包")
        table.add_column("驱动类", style="green")

        for descriptor in DRIVER_DESCRIPTORS.values():
            table.add_row(
                descriptor.dbms,
                descriptor.version,
                descriptor.archive_file_name,
                descriptor.driver_class,
            )

        self.console.print(table)
        self.console.print("别名: pdw, synapse -> sql server")

    def show_config(self, _args: argparse.Namespace) -> None:
        """显示当前设置"""
        settings = self._ensure_settings()
        try:
            values = settings.get_all()
            jar_folder = settings.resolve_jar_folder()
        except DriverToolError as e:
            self._fail(e.message)

        table = Table(title=f"⚙️  {settings.settings_path}", show_header=True)
        table.add_column("设置项", style="cyan")
        table.add_column("值")
        for key, value in values.items():
            table.add_row(key, str(value))
        self.console.print(table)
        self.console.print(
            f"当前驱动目录（{JAR_FOLDER_ENV_VAR} 优先）: '{jar_folder}'"
        )

    def set_config(self, args: argparse.Namespace) -> None:
        """修改单个设置项"""
        settings = self._ensure_settings()
        try:
            settings.set(args.key, args.value)
        except DriverToolError as e:
            self._fail(e.message)
        self.console.print(f"✅ 设置项 '{args.key}' 已更新")


def create_argument_parser(cli_instance: DriverToolCLI) -> argparse.ArgumentParser:
    """
    创建命令行参数解析器

    Args:
        cli_instance (DriverToolCLI): 处理各子命令的 CLI 实例

    Returns:
        argparse.ArgumentParser: 配置好的参数解析器
    """
    parser = argparse.ArgumentParser(
        prog="jdbc-driver-tool",
        description="JDBC Driver Tool - 下载并管理数据库 JDBC 驱动",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="控制台日志级别",
    )

    subparsers = parser.add_subparsers(dest="command", title="可用命令")

    # 下载命令
    download_parser = subparsers.add_parser("download", help="下载 JDBC 驱动")
    download_parser.add_argument(
        "dbms",
        help=f"数据库类型: {', '.join(supported_dbms())}, pdw, synapse 或 all",
    )
    download_parser.add_argument(
        "-p", "--path", help=f"驱动目录，默认使用环境变量 {JAR_FOLDER_ENV_VAR}"
    )
    download_parser.add_argument(
        "-m", "--method", choices=list(TRANSPORTS), help="下载方式"
    )
    cleanup_group = download_parser.add_mutually_exclusive_group()
    cleanup_group.add_argument(
        "-y",
        "--yes",
        dest="cleanup",
        action="store_const",
        const="delete",
        help="不询问，直接删除旧的 Redshift jar 文件",
    )
    cleanup_group.add_argument(
        "--keep",
        dest="cleanup",
        action="store_const",
        const="keep",
        help="不询问，保留旧的 Redshift jar 文件",
    )
    download_parser.set_defaults(func=cli_instance.download)

    # 查找命令
    locate_parser = subparsers.add_parser("locate", help="查找已安装的 jar 文件")
    locate_parser.add_argument("pattern", help="文件名匹配模式")
    locate_parser.add_argument("-p", "--path", help="驱动目录")
    locate_parser.set_defaults(func=cli_instance.locate)

    # 列表命令
    list_parser = subparsers.add_parser("list", help="列出受支持的数据库驱动")
    list_parser.set_defaults(func=cli_instance.list_drivers)

    # 设置命令
    config_parser = subparsers.add_parser("config", help="查看或修改设置")
    config_subparsers = config_parser.add_subparsers(dest="config_command")
    show_parser = config_subparsers.add_parser("show", help="显示当前设置")
    show_parser.set_defaults(func=cli_instance.show_config)
    set_parser = config_subparsers.add_parser("set", help="修改设置项")
    set_parser.add_argument("key", choices=list(DEFAULT_SETTINGS), help="设置项名称")
    set_parser.add_argument("value", help="设置项的值")
    set_parser.set_defaults(func=cli_instance.set_config)

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """CLI 主入口函数"""
    cli = DriverToolCLI()
    parser = create_argument_parser(cli)
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return

    setup_logging(level=args.log_level, log_to_console=True, log_to_file=False)

    try:
        args.func(args)
    except KeyboardInterrupt:
        cli.console.print("\n👋 操作已取消")
        sys.exit(130)


if __name__ == "__main__":
    main()
