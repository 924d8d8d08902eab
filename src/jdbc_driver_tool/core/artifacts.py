"""
JDBC 驱动文件管理模块

负责将数据库类型解析为驱动压缩包，下载并解压到驱动目录，以及按文件名模式查找已安装的 jar 文件。

下载流程（对每个数据库依次执行）：
1. Redshift: 若目录中已有旧的 Redshift jar 文件，询问确认策略是否删除
2. 下载版本化的驱动压缩包到驱动目录
3. 原地解压
4. 解压成功后删除压缩包，只保留解压出的 jar 文件
5. 下载或解压失败时抛出 DownloadFailedError；批量下载中已完成的数据库不回滚

Note:
    旧的 Redshift jar 文件会导致类加载冲突，因此下载前需要清理。
"""

import re
import zipfile
from pathlib import Path
from typing import Any, Callable, Dict, List

from rich.prompt import Confirm

from ..utils.logging_utils import get_logger
from ..utils.path_utils import PathHelper
from .catalog import BASE_URL, archive_url, expand_selector, is_embedded, resolve
from .exceptions import (
    DownloadFailedError,
    DriverFolderNotFoundError,
    InvalidPatternError,
    InvalidTargetError,
    MissingDriverPathError,
    NoMatchingDriverError,
)
from .transport import Transport, get_transport

# 获取模块级别的日志记录器
logger = get_logger(__name__)

# 下载前需要清理旧 jar 文件的数据库及其文件名模式
PRE_CLEAN_PATTERNS: Dict[str, str] = {"redshift": "Redshift"}

ConfirmCallback = Callable[[List[str]], bool]


def always_delete(files: List[str]) -> bool:
    """确认策略：总是删除旧文件"""
    return True


def always_keep(files: List[str]) -> bool:
    """确认策略：总是保留旧文件"""
    return False


def ask(files: List[str]) -> bool:
    """确认策略：在终端中询问用户是否删除旧文件"""
    listing = "', '".join(files)
    return Confirm.ask(f"检测到已有的 JAR 文件: '{listing}'。是否删除？", default=False)


# 确认策略名称 -> 回调
CONFIRM_POLICIES: Dict[str, ConfirmCallback] = {
    "ask": ask,
    "delete": always_delete,
    "keep": always_keep,
}


def get_confirm_policy(policy: str | ConfirmCallback) -> ConfirmCallback:
    """
    获取确认策略回调

    Args:
        policy: 策略名称（ask/delete/keep）或自定义回调

    Returns:
        ConfirmCallback: 接收旧文件名列表、返回是否删除的回调

    Raises:
        ValueError: 当策略名称无效时
    """
    if callable(policy):
        return policy
    try:
        return CONFIRM_POLICIES[policy]
    except KeyError:
        raise ValueError(
            f"无效的确认策略: '{policy}'，有效值为: {', '.join(CONFIRM_POLICIES)}"
        ) from None


def check_path_to_driver(path_to_driver: str | Path | None, dbms: str | None = None) -> None:
    """
    检查驱动目录是否有效

    嵌入式数据库（sqlite）不需要外部驱动，直接跳过检查。

    Args:
        path_to_driver: 驱动目录路径
        dbms: 数据库类型，可为 None

    Raises:
        MissingDriverPathError: 未指定驱动目录时
        InvalidTargetError: 路径指向一个文件时
        DriverFolderNotFoundError: 目录不存在时
    """
    if is_embedded(dbms):
        return
    if not path_to_driver:
        raise MissingDriverPathError()

    path = PathHelper.expand_path(path_to_driver)
    if not path.is_dir():
        if path.exists():
            raise InvalidTargetError(str(path_to_driver))
        raise DriverFolderNotFoundError(str(path_to_driver))


class ArtifactManager:
    """
    JDBC 驱动文件管理器

    Attributes:
        transport (Transport | None): 注入的下载传输，None 时按 method 参数创建
        confirm (ConfirmCallback): 删除旧 jar 文件前调用的确认策略
        base_url (str): 驱动压缩包托管地址

    Example:
        >>> manager = ArtifactManager(confirm=always_delete)
        >>> manager.fetch_drivers("postgresql", "~/jdbc")
        PosixPath('/home/user/jdbc')
        >>> manager.locate_jar("postgresql", "~/jdbc")
        [PosixPath('/home/user/jdbc/postgresql-42.2.18.jar')]
    """

    def __init__(
        self,
        transport: Transport | None = None,
        confirm: str | ConfirmCallback = ask,
        base_url: str = BASE_URL,
    ) -> None:
        self.transport = transport
        self.confirm = get_confirm_policy(confirm)
        self.base_url = base_url

    def fetch_drivers(
        self,
        dbms: str,
        target_dir: str | Path | None,
        method: str | None = None,
        **download_kwargs: Any,
    ) -> Path:
        """
        下载并解压数据库的 JDBC 驱动到驱动目录

        Args:
            dbms: 数据库类型、别名，或 "all" 表示全部数据库
            target_dir: 驱动目录，不存在时递归创建
            method: 下载方式（auto/requests/urllib），None 时使用注入的传输或默认方式
            **download_kwargs: 透传给传输的参数

        Returns:
            Path: 驱动目录

        Raises:
            MissingDriverPathError: 未指定驱动目录时
            InvalidTargetError: 驱动目录路径指向一个文件时
            UnsupportedEngineError: 数据库类型不受支持时
            DownloadFailedError: 下载或解压失败时
            OSError: 创建驱动目录失败时
        """
        if not target_dir:
            raise MissingDriverPathError()

        engines = expand_selector(dbms)
        target = self._prepare_target(target_dir)
        transport = self._select_transport(method)

        for engine in engines:
            pre_clean_pattern = PRE_CLEAN_PATTERNS.get(engine)
            if pre_clean_pattern:
                self._clean_prior_jars(target, pre_clean_pattern)
            self._fetch_one(engine, target, transport, download_kwargs)
            logger.info(f"{engine} JDBC 驱动已下载到 '{target}'")

        return target

    def _select_transport(self, method: str | None) -> Transport:
        if method is not None:
            return get_transport(method)
        if self.transport is not None:
            return self.transport
        return get_transport("auto")

    def _prepare_target(self, target_dir: str | Path) -> Path:
        target = PathHelper.expand_path(target_dir)
        if target.is_dir():
            return target
        if target.exists():
            raise InvalidTargetError(str(target))

        logger.warning(f"目录 '{target}' 不存在，尝试创建")
        PathHelper.ensure_dir_exists(target)
        return target

    def _clean_prior_jars(self, target: Path, pattern: str) -> None:
        old_files = [path.name for path in PathHelper.list_files(target) if pattern in path.name]
        if not old_files:
            return

        if self.confirm(old_files):
            for name in old_files:
                (target / name).unlink(missing_ok=True)
            logger.info(f"已删除旧的 JAR 文件: {', '.join(old_files)}")
        else:
            logger.info(f"保留旧的 JAR 文件: {', '.join(old_files)}")

    def _fetch_one(
        self,
        engine: str,
        target: Path,
        transport: Transport,
        download_kwargs: Dict[str, Any],
    ) -> List[str]:
        descriptor = resolve(engine)
        url = archive_url(descriptor, self.base_url)
        archive = target / descriptor.archive_file_name

        try:
            transport.download(url, archive, **download_kwargs)
            with zipfile.ZipFile(archive) as zf:
                extracted = zf.namelist()
                zf.extractall(target)
        except Exception as e:
            # 下载或解压中的任何错误都视为下载失败
            logger.error(f"下载并解压 {engine} JDBC 驱动失败: {str(e)}")
            archive.unlink(missing_ok=True)
            raise DownloadFailedError(engine, str(target), str(e)) from e

        archive.unlink()
        logger.debug(f"已解压 {descriptor.archive_file_name}: {', '.join(extracted)}")
        return extracted

    def locate_jar(
        self, pattern: str, target_dir: str | Path | None, dbms: str | None = None
    ) -> List[Path]:
        """
        在驱动目录中查找文件名匹配模式的 jar 文件（不递归）

        Args:
            pattern: 文件名匹配模式（正则表达式，普通子串同样适用）
            target_dir: 驱动目录
            dbms: 数据库类型；嵌入式数据库跳过目录检查并返回空列表

        Returns:
            List[Path]: 匹配文件的绝对路径，顺序为文件系统枚举顺序

        Raises:
            MissingDriverPathError: 未指定驱动目录时
            DriverFolderNotFoundError: 驱动目录不存在时
            InvalidTargetError: 驱动目录路径指向一个文件时
            InvalidPatternError: 匹配模式不是合法的正则表达式时
            NoMatchingDriverError: 没有匹配的文件时
        """
        if is_embedded(dbms):
            return []

        check_path_to_driver(target_dir, dbms)
        directory = PathHelper.expand_path(target_dir)
        try:
            regex = re.compile(pattern)
        except re.error as e:
            raise InvalidPatternError(pattern, str(e)) from e
        matches = [
            path for path in PathHelper.list_files(directory) if regex.search(path.name)
        ]
        if not matches:
            raise NoMatchingDriverError(pattern, str(directory))

        logger.debug(f"匹配 '{pattern}' 的驱动文件: {[str(p) for p in matches]}")
        return matches
