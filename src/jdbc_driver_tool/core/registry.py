"""
JDBC 驱动注册表模块

以 (驱动类, 类路径) 为键缓存已加载的驱动实例，确保每个驱动在进程内只实例化一次。
类加载与实例化由 JVM 运行时协作者完成，默认使用 JPype 实现。

主要特性：
- 可注入的注册表对象，由调用方持有，不依赖全局状态
- 原子的"查找或加载"操作，检查与加载在同一把可重入锁内完成
- 加载失败不会污染缓存，修正类路径后可再次加载
- 缓存值为 None 时视为"尚未加载"，下次调用会重新加载

Note:
    加入类路径的操作会修改 JVM 的类搜索路径，在进程内不可撤销。
"""

import os
import threading
from pathlib import Path
from typing import Any, Iterable, List, Protocol, Sequence, Tuple

import jpype

from ..utils.logging_utils import get_logger
from .exceptions import DriverClassNotFoundError

# 获取模块级别的日志记录器
logger = get_logger(__name__)

ClassPath = str | Path | Sequence[str | Path]
RegistryKey = Tuple[str, str]


class ClassLoaderRuntime(Protocol):
    """
    JVM 运行时协作者接口

    注册表只调用以下三个操作，测试中可替换为记录调用的假实现。
    """

    def add_to_class_path(self, path: str) -> None: ...

    def resolve_class(self, name: str) -> bool: ...

    def instantiate(self, name: str) -> Any: ...


class JPypeRuntime:
    """
    基于 JPype 的 JVM 运行时

    JVM 在第一次解析类时惰性启动。启动前加入的类路径通过 jpype.addClassPath 注册，
    启动后加入的类路径由本运行时维护的 URLClassLoader 加载。

    Attributes:
        jvm_path (str | None): JVM 动态库路径，None 表示使用 JPype 的默认查找
        jvm_args (Tuple[str, ...]): 启动 JVM 时的附加参数，如 "-Xmx1g"
    """

    def __init__(self, jvm_path: str | None = None, jvm_args: Iterable[str] = ()) -> None:
        self.jvm_path = jvm_path
        self.jvm_args = tuple(jvm_args)
        self._late_paths: List[str] = []
        self._loader: Any = None

    def _ensure_started(self) -> None:
        if jpype.isJVMStarted():
            return
        logger.debug(f"启动 JVM: {self.jvm_path or '默认路径'}")
        if self.jvm_path:
            jpype.startJVM(*self.jvm_args, jvmpath=self.jvm_path, convertStrings=False)
        else:
            jpype.startJVM(*self.jvm_args, convertStrings=False)

    def add_to_class_path(self, path: str) -> None:
        if not jpype.isJVMStarted():
            jpype.addClassPath(path)
            return
        if path not in self._late_paths:
            self._late_paths.append(path)
            # 类路径变化后重建类加载器
            self._loader = None

    def _class_loader(self) -> Any:
        if self._loader is None and self._late_paths:
            file_class = jpype.JClass("java.io.File")
            url_class = jpype.JClass("java.net.URL")
            urls = jpype.JArray(url_class)(
                [file_class(path).toURI().toURL() for path in self._late_paths]
            )
            system_loader = jpype.JClass("java.lang.ClassLoader").getSystemClassLoader()
            self._loader = jpype.JClass("java.net.URLClassLoader")(urls, system_loader)
        return self._loader

    def _load_class(self, name: str) -> Any:
        loader = self._class_loader()
        if loader is None:
            return jpype.JClass(name)
        return jpype.JClass(name, loader=loader)

    def resolve_class(self, name: str) -> bool:
        self._ensure_started()
        try:
            self._load_class(name)
        except (TypeError, jpype.JException) as e:
            logger.debug(f"无法解析类 {name}: {e}")
            return False
        return True

    def instantiate(self, name: str) -> Any:
        self._ensure_started()
        return self._load_class(name)()


def split_class_path(class_path: ClassPath) -> List[str]:
    """
    将类路径拆分为单个路径列表

    Args:
        class_path: 字符串（可用平台路径分隔符连接多个路径）、Path 或路径序列

    Returns:
        List[str]: 非空的路径字符串列表
    """
    if isinstance(class_path, (str, Path)):
        parts = str(class_path).split(os.pathsep)
    else:
        parts = [str(part) for part in class_path]
    return [part for part in parts if part]


def join_class_path(class_path: ClassPath) -> str:
    """将类路径规范为以平台路径分隔符连接的单个字符串，用作缓存键的一部分"""
    return os.pathsep.join(split_class_path(class_path))


class DriverRegistry:
    """
    JDBC 驱动注册表

    提供线程安全的驱动缓存，以 (驱动类, 类路径) 为键。

    Attributes:
        runtime (ClassLoaderRuntime): 类加载协作者
        _drivers (Dict[RegistryKey, Any]): 驱动缓存
        _lock (threading.RLock): 可重入锁，保护"检查后加载"过程

    Example:
        >>> registry = DriverRegistry()
        >>> driver = registry.get_or_load(
        ...     "org.postgresql.Driver", "/opt/jdbc/postgresql-42.2.18.jar"
        ... )
        >>> driver is registry.get_or_load(
        ...     "org.postgresql.Driver", "/opt/jdbc/postgresql-42.2.18.jar"
        ... )
        True
    """

    def __init__(self, runtime: ClassLoaderRuntime | None = None) -> None:
        self.runtime = runtime if runtime is not None else JPypeRuntime()
        self._drivers: dict[RegistryKey, Any] = {}
        self._lock = threading.RLock()

    def get_or_load(self, driver_class: str, class_path: ClassPath = "") -> Any:
        """
        获取已缓存的驱动，或加载并缓存新的驱动实例

        Args:
            driver_class: 驱动类的全限定名；仅无需驱动类的数据库可以为空
            class_path: 驱动 jar 文件路径，可为单个路径、路径序列或以路径分隔符连接的字符串

        Returns:
            Any: 驱动实例；driver_class 为空时返回 None

        Raises:
            DriverClassNotFoundError: 加入类路径后仍无法解析驱动类时
        """
        driver_class = driver_class or ""
        key: RegistryKey = (driver_class, join_class_path(class_path))

        with self._lock:
            driver = self._drivers.get(key)
            if driver is not None:
                return driver

            driver = self._load(driver_class, key[1])
            if driver is not None:
                self._drivers[key] = driver
            return driver

    def _load(self, driver_class: str, class_path: str) -> Any:
        for path in split_class_path(class_path):
            self.runtime.add_to_class_path(path)

        if not driver_class:
            logger.debug(f"未指定驱动类，仅加入类路径: {class_path}")
            return None

        if not self.runtime.resolve_class(driver_class):
            logger.error(f"无法找到 JDBC 驱动类 {driver_class}，类路径: {class_path}")
            raise DriverClassNotFoundError(driver_class, class_path)

        driver = self.runtime.instantiate(driver_class)
        logger.info(f"JDBC 驱动已加载: {driver_class}")
        return driver

    def keys(self) -> List[RegistryKey]:
        """返回已缓存驱动的键列表"""
        with self._lock:
            return list(self._drivers)

    def clear(self) -> None:
        """清空驱动缓存（已加入的类路径不会被撤销）"""
        with self._lock:
            self._drivers.clear()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._drivers and self._drivers[key] is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._drivers)

    def __repr__(self) -> str:
        return f"DriverRegistry(drivers={len(self)}, runtime={type(self.runtime).__name__})"
