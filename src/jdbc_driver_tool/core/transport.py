"""
驱动下载传输模块

提供将远程文件下载到本地路径的传输实现，由 download 的 method 参数选择：
- "auto" / "requests": 使用 requests 会话流式下载（默认）
- "urllib": 使用标准库 urllib.request

传输层只负责把字节写入目标文件，出错时直接抛出底层异常，
由 ArtifactManager 统一包装为 DownloadFailedError。
"""

import shutil
import urllib.request
from pathlib import Path
from typing import Any, Callable, Dict, Protocol

import requests

from ..utils.logging_utils import get_logger

# 获取模块级别的日志记录器
logger = get_logger(__name__)

# 默认下载超时（秒）
DEFAULT_TIMEOUT = 60.0

# 流式下载块大小
CHUNK_SIZE = 1 << 15

USER_AGENT = "jdbc-driver-tool"


class Transport(Protocol):
    """下载传输接口"""

    def download(self, url: str, destination: Path, **kwargs: Any) -> None: ...


class RequestsTransport:
    """
    基于 requests 的下载传输

    Attributes:
        session (requests.Session): 复用的 HTTP 会话
        timeout (float): 默认请求超时（秒）
    """

    def __init__(
        self, session: requests.Session | None = None, timeout: float = DEFAULT_TIMEOUT
    ) -> None:
        self.session = session or requests.Session()
        self.session.headers.setdefault("User-Agent", USER_AGENT)
        self.timeout = timeout

    def download(self, url: str, destination: Path, **kwargs: Any) -> None:
        """
        流式下载 url 到 destination

        Args:
            url: 下载地址
            destination: 本地目标文件路径
            **kwargs: 透传给 requests.Session.get 的参数，如 timeout、headers、proxies

        Raises:
            requests.RequestException: 网络错误或 HTTP 状态码表示失败时
            OSError: 写入目标文件失败时
        """
        kwargs.setdefault("timeout", self.timeout)
        logger.debug(f"requests 下载: {url} -> {destination}")
        with self.session.get(url, stream=True, **kwargs) as response:
            response.raise_for_status()
            with open(destination, "wb") as f:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    if chunk:
                        f.write(chunk)


class UrllibTransport:
    """基于标准库 urllib.request 的下载传输"""

    def __init__(self, timeout: float = DEFAULT_TIMEOUT) -> None:
        self.timeout = timeout

    def download(self, url: str, destination: Path, **kwargs: Any) -> None:
        timeout = kwargs.pop("timeout", self.timeout)
        headers = {"User-Agent": USER_AGENT, **kwargs.pop("headers", {})}
        logger.debug(f"urllib 下载: {url} -> {destination}")
        request = urllib.request.Request(url, headers=headers)
        with urllib.request.urlopen(request, timeout=timeout) as response:
            with open(destination, "wb") as f:
                shutil.copyfileobj(response, f, CHUNK_SIZE)


# 下载方式 -> 传输工厂
TRANSPORTS: Dict[str, Callable[[], Transport]] = {
    "auto": RequestsTransport,
    "requests": RequestsTransport,
    "urllib": UrllibTransport,
}


def get_transport(method: str = "auto") -> Transport:
    """
    根据下载方式创建传输实例

    Args:
        method: 下载方式，可选值见 TRANSPORTS

    Returns:
        Transport: 传输实例

    Raises:
        ValueError: 当下载方式不受支持时
    """
    factory = TRANSPORTS.get((method or "auto").lower())
    if factory is None:
        raise ValueError(
            f"不支持的下载方式: '{method}'，有效值为: {', '.join(TRANSPORTS)}"
        )
    return factory()
