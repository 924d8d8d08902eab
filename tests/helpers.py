"""
测试辅助工具：不访问网络的下载传输和不启动 JVM 的类加载运行时
"""

import io
import threading
import zipfile
from pathlib import Path

import requests

# 压缩包 -> 解压出的 jar 文件
ARCHIVE_MEMBERS = {
    "postgresqlV42.2.18.zip": ["postgresql-42.2.18.jar"],
    "redShiftV2.1.0.9.zip": ["redshift-jdbc42-2.1.0.9.jar"],
    "sqlServerV9.2.0.zip": ["mssql-jdbc-9.2.0.jre8.jar"],
    "oracleV19.8.zip": ["ojdbc8.jar"],
    "SimbaSparkV2.6.21.zip": ["SparkJDBC42.jar"],
    "SnowflakeV3.13.22.zip": ["snowflake-jdbc-3.13.22.jar"],
}

# 中央目录文件头签名及其通用标志位偏移
CENTRAL_HEADER = b"PK\x01\x02"
FLAG_OFFSET = 8


def build_archive(members, encrypted=False):
    """构建 zip 压缩包字节；encrypted 为 True 时在中央目录中设置加密标志位"""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        for member in members:
            zf.writestr(member, b"PK fake jar content")
    data = bytearray(buffer.getvalue())
    if encrypted:
        index = data.find(CENTRAL_HEADER)
        while index != -1:
            data[index + FLAG_OFFSET] |= 0x01
            index = data.find(CENTRAL_HEADER, index + 1)
    return bytes(data)


class ZipTransport:
    """把请求的压缩包写成真实 zip 文件的假传输"""

    def __init__(self, fail_for=(), corrupt_for=(), encrypted_for=()):
        self.fail_for = set(fail_for)
        self.corrupt_for = set(corrupt_for)
        self.encrypted_for = set(encrypted_for)
        self.calls = []

    def download(self, url, destination, **kwargs):
        self.calls.append((url, Path(destination), kwargs))
        name = url.rsplit("/", 1)[-1]
        if name in self.fail_for:
            raise requests.ConnectionError(f"无法连接: {url}")
        if name in self.corrupt_for:
            Path(destination).write_bytes(b"not a zip archive")
            return
        Path(destination).write_bytes(
            build_archive(ARCHIVE_MEMBERS[name], encrypted=name in self.encrypted_for)
        )

    @property
    def archive_names(self):
        return [url.rsplit("/", 1)[-1] for url, _, _ in self.calls]


class FakeDriver:
    """记录 connect 调用的假 JDBC 驱动实例"""

    def __init__(self, name, accepts=True):
        self.name = name
        self.accepts = accepts
        self.connections = []

    def connect(self, url, info):
        self.connections.append((url, info))
        return object() if self.accepts else None


class FakeRuntime:
    """记录类路径和实例化调用的假 JVM 运行时"""

    def __init__(self, known_classes=(), class_requires=None, accepts=True):
        self.known_classes = set(known_classes)
        # 驱动类 -> 必须在类路径中的 jar 文件名
        self.class_requires = class_requires or {}
        self.accepts = accepts
        self.class_path = []
        self.instantiated = []
        self._lock = threading.Lock()

    def add_to_class_path(self, path):
        self.class_path.append(path)

    def resolve_class(self, name):
        if name not in self.known_classes:
            return False
        required = self.class_requires.get(name)
        if required is None:
            return True
        return any(Path(entry).name == required for entry in self.class_path)

    def instantiate(self, name):
        with self._lock:
            self.instantiated.append(name)
        return FakeDriver(name, self.accepts)
