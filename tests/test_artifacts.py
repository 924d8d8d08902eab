"""
驱动文件管理测试
"""

import shutil
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest

from helpers import ARCHIVE_MEMBERS, ZipTransport
from jdbc_driver_tool.core.artifacts import (
    ArtifactManager,
    always_delete,
    always_keep,
    check_path_to_driver,
    get_confirm_policy,
)
from jdbc_driver_tool.core.catalog import DRIVER_DESCRIPTORS
from jdbc_driver_tool.core.exceptions import (
    DownloadFailedError,
    DriverFolderNotFoundError,
    InvalidPatternError,
    InvalidTargetError,
    MissingDriverPathError,
    NoMatchingDriverError,
    UnsupportedEngineError,
)


class TestFetchDrivers:
    """驱动下载测试类"""

    def setup_method(self):
        """测试方法 setup"""
        self.temp_dir = Path(tempfile.mkdtemp())
        self.transport = ZipTransport()
        self.manager = ArtifactManager(transport=self.transport, confirm=always_delete)

    def teardown_method(self):
        """测试方法 teardown"""
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def file_names(self, directory=None):
        return sorted(p.name for p in (directory or self.temp_dir).iterdir())

    def test_download_single_engine(self):
        """测试下载单个数据库驱动：只留下 jar 文件，压缩包被删除"""
        result = self.manager.fetch_drivers("postgresql", self.temp_dir)

        assert result == self.temp_dir
        assert self.file_names() == ["postgresql-42.2.18.jar"]
        assert self.transport.archive_names == ["postgresqlV42.2.18.zip"]
        assert self.transport.calls[0][0] == DRIVER_DESCRIPTORS["postgresql"].url

    def test_download_alias(self):
        """测试通过别名下载 SQL Server 驱动"""
        self.manager.fetch_drivers("Synapse", self.temp_dir)
        assert self.file_names() == ["mssql-jdbc-9.2.0.jre8.jar"]

    def test_download_all(self):
        """测试 all 下载每个数据库的压缩包恰好一次"""
        self.manager.fetch_drivers("all", self.temp_dir)

        assert self.transport.archive_names == [
            d.archive_file_name for d in DRIVER_DESCRIPTORS.values()
        ]
        expected = sorted(jar for jars in ARCHIVE_MEMBERS.values() for jar in jars)
        assert self.file_names() == expected

    def test_creates_missing_directory(self):
        """测试目标目录不存在时递归创建"""
        target = self.temp_dir / "nested" / "jdbc"
        self.manager.fetch_drivers("oracle", target)

        assert target.is_dir()
        assert self.file_names(target) == ["ojdbc8.jar"]

    def test_target_is_file(self):
        """测试目标路径是文件时报错，文件保持不变且不下载"""
        target = self.temp_dir / "drivers.txt"
        target.write_text("keep me")

        with pytest.raises(InvalidTargetError):
            self.manager.fetch_drivers("postgresql", target)

        assert target.read_text() == "keep me"
        assert self.transport.calls == []

    def test_missing_target(self):
        """测试未指定目标目录"""
        with pytest.raises(MissingDriverPathError):
            self.manager.fetch_drivers("postgresql", "")

    def test_unknown_engine_does_not_create_directory(self):
        """测试不支持的数据库类型在创建目录前报错"""
        target = self.temp_dir / "never"
        with pytest.raises(UnsupportedEngineError):
            self.manager.fetch_drivers("mysql", target)

        assert not target.exists()
        assert self.transport.calls == []

    def test_failure_mid_batch(self):
        """测试批量下载中途失败：已完成的数据库保留，后续不再下载"""
        transport = ZipTransport(fail_for={"oracleV19.8.zip"})
        manager = ArtifactManager(transport=transport, confirm=always_delete)

        with pytest.raises(DownloadFailedError) as exc_info:
            manager.fetch_drivers("all", self.temp_dir)

        assert exc_info.value.dbms == "oracle"
        assert exc_info.value.path == str(self.temp_dir)
        assert len(transport.calls) == 4
        assert self.file_names() == [
            "mssql-jdbc-9.2.0.jre8.jar",
            "postgresql-42.2.18.jar",
            "redshift-jdbc42-2.1.0.9.jar",
        ]

    def test_corrupt_archive_is_removed(self):
        """测试压缩包损坏时报错并删除压缩包"""
        transport = ZipTransport(corrupt_for={"SnowflakeV3.13.22.zip"})
        manager = ArtifactManager(transport=transport, confirm=always_delete)

        with pytest.raises(DownloadFailedError) as exc_info:
            manager.fetch_drivers("snowflake", self.temp_dir)

        assert exc_info.value.dbms == "snowflake"
        assert self.file_names() == []

    def test_encrypted_archive_is_removed(self):
        """测试压缩包成员加密无法解压时报错并删除压缩包"""
        transport = ZipTransport(encrypted_for={"postgresqlV42.2.18.zip"})
        manager = ArtifactManager(transport=transport, confirm=always_delete)

        with pytest.raises(DownloadFailedError) as exc_info:
            manager.fetch_drivers("postgresql", self.temp_dir)

        assert exc_info.value.dbms == "postgresql"
        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert self.file_names() == []

    def test_unsupported_compression_is_wrapped(self):
        """测试不支持的压缩方式同样包装为下载失败"""
        with patch("zipfile.ZipFile.extractall", side_effect=NotImplementedError("压缩方式")):
            with pytest.raises(DownloadFailedError):
                self.manager.fetch_drivers("oracle", self.temp_dir)

        assert self.file_names() == []

    def test_explicit_method_overrides_injected_transport(self):
        """测试显式的无效下载方式优先于注入的传输"""
        with pytest.raises(ValueError):
            self.manager.fetch_drivers("postgresql", self.temp_dir, method="ftp")
        assert self.transport.calls == []

    def test_download_kwargs_forwarded(self):
        """测试下载参数透传给传输"""
        self.manager.fetch_drivers("spark", self.temp_dir, timeout=5)
        assert self.transport.calls[0][2] == {"timeout": 5}

    def test_base_url_override(self):
        """测试自定义托管地址"""
        manager = ArtifactManager(
            transport=self.transport,
            confirm=always_delete,
            base_url="https://mirror.example.com/jars",
        )
        manager.fetch_drivers("spark", self.temp_dir)
        assert self.transport.calls[0][0] == (
            "https://mirror.example.com/jars/SimbaSparkV2.6.21.zip"
        )


class TestRedshiftPreClean:
    """Redshift 旧驱动清理测试类"""

    def setup_method(self):
        """测试方法 setup"""
        self.temp_dir = Path(tempfile.mkdtemp())
        self.old_jar = self.temp_dir / "RedshiftJDBC42-no-awssdk-1.2.41.1065.jar"
        self.old_jar.write_bytes(b"old")
        (self.temp_dir / "postgresql-42.2.18.jar").write_bytes(b"pg")

    def teardown_method(self):
        """测试方法 teardown"""
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_delete_confirmed(self):
        """测试确认后删除旧的 Redshift jar 文件"""
        manager = ArtifactManager(transport=ZipTransport(), confirm=always_delete)
        manager.fetch_drivers("redshift", self.temp_dir)

        assert not self.old_jar.exists()
        assert (self.temp_dir / "redshift-jdbc42-2.1.0.9.jar").exists()
        assert (self.temp_dir / "postgresql-42.2.18.jar").exists()

    def test_keep_declined(self):
        """测试拒绝时保留旧文件，下载仍继续"""
        manager = ArtifactManager(transport=ZipTransport(), confirm=always_keep)
        manager.fetch_drivers("redshift", self.temp_dir)

        assert self.old_jar.exists()
        assert (self.temp_dir / "redshift-jdbc42-2.1.0.9.jar").exists()

    def test_callback_receives_file_names(self):
        """测试确认回调收到旧文件名列表"""
        seen = []

        def confirm(files):
            seen.append(files)
            return False

        manager = ArtifactManager(transport=ZipTransport(), confirm=confirm)
        manager.fetch_drivers("redshift", self.temp_dir)

        assert seen == [[self.old_jar.name]]

    def test_no_prompt_without_prior_files(self):
        """测试没有旧文件时不调用确认回调"""
        self.old_jar.unlink()
        calls = []
        manager = ArtifactManager(
            transport=ZipTransport(), confirm=lambda files: calls.append(files)
        )
        manager.fetch_drivers("redshift", self.temp_dir)
        assert calls == []

    def test_other_engines_skip_pre_clean(self):
        """测试其他数据库不清理 Redshift 文件"""
        manager = ArtifactManager(transport=ZipTransport(), confirm=always_delete)
        manager.fetch_drivers("oracle", self.temp_dir)
        assert self.old_jar.exists()


class TestConfirmPolicy:
    """确认策略测试类"""

    def test_named_policies(self):
        """测试按名称获取策略"""
        assert get_confirm_policy("delete")(["a.jar"]) is True
        assert get_confirm_policy("keep")(["a.jar"]) is False

    def test_callable_passthrough(self):
        """测试自定义回调原样返回"""
        callback = lambda files: True  # noqa: E731
        assert get_confirm_policy(callback) is callback

    def test_invalid_policy(self):
        """测试无效的策略名称"""
        with pytest.raises(ValueError):
            get_confirm_policy("maybe")


class TestLocateJar:
    """驱动文件查找测试类"""

    def setup_method(self):
        """测试方法 setup"""
        self.temp_dir = Path(tempfile.mkdtemp())
        self.manager = ArtifactManager(transport=ZipTransport())

    def teardown_method(self):
        """测试方法 teardown"""
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_substring_match(self):
        """测试普通子串匹配"""
        jar = self.temp_dir / "SnowflakeV3.13.22.jar"
        jar.write_bytes(b"jar")

        assert self.manager.locate_jar("Snowflake", self.temp_dir) == [jar]

    def test_regex_pattern(self):
        """测试驱动描述中的正则模式"""
        (self.temp_dir / "postgresql-42.2.18.jar").write_bytes(b"jar")
        (self.temp_dir / "notes-postgresql.txt").write_text("x")

        matches = self.manager.locate_jar(
            DRIVER_DESCRIPTORS["postgresql"].jar_pattern, self.temp_dir
        )
        assert [p.name for p in matches] == ["postgresql-42.2.18.jar"]
        assert all(p.is_absolute() for p in matches)

    def test_not_recursive(self):
        """测试不查找子目录"""
        sub = self.temp_dir / "sub"
        sub.mkdir()
        (sub / "ojdbc8.jar").write_bytes(b"jar")

        with pytest.raises(NoMatchingDriverError):
            self.manager.locate_jar("ojdbc", self.temp_dir)

    def test_no_match(self):
        """测试没有匹配文件"""
        (self.temp_dir / "SnowflakeV3.13.22.jar").write_bytes(b"jar")

        with pytest.raises(NoMatchingDriverError) as exc_info:
            self.manager.locate_jar("Nonexistent", self.temp_dir)
        assert exc_info.value.pattern == "Nonexistent"

    def test_invalid_pattern(self):
        """测试不合法的正则表达式"""
        (self.temp_dir / "ojdbc8.jar").write_bytes(b"jar")

        with pytest.raises(InvalidPatternError) as exc_info:
            self.manager.locate_jar("[", self.temp_dir)
        assert exc_info.value.pattern == "["

    def test_missing_directory(self):
        """测试驱动目录不存在"""
        with pytest.raises(DriverFolderNotFoundError):
            self.manager.locate_jar("Snowflake", self.temp_dir / "missing")

    def test_directory_is_file(self):
        """测试驱动目录指向文件"""
        target = self.temp_dir / "file.jar"
        target.write_bytes(b"jar")
        with pytest.raises(InvalidTargetError):
            self.manager.locate_jar("file", target)

    def test_embedded_dbms_skips_check(self):
        """测试嵌入式数据库跳过目录检查"""
        assert self.manager.locate_jar("anything", None, dbms="sqlite") == []


class TestCheckPathToDriver:
    """驱动目录检查测试类"""

    def test_valid_directory(self, tmp_path):
        """测试有效目录"""
        check_path_to_driver(tmp_path, "postgresql")

    def test_missing_path(self):
        """测试未指定路径"""
        with pytest.raises(MissingDriverPathError):
            check_path_to_driver(None, "postgresql")

    def test_embedded(self):
        """测试嵌入式数据库不检查路径"""
        check_path_to_driver(None, "SQLite")

    def test_home_expansion(self, tmp_path, monkeypatch):
        """测试展开用户目录"""
        monkeypatch.setenv("HOME", str(tmp_path))
        (tmp_path / "jdbc").mkdir()
        check_path_to_driver("~/jdbc", "oracle")


if __name__ == "__main__":
    pytest.main()
