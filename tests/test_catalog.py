"""
驱动目录测试
"""

import pytest

from jdbc_driver_tool.core.catalog import (
    BASE_URL,
    DRIVER_DESCRIPTORS,
    archive_url,
    expand_selector,
    is_embedded,
    normalize_dbms,
    resolve,
    supported_dbms,
)
from jdbc_driver_tool.core.exceptions import UnsupportedEngineError


class TestDriverCatalog:
    """驱动目录测试类"""

    def test_supported_dbms(self):
        """测试受支持的数据库列表"""
        assert supported_dbms() == (
            "postgresql",
            "redshift",
            "sql server",
            "oracle",
            "spark",
            "snowflake",
        )

    @pytest.mark.parametrize("dbms", list(DRIVER_DESCRIPTORS))
    def test_resolve_known_engines(self, dbms):
        """测试每个数据库都能解析出完整的驱动描述"""
        descriptor = resolve(dbms)
        assert descriptor.dbms == dbms
        assert descriptor.archive_file_name.endswith(".zip")
        assert descriptor.version
        assert descriptor.version in descriptor.archive_file_name
        assert descriptor.driver_class
        assert descriptor.jar_pattern

    @pytest.mark.parametrize("alias", ["pdw", "synapse", "PDW", " Synapse "])
    def test_aliases_resolve_to_sql_server(self, alias):
        """测试 pdw 和 synapse 别名解析为 sql server"""
        assert resolve(alias) is resolve("sql server")

    def test_normalize_is_case_insensitive(self):
        """测试数据库类型不区分大小写"""
        assert normalize_dbms("PostgreSQL") == "postgresql"
        assert resolve("SNOWFLAKE").archive_file_name == "SnowflakeV3.13.22.zip"

    def test_resolve_unknown_engine(self):
        """测试不支持的数据库类型"""
        with pytest.raises(UnsupportedEngineError) as exc_info:
            resolve("mysql")
        assert exc_info.value.dbms == "mysql"
        assert "postgresql" in exc_info.value.supported

    def test_resolve_non_string(self):
        """测试非字符串的数据库类型"""
        with pytest.raises(UnsupportedEngineError):
            resolve(None)

    def test_expand_all(self):
        """测试 all 展开为全部数据库且每个只出现一次"""
        engines = expand_selector("all")
        assert engines == list(DRIVER_DESCRIPTORS)
        assert len(engines) == len(set(engines))

    def test_expand_single_and_alias(self):
        """测试单个数据库与别名的展开"""
        assert expand_selector("oracle") == ["oracle"]
        assert expand_selector("synapse") == ["sql server"]

    def test_expand_unknown(self):
        """测试展开不支持的选择器"""
        with pytest.raises(UnsupportedEngineError):
            expand_selector("db2")

    def test_archive_url(self):
        """测试下载地址拼接"""
        descriptor = resolve("postgresql")
        assert descriptor.url == BASE_URL + "postgresqlV42.2.18.zip"
        assert (
            archive_url(descriptor, "https://mirror.example.com/jars")
            == "https://mirror.example.com/jars/postgresqlV42.2.18.zip"
        )

    def test_is_embedded(self):
        """测试嵌入式数据库判断"""
        assert is_embedded("sqlite")
        assert is_embedded("SQLite Extended")
        assert not is_embedded("postgresql")
        assert not is_embedded(None)

    def test_descriptor_table_is_read_only(self):
        """测试驱动描述表不可修改"""
        with pytest.raises(TypeError):
            DRIVER_DESCRIPTORS["mysql"] = resolve("postgresql")


if __name__ == "__main__":
    pytest.main()
