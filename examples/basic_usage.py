"""
基础使用示例
"""

from jdbc_driver_tool import DriverManager, download_jdbc_drivers
from jdbc_driver_tool.core.exceptions import DriverToolError


def basic_usage_example():
    """基础使用示例"""

    jar_folder = "~/jdbc"

    # 下载 PostgreSQL 驱动
    try:
        download_jdbc_drivers("postgresql", jar_folder, confirm="delete")
        print("✅ PostgreSQL 驱动已下载")
    except DriverToolError as e:
        print(f"❌ 下载驱动失败: {e}")
        return

    manager = DriverManager(jar_folder)

    # 查找驱动 jar 文件
    for jar in manager.find_jars("postgresql"):
        print(f"📦 {jar}")

    # 建立连接并执行查询
    try:
        conn = manager.connect(
            "postgresql",
            "jdbc:postgresql://localhost:5432/your_database",
            "your_username",
            "your_password",
        )
        cursor = conn.cursor()
        cursor.execute("SELECT 1")
        print(f"✅ 查询结果: {cursor.fetchall()}")
        cursor.close()
        conn.close()
    except DriverToolError as e:
        print(f"❌ 连接失败: {e}")


if __name__ == "__main__":
    basic_usage_example()
