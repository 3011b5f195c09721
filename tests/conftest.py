"""
Shared fixtures: one local Spark session for the whole run plus small
builders for the three input relations.
"""

from decimal import Decimal

import pytest
from pyspark.sql import SparkSession
from pyspark.sql.types import StructType, StructField, StringType

from revenue_report.schemas import EMPLOYEE_SCHEMA, TRANSACTION_SCHEMA


DEPT_KEY_SCHEMA = StructType([
    StructField("departmentId", StringType(), True),
])


@pytest.fixture(scope="session")
def spark() -> SparkSession:
    """Create or retrieve a local Spark session for testing."""
    session = (
        SparkSession.builder
        .master("local[2]")
        .appName("employee-revenue-report-tests")
        .config("spark.sql.shuffle.partitions", "2")
        .config("spark.ui.enabled", "false")
        .getOrCreate()
    )
    session.sparkContext.setLogLevel("WARN")
    yield session
    session.stop()


@pytest.fixture
def employees_df(spark):
    """employees_df([(id, name, type, dept), ...])"""
    def _make(rows):
        return spark.createDataFrame(rows, schema=EMPLOYEE_SCHEMA)
    return _make


@pytest.fixture
def transactions_df(spark):
    """transactions_df([(employee_id, amount, type), ...]); amounts may be int/str/Decimal."""
    def _make(rows):
        typed = [(e, None if a is None else Decimal(str(a)), t) for e, a, t in rows]
        return spark.createDataFrame(typed, schema=TRANSACTION_SCHEMA)
    return _make


@pytest.fixture
def departments_df(spark):
    """departments_df(["D1", "D2"]) -> single-column department dimension."""
    def _make(ids):
        return spark.createDataFrame([(d,) for d in ids], schema=DEPT_KEY_SCHEMA)
    return _make


@pytest.fixture
def csv_file(tmp_path):
    """csv_file("employees.csv", header, rows) -> path of a CSV with a header row."""
    def _write(name, header, rows):
        path = tmp_path / name
        lines = [",".join(header)] + [",".join("" if v is None else str(v) for v in r) for r in rows]
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return str(path)
    return _write
