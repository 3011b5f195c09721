# revenue_report/schemas.py
from typing import Iterable

from pyspark.sql import DataFrame
from pyspark.sql.types import (
    StructType, StructField,
    StringType, DecimalType,
)

from revenue_report.config import AMOUNT_TYPE
from revenue_report.errors import SchemaError

# ===== column contract (fixed names from the source files) =====
EMPLOYEE_ID = "employeeId"
EMPLOYEE_NAME = "employeeName"
EMPLOYEE_TYPE = "employeeType"
DEPARTMENT_ID = "departmentId"
TRANSACTION_AMOUNT = "transactionAmount"
TRANSACTION_TYPE = "transactionType"
TOTAL_REVENUE = "totalRevenue"
AVG_REVENUE = "avgRevenue"

EMPLOYEE_COLUMNS = [EMPLOYEE_ID, EMPLOYEE_NAME, EMPLOYEE_TYPE, DEPARTMENT_ID]
TRANSACTION_COLUMNS = [EMPLOYEE_ID, TRANSACTION_AMOUNT, TRANSACTION_TYPE]
DEPARTMENT_COLUMNS = [DEPARTMENT_ID]

EMPLOYEE_REVENUE_COLUMNS = [EMPLOYEE_ID, EMPLOYEE_NAME, DEPARTMENT_ID, TOTAL_REVENUE]
REPORT_COLUMNS = [DEPARTMENT_ID, EMPLOYEE_ID, EMPLOYEE_NAME, TOTAL_REVENUE, AVG_REVENUE]

# Explicit schemas (empty / in-memory relations without inference)
EMPLOYEE_SCHEMA = StructType([
    StructField(EMPLOYEE_ID, StringType(), True),
    StructField(EMPLOYEE_NAME, StringType(), True),
    StructField(EMPLOYEE_TYPE, StringType(), True),
    StructField(DEPARTMENT_ID, StringType(), True),
])

TRANSACTION_SCHEMA = StructType([
    StructField(EMPLOYEE_ID, StringType(), True),
    StructField(TRANSACTION_AMOUNT, AMOUNT_TYPE, True),
    StructField(TRANSACTION_TYPE, StringType(), True),
])

MAX_PRECISION = 38


def _bounded(precision: int, scale: int) -> DecimalType:
    return DecimalType(min(precision, MAX_PRECISION), min(scale, MAX_PRECISION))


# Spark widens sum(decimal(p,s)) to (p+10, s) and avg to (p+4, s+4)
REVENUE_TYPE = _bounded(AMOUNT_TYPE.precision + 10, AMOUNT_TYPE.scale)
AVG_REVENUE_TYPE = _bounded(REVENUE_TYPE.precision + 4, REVENUE_TYPE.scale + 4)

EMPLOYEE_REVENUE_SCHEMA = StructType([
    StructField(EMPLOYEE_ID, StringType(), True),
    StructField(EMPLOYEE_NAME, StringType(), True),
    StructField(DEPARTMENT_ID, StringType(), True),
    StructField(TOTAL_REVENUE, REVENUE_TYPE, True),
])

DEPARTMENT_AVG_SCHEMA = StructType([
    StructField(DEPARTMENT_ID, StringType(), True),
    StructField(AVG_REVENUE, AVG_REVENUE_TYPE, True),
])


def require_columns(df: DataFrame, relation: str, required: Iterable[str]) -> None:
    """Raise SchemaError naming every required column that `df` lacks."""
    present = set(df.columns)
    missing = [c for c in required if c not in present]
    if missing:
        raise SchemaError(relation, missing)
