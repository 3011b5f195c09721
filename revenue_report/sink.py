# revenue_report/sink.py
from decimal import Decimal
from typing import List

from pyspark.sql import DataFrame
from pyspark.sql.functions import col

from revenue_report.schemas import DEPARTMENT_ID, EMPLOYEE_ID


def _ordered(df: DataFrame) -> DataFrame:
    return df.orderBy(
        col(DEPARTMENT_ID).asc_nulls_last(),
        col(EMPLOYEE_ID).asc_nulls_first(),
    )


def collect_report(df: DataFrame) -> List[dict]:
    """Rows as plain dicts, ordered by (departmentId, employeeId)."""
    return [r.asDict() for r in _ordered(df).collect()]


def show_report(report, n: int = 50) -> None:
    print("\n=== EMPLOYEE REVENUE ===")
    _ordered(report.employee_revenue).show(n, truncate=False)

    print("\n=== DEPARTMENT REVENUE ===")
    _ordered(report.department_revenue).show(n, truncate=False)


def format_amount(value) -> str:
    if value is None:
        return "-"
    return f"{Decimal(value):,.2f}"
