# revenue_report/stages.py
from typing import Optional

from pyspark.sql import DataFrame
from pyspark.sql.functions import col, sum as _sum, avg as _avg, broadcast

from revenue_report.config import EMPLOYEE_TYPE, TRANSACTION_TYPE, PARTITIONS
from revenue_report.schemas import (
    EMPLOYEE_ID, EMPLOYEE_NAME, EMPLOYEE_TYPE as EMPLOYEE_TYPE_COL, DEPARTMENT_ID,
    TRANSACTION_AMOUNT, TRANSACTION_TYPE as TRANSACTION_TYPE_COL,
    TOTAL_REVENUE, AVG_REVENUE,
    EMPLOYEE_REVENUE_COLUMNS, REPORT_COLUMNS,
)


# =========================
# 1) FILTER + PROJECT
# =========================
def filter_employees(employees: DataFrame, employee_type: str = EMPLOYEE_TYPE) -> DataFrame:
    return (
        employees
        .where(col(EMPLOYEE_TYPE_COL) == employee_type)
        .select(EMPLOYEE_ID, EMPLOYEE_NAME, DEPARTMENT_ID)
    )


def filter_transactions(transactions: DataFrame, transaction_type: str = TRANSACTION_TYPE) -> DataFrame:
    return (
        transactions
        .where(col(TRANSACTION_TYPE_COL) == transaction_type)
        .select(EMPLOYEE_ID, TRANSACTION_AMOUNT)
    )


# =========================
# 2) PARTITION BY KEY
# =========================
def partition_by_key(df: DataFrame, key: str, num_partitions: Optional[int] = PARTITIONS) -> DataFrame:
    """
    Hash-repartition so rows sharing `key` land in the same partition.
    Physical only: the result of every later stage is the same with or without it.
    """
    if not num_partitions:
        return df
    return df.repartition(int(num_partitions), col(key))


# =========================
# 3) JOIN + SUM (employee level)
# =========================
def employee_revenue(employees: DataFrame, transactions: DataFrame) -> DataFrame:
    # inner: employees without a qualifying transaction produce no row
    return (
        employees
        .join(transactions, EMPLOYEE_ID, "inner")
        .groupBy(EMPLOYEE_ID, EMPLOYEE_NAME, DEPARTMENT_ID)
        .agg(_sum(TRANSACTION_AMOUNT).alias(TOTAL_REVENUE))
    )


# =========================
# 4) BROADCAST DIM JOIN
# =========================
def attach_departments(employee_rev: DataFrame, departments: DataFrame) -> DataFrame:
    # left: an employee whose departmentId is unknown keeps its row
    return (
        employee_rev
        .join(broadcast(departments), DEPARTMENT_ID, "left")
        .select(*EMPLOYEE_REVENUE_COLUMNS)
    )


# =========================
# 5) AVG (department level)
# =========================
def department_average(employee_rev: DataFrame) -> DataFrame:
    return (
        employee_rev
        .groupBy(DEPARTMENT_ID)
        .agg(_avg(TOTAL_REVENUE).alias(AVG_REVENUE))
    )


# =========================
# 6) RECONCILE + FILL
# =========================
def expand_department_average(department_avg: DataFrame, employee_rev: DataFrame) -> DataFrame:
    """One row per (department, employee with revenue), each carrying the department avg."""
    return (
        department_avg
        .join(employee_rev, DEPARTMENT_ID, "left")
        .select(*REPORT_COLUMNS)
    )


def surface_departments(expanded: DataFrame, departments: DataFrame) -> DataFrame:
    """
    Drive the result from the department dimension:
    - departments with employee rows keep all of them
    - departments with no revenue get exactly one row, every other field null
    """
    dept_keys = (
        departments
        .select(DEPARTMENT_ID)
        .where(col(DEPARTMENT_ID).isNotNull())
        .distinct()
    )
    return (
        dept_keys
        .join(expanded, DEPARTMENT_ID, "left")
        .select(*REPORT_COLUMNS)
    )


def fill_missing_average(report: DataFrame) -> DataFrame:
    # only avgRevenue is filled; null employee fields mean "no revenue-bearing employee"
    return report.fillna(0, subset=[AVG_REVENUE])


def reconcile(department_avg: DataFrame, employee_rev: DataFrame, departments: DataFrame) -> DataFrame:
    expanded = expand_department_average(department_avg, employee_rev)
    surfaced = surface_departments(expanded, departments)
    return fill_missing_average(surfaced)
