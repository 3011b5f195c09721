# revenue_report/loader.py
from typing import NamedTuple

from pyspark.sql import SparkSession, DataFrame
from pyspark.sql.functions import col, expr, isnan, lit, when
from pyspark.sql.types import DecimalType

from revenue_report.config import AMOUNT_TYPE
from revenue_report.errors import ColumnTypeError
from revenue_report.schemas import (
    EMPLOYEE_COLUMNS, TRANSACTION_COLUMNS, DEPARTMENT_COLUMNS,
    TRANSACTION_AMOUNT,
    require_columns,
)

BAD_SAMPLE_N = 5

# wide enough to see digits AMOUNT_TYPE would round away
WIDE_TYPE = DecimalType(38, 18)


class Inputs(NamedTuple):
    employees: DataFrame
    transactions: DataFrame
    departments: DataFrame


def load_csv(spark: SparkSession, path: str) -> DataFrame:
    # no inferSchema: every column lands as string, typing happens below
    return (
        spark.read
        .option("header", "true")
        .csv(path)
    )


def cast_amount(df: DataFrame, relation: str = "transactions") -> DataFrame:
    """
    Cast transactionAmount to the fixed-point currency type.
    - try_cast keeps the check independent of spark.sql.ansi.enabled
    - null in source stays null
    - nothing is rounded or nulled silently: a value that does not parse, needs
      more integer digits or more decimal places than AMOUNT_TYPE is fatal
    """
    raw = f"`{TRANSACTION_AMOUNT}`"
    as_double = expr(f"try_cast({raw} AS double)")
    wide = expr(f"try_cast({raw} AS {WIDE_TYPE.simpleString()})")
    narrow = expr(f"try_cast({raw} AS {AMOUNT_TYPE.simpleString()})")

    problem = (
        when(as_double.isNull() | isnan(as_double), lit("is not numeric"))
        .when(narrow.isNull(), lit(f"overflows {AMOUNT_TYPE.simpleString()}"))
        .when(wide.isNull() | (wide != narrow),
              lit(f"has more than {AMOUNT_TYPE.scale} decimal places"))
    )

    bad = (
        df.where(col(TRANSACTION_AMOUNT).isNotNull() & problem.isNotNull())
        .select(col(TRANSACTION_AMOUNT), problem.alias("_problem"))
        .limit(BAD_SAMPLE_N)
        .collect()
    )
    if bad:
        reason = bad[0]["_problem"]
        samples = [r[TRANSACTION_AMOUNT] for r in bad if r["_problem"] == reason]
        raise ColumnTypeError(relation, TRANSACTION_AMOUNT, samples, reason)

    return df.withColumn(TRANSACTION_AMOUNT, narrow)


def load_employees(spark: SparkSession, path: str) -> DataFrame:
    df = load_csv(spark, path)
    require_columns(df, "employees", EMPLOYEE_COLUMNS)
    return df


def load_transactions(spark: SparkSession, path: str) -> DataFrame:
    df = load_csv(spark, path)
    require_columns(df, "transactions", TRANSACTION_COLUMNS)
    return cast_amount(df, "transactions")


def load_departments(spark: SparkSession, path: str) -> DataFrame:
    df = load_csv(spark, path)
    require_columns(df, "departments", DEPARTMENT_COLUMNS)
    return df


def load_inputs(
    spark: SparkSession,
    employees_path: str,
    transactions_path: str,
    departments_path: str,
) -> Inputs:
    return Inputs(
        employees=load_employees(spark, employees_path),
        transactions=load_transactions(spark, transactions_path),
        departments=load_departments(spark, departments_path),
    )
