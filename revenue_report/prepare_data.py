# revenue_report/prepare_data.py
import argparse
import os

from faker import Faker
from pyspark.sql import SparkSession, DataFrame
from pyspark.sql.functions import (
    col, expr, rand, round as _round, pmod, element_at, concat, lit,
)

from revenue_report.config import DATA_DIR, AMOUNT_TYPE
from revenue_report.session import spark_session

# =========================
# CONFIG
# =========================
N_EMPLOYEES = 200
N_DEPARTMENTS = 8
N_TRANSACTIONS = 5_000
SEED = 7

EMPLOYEE_TYPES = ["Sales", "Sales", "Support", "Engineering"]
TRANSACTION_TYPES = ["Sale", "Sale", "Sale", "Return", "Refund"]
DEPARTMENT_NAMES = ["Retail", "Enterprise", "Online", "Wholesale", "Partners", "Public Sector", "SMB", "Export"]


def _sql_array(values) -> str:
    return "array(" + ",".join(f"'{v}'" for v in values) + ")"


def make_departments(spark: SparkSession, n_departments: int) -> DataFrame:
    return (
        spark.range(0, n_departments)
        .select(
            concat(lit("D"), (col("id") + 1).cast("string")).alias("departmentId"),
            element_at(
                expr(_sql_array(DEPARTMENT_NAMES)),
                (pmod(col("id"), lit(len(DEPARTMENT_NAMES))) + 1).cast("int")
            ).alias("departmentName"),
        )
    )


def make_employees(spark: SparkSession, n_employees: int, n_departments: int, seed: int = SEED) -> DataFrame:
    """
    Employees spread over departments D1..D(n-1).
    The last department never gets an employee (zero-revenue row in the report).
    """
    Faker.seed(seed)
    fake = Faker()
    names = spark.createDataFrame(
        [(i, fake.name()) for i in range(n_employees)],
        ["id", "employeeName"],
    )

    # element_at needs an INT index, pmod on a bigint returns bigint
    type_idx = (pmod(col("id"), lit(len(EMPLOYEE_TYPES))) + 1).cast("int")
    dept_span = max(n_departments - 1, 1)

    return names.select(
        concat(lit("E"), (col("id") + 1).cast("string")).alias("employeeId"),
        col("employeeName"),
        element_at(expr(_sql_array(EMPLOYEE_TYPES)), type_idx).alias("employeeType"),
        concat(lit("D"), (pmod(col("id"), lit(dept_span)) + 1).cast("string")).alias("departmentId"),
    )


def make_transactions(spark: SparkSession, n_transactions: int, n_employees: int, seed: int = SEED) -> DataFrame:
    type_idx = (pmod(col("id"), lit(len(TRANSACTION_TYPES))) + 1).cast("int")
    return (
        spark.range(0, n_transactions)
        .select(
            concat(lit("E"), (pmod(col("id") * 17, lit(n_employees)) + 1).cast("string")).alias("employeeId"),
            _round(rand(seed) * 5000, 2).cast(AMOUNT_TYPE).alias("transactionAmount"),
            element_at(expr(_sql_array(TRANSACTION_TYPES)), type_idx).alias("transactionType"),
        )
    )


def write_csv(df: DataFrame, path: str) -> None:
    # coalesce(1): one small part file per relation
    (
        df.coalesce(1)
        .write
        .mode("overwrite")
        .option("header", "true")
        .csv(path)
    )


def generate_inputs(
    spark: SparkSession,
    out_dir: str = DATA_DIR,
    n_employees: int = N_EMPLOYEES,
    n_departments: int = N_DEPARTMENTS,
    n_transactions: int = N_TRANSACTIONS,
    seed: int = SEED,
) -> dict:
    """Write employees/transactions/departments CSVs under `out_dir`, return their paths."""
    paths = {
        "employees": os.path.join(out_dir, "employees.csv"),
        "transactions": os.path.join(out_dir, "transactions.csv"),
        "departments": os.path.join(out_dir, "departments.csv"),
    }

    write_csv(make_departments(spark, n_departments), paths["departments"])
    print(f"✅ departments: {n_departments} -> {paths['departments']}")

    write_csv(make_employees(spark, n_employees, n_departments, seed), paths["employees"])
    print(f"✅ employees: {n_employees} -> {paths['employees']}")

    write_csv(make_transactions(spark, n_transactions, n_employees, seed), paths["transactions"])
    print(f"✅ transactions: {n_transactions} -> {paths['transactions']}")

    return paths


def main(argv=None) -> None:
    ap = argparse.ArgumentParser(description="Generate sample revenue report inputs")
    ap.add_argument("--out", default=DATA_DIR)
    ap.add_argument("--employees", type=int, default=N_EMPLOYEES)
    ap.add_argument("--departments", type=int, default=N_DEPARTMENTS)
    ap.add_argument("--transactions", type=int, default=N_TRANSACTIONS)
    ap.add_argument("--seed", type=int, default=SEED)
    args = ap.parse_args(argv)

    with spark_session("prepare_revenue_data") as spark:
        generate_inputs(spark, args.out, args.employees, args.departments, args.transactions, args.seed)


if __name__ == "__main__":
    main()
