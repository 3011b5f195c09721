# revenue_report/config.py
import os

from pyspark.sql.types import DecimalType

# =========================
# PATHS
# =========================
DATA_DIR = os.getenv("REVENUE_DATA_DIR", "data/revenue")

EMPLOYEES_PATH = os.getenv("EMPLOYEES_PATH", f"{DATA_DIR}/employees.csv")
TRANSACTIONS_PATH = os.getenv("TRANSACTIONS_PATH", f"{DATA_DIR}/transactions.csv")
DEPARTMENTS_PATH = os.getenv("DEPARTMENTS_PATH", f"{DATA_DIR}/departments.csv")

# governance tables (job_runs, schema_registry)
GOV_DIR = os.getenv("GOV_DIR", "data/gov")

# =========================
# SPARK
# =========================
APP_NAME = "employee_revenue_report"
MASTER = os.getenv("SPARK_MASTER", "local[*]")
SHUFFLE_PARTITIONS = os.getenv("SHUFFLE_PARTITIONS", "50")

# 0 = skip repartition
PARTITIONS = int(os.getenv("PARTITIONS", "10"))

# =========================
# BUSINESS RULES
# =========================
EMPLOYEE_TYPE = os.getenv("EMPLOYEE_TYPE", "Sales")
TRANSACTION_TYPE = os.getenv("TRANSACTION_TYPE", "Sale")

# currency: fixed-point, no float drift in sum/avg
AMOUNT_TYPE = DecimalType(18, 2)
