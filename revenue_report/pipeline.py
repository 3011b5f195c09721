# revenue_report/pipeline.py
from typing import NamedTuple, Optional

from pyspark.sql import SparkSession, DataFrame

from revenue_report.config import PARTITIONS, EMPLOYEE_TYPE, TRANSACTION_TYPE, GOV_DIR
from revenue_report.gov_utils import new_run_id, log_job_run, snapshot_schema
from revenue_report.loader import load_inputs
from revenue_report.schemas import (
    EMPLOYEE_ID,
    EMPLOYEE_COLUMNS, TRANSACTION_COLUMNS, DEPARTMENT_COLUMNS,
    require_columns,
)
from revenue_report.sink import collect_report, show_report
from revenue_report.stages import (
    filter_employees, filter_transactions,
    partition_by_key,
    employee_revenue,
    attach_departments,
    department_average,
    reconcile,
)

JOB_NAME = "gold_employee_revenue_report"


class RevenueReport(NamedTuple):
    employee_revenue: DataFrame
    department_revenue: DataFrame
    departments: DataFrame

    def release(self) -> None:
        """Drop the cached department dimension once the report has been read."""
        self.departments.unpersist()


def process(
    employees: DataFrame,
    transactions: DataFrame,
    departments: DataFrame,
    partitions: Optional[int] = PARTITIONS,
    employee_type: str = EMPLOYEE_TYPE,
    transaction_type: str = TRANSACTION_TYPE,
) -> RevenueReport:
    """
    Build the two-level revenue report.

    filter + project -> partition on employeeId -> join + sum per employee
    -> broadcast left join departments -> avg per department
    -> expand back per employee -> surface empty departments -> fill avg 0

    Nothing is executed here; the caller triggers the actions and calls
    `release()` on the result afterwards.
    """
    require_columns(employees, "employees", EMPLOYEE_COLUMNS)
    require_columns(transactions, "transactions", TRANSACTION_COLUMNS)
    require_columns(departments, "departments", DEPARTMENT_COLUMNS)

    # 1) filter + project early to shrink both sides of the join
    emp = filter_employees(employees, employee_type)
    txn = filter_transactions(transactions, transaction_type)

    # 2) co-locate join keys
    emp = partition_by_key(emp, EMPLOYEE_ID, partitions)
    txn = partition_by_key(txn, EMPLOYEE_ID, partitions)

    # small dim, read twice below
    departments = departments.cache()

    # 3) employee level
    emp_rev = employee_revenue(emp, txn)

    # 4) attach department (broadcast)
    emp_rev = attach_departments(emp_rev, departments)

    # 5) department level
    dept_avg = department_average(emp_rev)

    # 6) reconcile
    report = reconcile(dept_avg, emp_rev, departments)

    return RevenueReport(
        employee_revenue=emp_rev,
        department_revenue=report,
        departments=departments,
    )


def run_report(
    spark: SparkSession,
    employees_path: str,
    transactions_path: str,
    departments_path: str,
    partitions: Optional[int] = PARTITIONS,
    gov_dir: Optional[str] = GOV_DIR,
    show: bool = True,
    job_name: str = JOB_NAME,
) -> list:
    """
    Load -> process -> show, with a governance row per run (SUCCESS or FAILED).
    Returns the report rows as dicts; nothing is written besides governance.
    """
    run_id = new_run_id()
    report = None

    try:
        inputs = load_inputs(spark, employees_path, transactions_path, departments_path)
        input_rows = inputs.transactions.count()

        report = process(
            inputs.employees,
            inputs.transactions,
            inputs.departments,
            partitions=partitions,
        )

        rows = collect_report(report.department_revenue)
        print(f"✅ {job_name}: input_rows={input_rows} report_rows={len(rows)}")

        if show:
            show_report(report)

        if gov_dir:
            snapshot_schema(spark, gov_dir, report.department_revenue, "gold.department_revenue", run_id)
            log_job_run(
                spark, gov_dir, run_id, job_name,
                source_path=transactions_path,
                input_rows=input_rows,
                output_rows=len(rows),
                status="SUCCESS",
            )

        print(f"✅ {job_name} done. run_id={run_id}")
        return rows

    except Exception as e:
        if gov_dir:
            # the run error is the one to surface, a broken gov dir only gets a warning
            try:
                log_job_run(
                    spark, gov_dir, run_id, job_name,
                    source_path=transactions_path,
                    input_rows=0,
                    output_rows=0,
                    status="FAILED",
                    error_message=str(e),
                )
            except Exception as log_err:
                print(f"⚠️ {job_name}: could not log FAILED run to {gov_dir}: {log_err}")
        raise

    finally:
        if report is not None:
            report.release()
