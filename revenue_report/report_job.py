# revenue_report/report_job.py
import argparse
import sys

from revenue_report.config import (
    EMPLOYEES_PATH, TRANSACTIONS_PATH, DEPARTMENTS_PATH,
    DATA_DIR, GOV_DIR, MASTER, PARTITIONS, SHUFFLE_PARTITIONS,
)
from revenue_report.errors import ReportError
from revenue_report.pipeline import run_report
from revenue_report.prepare_data import generate_inputs
from revenue_report.session import spark_session
from revenue_report.sink import format_amount


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="revenue-report",
        description="Employee / department revenue report",
    )
    ap.add_argument("--employees", help=f"default {EMPLOYEES_PATH}")
    ap.add_argument("--transactions", help=f"default {TRANSACTIONS_PATH}")
    ap.add_argument("--departments", help=f"default {DEPARTMENTS_PATH}")
    ap.add_argument("--partitions", type=int, default=PARTITIONS,
                    help="repartition count for the join keys, 0 = off")
    ap.add_argument("--master", default=MASTER)
    ap.add_argument("--shuffle-partitions", default=SHUFFLE_PARTITIONS)
    ap.add_argument("--gov-dir", default=GOV_DIR)
    ap.add_argument("--no-gov", action="store_true", help="skip job_runs / schema_registry")
    ap.add_argument("--show", action="store_true", help="print both relations with DataFrame.show")
    ap.add_argument("--generate", action="store_true",
                    help=f"write sample inputs under {DATA_DIR} first and report on them")
    return ap


def parse_args(argv=None) -> argparse.Namespace:
    ap = build_parser()
    args = ap.parse_args(argv)
    given = [f"--{name}" for name in ("employees", "transactions", "departments") if getattr(args, name)]
    if args.generate and given:
        ap.error(f"--generate writes its own inputs, it cannot be combined with {', '.join(given)}")
    args.employees = args.employees or EMPLOYEES_PATH
    args.transactions = args.transactions or TRANSACTIONS_PATH
    args.departments = args.departments or DEPARTMENTS_PATH
    return args


def print_summary(rows) -> None:
    for r in rows:
        print(
            f"   ↪ {r['departmentId']:<8} {r['employeeId'] or '-':<8} "
            f"total={format_amount(r['totalRevenue'])} avg={format_amount(r['avgRevenue'])}"
        )


def main(argv=None) -> int:
    args = parse_args(argv)
    gov_dir = None if args.no_gov else args.gov_dir

    with spark_session(master=args.master, shuffle_partitions=args.shuffle_partitions) as spark:
        if args.generate:
            paths = generate_inputs(spark, DATA_DIR)
            args.employees = paths["employees"]
            args.transactions = paths["transactions"]
            args.departments = paths["departments"]

        try:
            rows = run_report(
                spark,
                args.employees,
                args.transactions,
                args.departments,
                partitions=args.partitions,
                gov_dir=gov_dir,
                show=args.show,
            )
        except ReportError as e:
            print(f"❌ {e}")
            return 1

    print_summary(rows)
    return 0


if __name__ == "__main__":
    sys.exit(main())
