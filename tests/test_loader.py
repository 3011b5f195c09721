"""Loading the three CSV inputs into typed relations."""

from decimal import Decimal

import pytest

from revenue_report.errors import SchemaError, ColumnTypeError
from revenue_report.loader import (
    load_employees,
    load_transactions,
    load_departments,
    load_inputs,
)

EMP_HEADER = ["employeeId", "employeeName", "employeeType", "departmentId"]
TXN_HEADER = ["employeeId", "transactionAmount", "transactionType"]


def test_load_employees(spark, csv_file):
    path = csv_file("employees.csv", EMP_HEADER, [("E1", "Alice", "Sales", "D1")])
    (row,) = load_employees(spark, path).collect()
    assert row.asDict() == {
        "employeeId": "E1",
        "employeeName": "Alice",
        "employeeType": "Sales",
        "departmentId": "D1",
    }


def test_missing_employee_column(spark, csv_file):
    path = csv_file("employees.csv", ["employeeId", "employeeName", "departmentId"], [("E1", "Alice", "D1")])
    with pytest.raises(SchemaError) as exc:
        load_employees(spark, path)
    assert exc.value.relation == "employees"
    assert exc.value.missing == ["employeeType"]
    assert "employeeType" in str(exc.value)


def test_transaction_amount_is_decimal(spark, csv_file):
    path = csv_file("transactions.csv", TXN_HEADER, [
        ("E1", "100.25", "Sale"),
        ("E1", "7", "Return"),
    ])
    df = load_transactions(spark, path)

    assert df.columns == TXN_HEADER
    assert dict(df.dtypes)["transactionAmount"] == "decimal(18,2)"
    assert sorted(r["transactionAmount"] for r in df.collect()) == [Decimal("7"), Decimal("100.25")]


def test_blank_amount_stays_null(spark, csv_file):
    path = csv_file("transactions.csv", TXN_HEADER, [("E1", None, "Sale"), ("E2", "1", "Sale")])
    amounts = {r["employeeId"]: r["transactionAmount"] for r in load_transactions(spark, path).collect()}
    assert amounts == {"E1": None, "E2": Decimal("1")}


def test_non_numeric_amount_is_fatal(spark, csv_file):
    path = csv_file("transactions.csv", TXN_HEADER, [
        ("E1", "10", "Sale"),
        ("E2", "abc", "Sale"),
    ])
    with pytest.raises(ColumnTypeError) as exc:
        load_transactions(spark, path)

    assert exc.value.relation == "transactions"
    assert exc.value.column == "transactionAmount"
    assert exc.value.samples == ["abc"]
    assert exc.value.reason == "is not numeric"
    assert isinstance(exc.value, TypeError)


def test_extra_decimal_places_are_fatal(spark, csv_file):
    # 0.004 would round to 0.00 in decimal(18,2)
    path = csv_file("transactions.csv", TXN_HEADER, [
        ("E1", "0.004", "Sale"),
        ("E1", "1.50", "Sale"),
    ])
    with pytest.raises(ColumnTypeError) as exc:
        load_transactions(spark, path)

    assert exc.value.samples == ["0.004"]
    assert "decimal places" in exc.value.reason
    assert "not numeric" not in str(exc.value)


def test_trailing_zeros_are_not_extra_precision(spark, csv_file):
    path = csv_file("transactions.csv", TXN_HEADER, [("E1", "2.5000", "Sale")])
    (row,) = load_transactions(spark, path).collect()
    assert row["transactionAmount"] == Decimal("2.50")


def test_amount_too_large_is_overflow(spark, csv_file):
    path = csv_file("transactions.csv", TXN_HEADER, [("E1", "12345678901234567", "Sale")])
    with pytest.raises(ColumnTypeError) as exc:
        load_transactions(spark, path)

    assert exc.value.samples == ["12345678901234567"]
    assert exc.value.reason == "overflows decimal(18,2)"
    assert "not numeric" not in str(exc.value)


def test_missing_transaction_column(spark, csv_file):
    path = csv_file("transactions.csv", ["employeeId", "transactionType"], [("E1", "Sale")])
    with pytest.raises(SchemaError, match="transactionAmount"):
        load_transactions(spark, path)


def test_departments_keep_attributes(spark, csv_file):
    path = csv_file("departments.csv", ["departmentId", "departmentName", "region"], [("D1", "Retail", "EU")])
    df = load_departments(spark, path)
    assert df.columns == ["departmentId", "departmentName", "region"]


def test_departments_require_id(spark, csv_file):
    path = csv_file("departments.csv", ["departmentName"], [("Retail",)])
    with pytest.raises(SchemaError):
        load_departments(spark, path)


def test_header_only_files_are_empty(spark, csv_file):
    inputs = load_inputs(
        spark,
        csv_file("employees.csv", EMP_HEADER, []),
        csv_file("transactions.csv", TXN_HEADER, []),
        csv_file("departments.csv", ["departmentId"], []),
    )
    assert inputs.employees.count() == 0
    assert inputs.transactions.count() == 0
    assert inputs.departments.count() == 0
