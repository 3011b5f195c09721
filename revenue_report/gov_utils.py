# revenue_report/gov_utils.py
import json
import os
import uuid

from pyspark.sql import SparkSession, DataFrame
from pyspark.sql import functions as F
from pyspark.sql.types import (
    StructType, StructField,
    StringType, LongType,
)

# Explicit schemas (empty/None fields break schema inference in createDataFrame)
JOB_RUN_SCHEMA = StructType([
    StructField("run_id", StringType(), False),
    StructField("job_name", StringType(), False),
    StructField("git_commit", StringType(), True),
    StructField("source_path", StringType(), True),
    StructField("input_rows", LongType(), True),
    StructField("output_rows", LongType(), True),
    StructField("status", StringType(), True),
    StructField("error_message", StringType(), True),
])

SCHEMA_SNAP_SCHEMA = StructType([
    StructField("run_id", StringType(), True),
    StructField("dataset_name", StringType(), False),
    StructField("schema_json", StringType(), True),
])


def new_run_id() -> str:
    return str(uuid.uuid4())


def get_git_commit() -> str:
    return os.getenv("GIT_COMMIT", "unknown")


def job_runs_path(gov_dir: str) -> str:
    return os.path.join(gov_dir, "job_runs")


def schema_registry_path(gov_dir: str) -> str:
    return os.path.join(gov_dir, "schema_registry")


def log_job_run(
    spark: SparkSession,
    gov_dir: str,
    run_id: str,
    job_name: str,
    source_path: str,
    input_rows: int,
    output_rows: int,
    status: str = "SUCCESS",
    error_message: str = ""
) -> None:
    rows = [(
        run_id,
        job_name,
        get_git_commit(),
        source_path,
        int(input_rows),
        int(output_rows),
        status,
        (error_message or "")[:1000],
    )]
    df = (
        spark.createDataFrame(rows, schema=JOB_RUN_SCHEMA)
        .withColumn("logged_at", F.current_timestamp())
    )
    df.write.mode("append").parquet(job_runs_path(gov_dir))


def snapshot_schema(spark: SparkSession, gov_dir: str, df: DataFrame, dataset_name: str, run_id: str = None) -> None:
    """
    Minimal schema registry: dataset, run, [{name, type, nullable}], time
    """
    fields = [{"name": f.name, "type": f.dataType.simpleString(), "nullable": bool(f.nullable)}
              for f in df.schema.fields]
    snap = (
        spark.createDataFrame(
            [(run_id, dataset_name, json.dumps(fields, ensure_ascii=False))],
            schema=SCHEMA_SNAP_SCHEMA,
        )
        .withColumn("snap_at", F.current_timestamp())
    )
    snap.write.mode("append").parquet(schema_registry_path(gov_dir))
