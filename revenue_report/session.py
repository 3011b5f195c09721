# revenue_report/session.py
from contextlib import contextmanager
from typing import Iterator, Optional

from pyspark.sql import SparkSession

from revenue_report.config import APP_NAME, MASTER, SHUFFLE_PARTITIONS


def build_session(
    app_name: str = APP_NAME,
    master: Optional[str] = MASTER,
    shuffle_partitions: str = SHUFFLE_PARTITIONS,
) -> SparkSession:
    builder = SparkSession.builder.appName(app_name)
    if master:
        builder = builder.master(master)

    spark = (
        builder
        .config("spark.sql.shuffle.partitions", str(shuffle_partitions))
        .getOrCreate()
    )
    spark.sparkContext.setLogLevel("WARN")
    return spark


@contextmanager
def spark_session(
    app_name: str = APP_NAME,
    master: Optional[str] = MASTER,
    shuffle_partitions: str = SHUFFLE_PARTITIONS,
) -> Iterator[SparkSession]:
    """
    Session lifecycle for one report run:
    - create before the first read
    - always stop after the pipeline, even on failure
    """
    spark = build_session(app_name, master, shuffle_partitions)
    try:
        yield spark
    finally:
        spark.stop()
