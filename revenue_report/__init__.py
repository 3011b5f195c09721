from revenue_report.pipeline import RevenueReport, process, run_report

__all__ = ["RevenueReport", "process", "run_report"]
