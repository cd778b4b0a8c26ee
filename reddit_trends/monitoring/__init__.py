from reddit_trends.monitoring.metrics import PrometheusExporter

__all__ = ["PrometheusExporter"]
