from es_tasks_exporter.collector.base import ElasticsearchCollector
from es_tasks_exporter.collector.logs_query import ErrorQueryCollector
from es_tasks_exporter.collector.tasks import TasksCollector

__all__ = ["ElasticsearchCollector", "ErrorQueryCollector", "TasksCollector"]
