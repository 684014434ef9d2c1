"""Prometheus metrics definitions"""

from prometheus_client import Counter, Histogram, Gauge


# Dataset metrics
dataset_rows_loaded = Gauge(
    'dataset_rows_loaded',
    'Transactions in the loaded dataset'
)

dataset_load_time = Histogram(
    'dataset_load_time_seconds',
    'Time to read and validate the raw dataset',
    buckets=[0.1, 0.5, 1, 2, 5, 10]
)

# Problem statement metrics
problem_execution_time = Histogram(
    'problem_execution_time_seconds',
    'Execution time per problem statement',
    labelnames=['problem_id'],
    buckets=[0.01, 0.05, 0.1, 0.5, 1, 5]
)

problem_result_rows = Gauge(
    'problem_result_rows',
    'Rows returned by the last run of a problem statement',
    labelnames=['problem_id']
)

problem_runs = Counter(
    'problem_runs_total',
    'Problem statement executions',
    labelnames=['problem_id', 'status']  # success, failure
)

analysis_completion_time = Histogram(
    'analysis_completion_time_seconds',
    'Time to run the selected problem statements',
    buckets=[0.1, 0.5, 1, 5, 10, 30]
)
