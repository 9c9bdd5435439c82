# termmax_tools/loadtest/__init__.py
from .config import (
    ENVIRONMENTS,
    THRESHOLDS,
    WORKLOADS,
    Environment,
    Stage,
    Thresholds,
    get_environment,
    get_workload,
)
from .runner import (
    LoadTestClient,
    MetricsRecorder,
    evaluate_thresholds,
    functional_scenario,
    loading_iteration,
    run_stages,
)

__all__ = [
    'ENVIRONMENTS', 'THRESHOLDS', 'WORKLOADS', 'Environment', 'Stage', 'Thresholds',
    'get_environment', 'get_workload',
    'LoadTestClient', 'MetricsRecorder', 'evaluate_thresholds', 'functional_scenario',
    'loading_iteration', 'run_stages',
]
