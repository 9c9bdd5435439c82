# termmax_tools/loadtest/config.py
"""
Environment, workload and threshold definitions for the API load test.
"""

from typing import Dict, Tuple

from msgspec import Struct

from ..core.logging import ToolsLogger

logger = ToolsLogger.get_logger('loadtest.config')

DEFAULT_ENVIRONMENT = "dev"
DEFAULT_WORKLOAD = "smoke"


class Environment(Struct, frozen=True):
    name: str
    base_url: str
    chain_ids: Tuple[int, ...]


class Stage(Struct, frozen=True):
    duration: int  # seconds
    target: int  # virtual users at the end of the stage


class Thresholds(Struct, frozen=True):
    min_checks_rate: float = 0.95
    max_failure_rate: float = 0.01
    max_p95_duration_ms: float = 1000.0


TESTNET_CHAINS = (11155111, 421614)
MAINNET_CHAINS = (1, 42161)

ENVIRONMENTS: Dict[str, Environment] = {
    "dev": Environment("dev", "https://termmax-backend-v2-test.onrender.com", TESTNET_CHAINS),
    "staging": Environment("staging", "https://termmax-api.staging.ts.finance", TESTNET_CHAINS),
    "testnet": Environment("testnet", "https://termmax-api.testnet.ts.finance", TESTNET_CHAINS),
    "mainnet": Environment("mainnet", "https://termmax-api.ts.finance", MAINNET_CHAINS),
}

WORKLOADS: Dict[str, Tuple[Stage, ...]] = {
    "average": (Stage(60, 100), Stage(240, 100), Stage(60, 0)),
    "stress": (Stage(60, 700), Stage(240, 700), Stage(60, 0)),
    "smoke": (Stage(60, 1),),
}

THRESHOLDS = Thresholds()


def get_environment(name: str) -> Environment:
    env = ENVIRONMENTS.get(name)
    if env is None:
        logger.warning(f"Unknown environment '{name}', falling back to {DEFAULT_ENVIRONMENT}")
        env = ENVIRONMENTS[DEFAULT_ENVIRONMENT]
    return env


def get_workload(name: str) -> Tuple[Stage, ...]:
    stages = WORKLOADS.get(name)
    if stages is None:
        logger.warning(f"Unknown workload '{name}', falling back to {DEFAULT_WORKLOAD}")
        stages = WORKLOADS[DEFAULT_WORKLOAD]
    return stages
