# termmax_tools/loadtest/runner.py
"""
Async load-test runner for the TermMax backend API.

Virtual users share one aiohttp session. Every GET is timed and checked
against an expected status; the recorder aggregates check pass rate,
HTTP failure rate and request durations, which are evaluated against
the configured thresholds at the end of the run.
"""

import asyncio
import math
import random
import time
from typing import Any, Dict, List, Optional, Sequence, Tuple

import aiohttp

from ..core.logging import LoggingMixin, ToolsLogger
from . import routes
from .config import THRESHOLDS, Environment, Stage, Thresholds

logger = ToolsLogger.get_logger('loadtest.runner')

DEFAULT_REQUEST_TIMEOUT = 10.0
THINK_TIME_RANGE = (1, 5)


class MetricsRecorder:
    """Aggregates check results and request timings for a run."""

    def __init__(self):
        self.checks: Dict[str, List[int]] = {}  # name -> [passes, fails]
        self.requests = 0
        self.failed_requests = 0
        self.durations: List[float] = []

    def record_check(self, name: str, passed: bool) -> None:
        counts = self.checks.setdefault(name, [0, 0])
        counts[0 if passed else 1] += 1

    def record_request(self, duration_ms: float, failed: bool) -> None:
        self.requests += 1
        if failed:
            self.failed_requests += 1
        self.durations.append(duration_ms)

    @property
    def checks_passed(self) -> int:
        return sum(c[0] for c in self.checks.values())

    @property
    def checks_total(self) -> int:
        return sum(c[0] + c[1] for c in self.checks.values())

    @property
    def checks_rate(self) -> float:
        total = self.checks_total
        return self.checks_passed / total if total else 0.0

    @property
    def failure_rate(self) -> float:
        return self.failed_requests / self.requests if self.requests else 0.0

    def percentile(self, pct: float) -> float:
        """Nearest-rank percentile of request durations in ms."""
        if not self.durations:
            return 0.0
        ordered = sorted(self.durations)
        rank = max(1, math.ceil(pct / 100 * len(ordered)))
        return ordered[rank - 1]

    @property
    def p95(self) -> float:
        return self.percentile(95)

    def summary(self) -> Dict[str, Any]:
        return {
            "requests": self.requests,
            "failed_requests": self.failed_requests,
            "checks_passed": self.checks_passed,
            "checks_total": self.checks_total,
            "checks_rate": self.checks_rate,
            "failure_rate": self.failure_rate,
            "p95_ms": self.p95,
        }


def evaluate_thresholds(metrics: MetricsRecorder, thresholds: Thresholds = THRESHOLDS) -> Dict[str, bool]:
    return {
        "checks": metrics.checks_rate > thresholds.min_checks_rate,
        "http_req_failed": metrics.failure_rate < thresholds.max_failure_rate,
        "http_req_duration": metrics.p95 < thresholds.max_p95_duration_ms,
    }


class LoadTestClient(LoggingMixin):
    """aiohttp session wrapper issuing timed, checked GET requests."""

    def __init__(self,
                 base_url: str,
                 metrics: Optional[MetricsRecorder] = None,
                 timeout: float = DEFAULT_REQUEST_TIMEOUT,
                 session=None):
        self.base_url = base_url.rstrip("/")
        self.metrics = metrics or MetricsRecorder()
        self.timeout = timeout
        self._session = session
        self._owns_session = session is None

    async def start(self) -> None:
        if self._session is None:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout)
            )

    async def close(self) -> None:
        if self._session is not None and self._owns_session:
            await self._session.close()
        self._session = None

    async def __aenter__(self) -> "LoadTestClient":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def get(self, path: str, check: str, expected_status: int = 200) -> Any:
        """GET path, record the check and return the parsed JSON body (None if unavailable)."""
        if self._session is None:
            await self.start()

        url = f"{self.base_url}{path}"
        started = time.perf_counter()
        try:
            async with self._session.get(url) as response:
                status = response.status
                try:
                    body = await response.json(content_type=None)
                except ValueError:
                    body = None
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            self.metrics.record_request(_elapsed_ms(started), failed=True)
            self.metrics.record_check(check, False)
            self.log_warning("Request failed", url=url, error=str(e))
            return None

        self.metrics.record_request(_elapsed_ms(started), failed=status >= 400)
        passed = status == expected_status
        self.metrics.record_check(check, passed)
        if not passed:
            self.log_warning(f"Check '{check}' failed with status {status}", url=url)
        return body


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000


# === Functional scenario ===

async def _default_group(client: LoadTestClient) -> None:
    await client.get(routes.root(), "get root success")
    await client.get(routes.health(), "get health success")


async def _market_group(client: LoadTestClient, chain_id: int, rng: random.Random) -> None:
    await client.get(routes.market_general_config(chain_id), "get general config success")

    await client.get(routes.market_data(chain_id), "get market data success")
    await client.get(routes.market_data(chain_id, rng.randint(10_000, 1_000_000)),
                     "get market data with minLowCapacityValue success")

    await client.get(routes.config_list(chain_id), "get config list success")
    await client.get(routes.config_list(chain_id, rng.randint(10_000, 1_000_000)),
                     "get config list with minLowCapacityValue success")

    markets = routes.market_addresses(await client.get(routes.market_list(chain_id), "get market list success"))
    for market in markets:
        await client.get(routes.market_item(chain_id, market), "get market item success")

    assets = routes.asset_addresses(await client.get(routes.asset_list(chain_id), "get asset list success"))
    for asset in assets:
        await client.get(routes.asset_item(chain_id, asset), "get asset item success")

    await client.get(routes.gt_list(chain_id), "get gt list success")
    for market in markets:
        await client.get(routes.gt_item(chain_id, market), "get gt item success")

    orders = routes.order_addresses(await client.get(routes.order_list(chain_id), "get order list success"))
    for order in orders:
        await client.get(routes.order_item(chain_id, order), "get order item success")

    await client.get(routes.orders_info(chain_id), "get order infos success")
    for order in orders:
        await client.get(routes.order_info(chain_id, order), "get order info success")

    await client.get(routes.prices(chain_id), "get price infos success")
    for asset in assets:
        await client.get(routes.price(chain_id, asset), "get price info success")


async def _dashboard_group(client: LoadTestClient, chain_id: int) -> None:
    await client.get(routes.position_summary(chain_id), "get position summary success")
    await client.get(routes.position_total_usd_value(chain_id), "get total usd value success")


async def _maker_group(client: LoadTestClient, chain_id: int, rng: random.Random) -> None:
    markets = routes.market_addresses(await client.get(routes.market_list(chain_id), "get market list success"))
    for market in markets:
        order_type = rng.choice(routes.ORDER_TYPES)
        await client.get(routes.default_order_params(chain_id, order_type, market),
                         "get default order params success")
    for market in markets:
        await client.get(routes.create_order_history(chain_id, market), "get create order history success")

    orders = routes.order_addresses(await client.get(routes.order_list(chain_id), "get order list success"))
    for order in orders:
        await client.get(routes.update_order_history(chain_id, order), "get update order history success")

    await client.get(routes.debug_create_history(), "get debug create history success")


async def _taker_group(client: LoadTestClient, chain_id: int) -> None:
    markets = routes.market_addresses(await client.get(routes.market_list(chain_id), "get market list success"))
    for aggregator in (False, True):
        prefix = "aggregator " if aggregator else ""
        for action in routes.TAKER_ACTIONS:
            check = f"get {prefix}{action.replace('-', ' ')} success"
            for market in markets:
                await client.get(routes.taker_order(chain_id, action, market, aggregator), check)


async def functional_scenario(client: LoadTestClient,
                              environment: Environment,
                              rng: Optional[random.Random] = None) -> MetricsRecorder:
    """One pass over every route group, each group on a randomly chosen chain."""
    rng = rng or random.Random()

    logger.info(f"Running functional scenario against {environment.base_url}")
    await _default_group(client)
    await _market_group(client, rng.choice(environment.chain_ids), rng)
    await _dashboard_group(client, rng.choice(environment.chain_ids))
    await _maker_group(client, rng.choice(environment.chain_ids), rng)
    await _taker_group(client, rng.choice(environment.chain_ids))
    return client.metrics


# === Loading scenario ===

async def loading_iteration(client: LoadTestClient,
                            environment: Environment,
                            rng: Optional[random.Random] = None) -> Tuple[List[str], List[str]]:
    """Configs list, then order info per order, then prices per market."""
    rng = rng or random.Random()
    chain_id = rng.choice(environment.chain_ids)

    body = await client.get(routes.config_list(chain_id, 10_000), "get configs success")
    markets, orders = routes.config_list_addresses(body)

    for order in orders:
        await client.get(routes.order_info(chain_id, order), "get order info success")
    for market in markets:
        await client.get(routes.prices(chain_id, market, include_inactive=False), "get price success")

    return markets, orders


async def _virtual_user(client: LoadTestClient,
                        environment: Environment,
                        stop: asyncio.Event,
                        rng: random.Random,
                        think_scale: float) -> int:
    iterations = 0
    while not stop.is_set():
        await loading_iteration(client, environment, rng)
        iterations += 1
        think = rng.randint(*THINK_TIME_RANGE) * think_scale
        try:
            await asyncio.wait_for(stop.wait(), timeout=think)
        except asyncio.TimeoutError:
            pass
    return iterations


async def run_stages(client: LoadTestClient,
                     environment: Environment,
                     stages: Sequence[Stage],
                     rng: Optional[random.Random] = None,
                     tick: float = 1.0,
                     think_scale: float = 1.0) -> MetricsRecorder:
    """
    Ramp virtual users linearly towards each stage target.

    The number of active users is adjusted every tick; users removed on a
    ramp-down finish their current iteration before exiting.
    """
    rng = rng or random.Random()
    active: List[Tuple[asyncio.Task, asyncio.Event]] = []
    retired: List[asyncio.Task] = []
    current = 0

    def scale_to(target: int) -> None:
        while len(active) < target:
            stop = asyncio.Event()
            task = asyncio.ensure_future(_virtual_user(client, environment, stop, rng, think_scale))
            active.append((task, stop))
        while len(active) > target:
            task, stop = active.pop()
            stop.set()
            retired.append(task)

    try:
        for stage in stages:
            steps = max(1, int(stage.duration / tick))
            logger.info(f"Stage: {current} -> {stage.target} virtual users over {stage.duration}s")
            for step in range(1, steps + 1):
                scale_to(round(current + (stage.target - current) * step / steps))
                await asyncio.sleep(tick)
            current = stage.target
    finally:
        scale_to(0)
        results = await asyncio.gather(*retired, return_exceptions=True)

    errors = [r for r in results if isinstance(r, BaseException)]
    if errors:
        raise errors[0]

    logger.info(f"Load stages finished: {sum(results)} iterations")
    return client.metrics
