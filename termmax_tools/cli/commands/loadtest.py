# termmax_tools/cli/commands/loadtest.py

"""
Backend API load test CLI command
"""

import asyncio
import random

import click

from ...loadtest import (
    ENVIRONMENTS,
    WORKLOADS,
    LoadTestClient,
    evaluate_thresholds,
    functional_scenario,
    get_environment,
    get_workload,
    run_stages,
)


async def run_load_test(environment, stages, functional_only: bool, session=None):
    rng = random.Random()
    async with LoadTestClient(environment.base_url, session=session) as client:
        await functional_scenario(client, environment, rng)
        if not functional_only:
            await run_stages(client, environment, stages, rng)
        return client.metrics


@click.command('loadtest')
@click.option('--env', 'env_name', default='dev', show_default=True,
              help=f"Target environment ({', '.join(ENVIRONMENTS)})")
@click.option('--workload', default='smoke', show_default=True,
              help=f"Workload profile ({', '.join(WORKLOADS)})")
@click.option('--functional-only', is_flag=True, help='Run the functional pass only, without ramping users')
@click.pass_context
def loadtest(ctx, env_name, workload, functional_only):
    """Load test the TermMax backend API

    Runs one functional pass over every route group, then ramps virtual users
    through the workload stages. Exits 1 when any threshold fails.
    """
    ctx.ensure_object(dict)
    environment = get_environment(env_name)
    stages = get_workload(workload)

    click.echo(f"Load testing {environment.name} ({environment.base_url})")
    metrics = asyncio.run(run_load_test(environment, stages, functional_only, ctx.obj.get('http_session')))

    summary = metrics.summary()
    click.echo(f"Requests: {summary['requests']} ({summary['failed_requests']} failed)")
    click.echo(f"Checks: {summary['checks_passed']}/{summary['checks_total']} passed")
    click.echo(f"p95 duration: {summary['p95_ms']:.1f} ms")

    results = evaluate_thresholds(metrics)
    for name, passed in results.items():
        click.echo(f"{'✓' if passed else '✗'} {name}")

    if not all(results.values()):
        ctx.exit(1)
