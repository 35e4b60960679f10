"""
Estimate-max-id command for codewall.

Refreshes the repository ID ceiling that random selection draws below.
"""

import click
import random
import sys
from typing import Optional

from ..config import configure_logging, get_github_token, load_config, update_config_file
from ..domain.failure import FatalError
from ..exit_codes import INTERRUPTED, exit_with_code, get_exit_code_for_exception
from ..infra.github_client import GitHubClient
from ..services.max_id_estimator import (
    DEFAULT_MAX_WINDOWS,
    DEFAULT_PROBES,
    DEFAULT_STEP,
    MaxRepoIdEstimator,
)


@click.command('estimate-max-id')
@click.option('--start', type=int, help='ID to start probing from (default: configured max_repo_id)')
@click.option('--step', type=int, default=DEFAULT_STEP, show_default=True, help='IDs per probe window')
@click.option('--probes', type=int, default=DEFAULT_PROBES, show_default=True, help='Random probes per window')
@click.option('--max-windows', type=int, default=DEFAULT_MAX_WINDOWS, show_default=True,
              help='Give up after this many windows')
@click.option('--seed', type=int, help='Seed the probe positions')
@click.option('--save', is_flag=True, help='Write the estimate to the config file')
@click.option('--debug', is_flag=True, help='Enable debug logging')
def estimate_handler(
    start: Optional[int],
    step: int,
    probes: int,
    max_windows: int,
    seed: Optional[int],
    save: bool,
    debug: bool,
):
    """
    Estimate the highest allocated GitHub repository ID.

    Probes random IDs in windows above the current ceiling and stops at
    the first window where none resolve. Prints the estimate.

    \b
    Examples:
        codewall estimate-max-id
        codewall estimate-max-id --step 500000 --save
    """
    config = load_config()
    configure_logging(config, debug)
    github_config = config['github']

    try:
        client = GitHubClient(
            get_github_token(config),
            api_url=github_config['api_url'],
            timeout=github_config.get('request_timeout'),
        )
        estimator = MaxRepoIdEstimator(
            client,
            step=step,
            probes=probes,
            max_windows=max_windows,
            rng=random.Random(seed) if seed is not None else None,
        )
        for message in estimator.estimate(start if start is not None else github_config['max_repo_id']):
            print(message, file=sys.stderr)
    except KeyboardInterrupt:
        exit_with_code(INTERRUPTED, "Interrupted")
    except FatalError as e:
        exit_with_code(get_exit_code_for_exception(e), f"Error: {e}")
    except ValueError as e:
        raise click.BadParameter(str(e))

    result = estimator.last_result
    print(f"Probed {result.windows_probed} windows with {result.requests} requests", file=sys.stderr)
    if not result.complete:
        print("Warning: repositories still resolve at the last window; estimate is a lower bound",
              file=sys.stderr)

    if save:
        path = update_config_file({'github': {'max_repo_id': result.estimate}})
        print(f"Saved max_repo_id to {path}", file=sys.stderr)

    click.echo(str(result.estimate))
