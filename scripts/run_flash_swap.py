#!/usr/bin/env python3
# PATH: scripts/run_flash_swap.py
"""
scripts/run_flash_swap.py - Run one flash swap against a local scenario.

Deploys the scenario's pools and the FlashSwap engine on an in-process
chain, borrows from the lending pool, routes through both legs and
reports either the settlement figures or the revert reason.

Usage:
    python scripts/run_flash_swap.py --min-out-leg1 0 --min-out-leg2 0
    python scripts/run_flash_swap.py --scenario config/scenario_profitable.yaml \\
        --borrow 1 --min-out-leg1 0 --min-out-leg2 0

Environment (.env honoured):
    FLASH_SWAP_CONFIG    engine deployment YAML (default config/deployment.yaml)
    FLASH_SWAP_SCENARIO  scenario YAML (default config/scenario_local.yaml)

Exit codes:
    0 - settlement committed
    1 - flash swap aborted (every balance change reverted)
    2 - configuration error
"""

import os
import sys
from decimal import Decimal
from pathlib import Path
from typing import Optional

import click
from dotenv import load_dotenv

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from config import CONFIG_DIR, load_deployment, load_scenario
from core.abi import decode_revert_reason
from core.exceptions import ConfigError, FlashSwapError
from core.format_money import format_wei
from core.logging import set_global_context, setup_logging
from core.models import SettlementOutcome
from execution.config import config_from_deployment
from execution.scenario import LocalDeployment, build_local_deployment


def execute_scenario(
    deployment: LocalDeployment,
    borrow: Optional[str | Decimal],
    min_out_leg1: int,
    min_out_leg2: int,
) -> SettlementOutcome:
    """
    Run the scenario's flash swap.

    Raises:
        FlashSwapError: the swap aborted; chain state is unchanged
    """
    flash = deployment.flash
    lending_pool = flash.get("lending_pool", "pool_a")
    swap_pool = flash.get("swap_pool", "pool_b")
    symbol = flash.get("borrow")
    if not symbol:
        raise ConfigError("Scenario flash section needs 'borrow'", {"flash": flash})

    amount = deployment.to_wei(symbol, borrow if borrow is not None else flash.get("amount", "1"))
    amount0, amount1 = deployment.borrow_amounts(lending_pool, symbol, amount)
    params = deployment.build_params(lending_pool, swap_pool, symbol, min_out_leg1, min_out_leg2)

    return deployment.engine.initiate_flash_swap(
        deployment.pool(lending_pool).address,
        amount0,
        amount1,
        params.encode(),
    )


def _echo_balances(deployment: LocalDeployment, title: str) -> None:
    click.echo(title)
    for symbol, balance in deployment.engine_balances().items():
        decimals = deployment.token(symbol).decimals
        click.echo(f"  {symbol}: {format_wei(balance, decimals)}")


@click.command()
@click.option(
    "--scenario",
    "-s",
    default=None,
    type=click.Path(),
    help="Scenario YAML (default: $FLASH_SWAP_SCENARIO or config/scenario_local.yaml)",
)
@click.option(
    "--config",
    "config_path",
    default=None,
    type=click.Path(),
    help="Engine deployment YAML (default: $FLASH_SWAP_CONFIG or config/deployment.yaml)",
)
@click.option(
    "--borrow",
    "-b",
    default=None,
    help="Amount to borrow in human units (default: scenario flash.amount)",
)
@click.option(
    "--min-out-leg1",
    required=True,
    type=click.IntRange(min=0),
    help="Minimum intermediate output of leg 1, raw units (0 disables)",
)
@click.option(
    "--min-out-leg2",
    required=True,
    type=click.IntRange(min=0),
    help="Minimum borrowed-asset output of leg 2, raw units (0 disables)",
)
@click.option(
    "--log-level",
    "-l",
    default="INFO",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Log level",
)
@click.option(
    "--json-logs/--no-json-logs",
    default=False,
    help="Use JSON log format",
)
def main(
    scenario: str | None,
    config_path: str | None,
    borrow: str | None,
    min_out_leg1: int,
    min_out_leg2: int,
    log_level: str,
    json_logs: bool,
) -> None:
    """Run a flash swap arbitrage against a local scenario."""
    load_dotenv()
    setup_logging(level=log_level, json_output=json_logs)
    set_global_context(service="flashswap-cli")

    scenario = scenario or os.getenv("FLASH_SWAP_SCENARIO") or "scenario_local.yaml"
    config_path = config_path or os.getenv("FLASH_SWAP_CONFIG") or str(CONFIG_DIR / "deployment.yaml")

    try:
        reference = load_deployment(config_path)
        config = config_from_deployment(reference, config_path)
        deployment = build_local_deployment(load_scenario(scenario), config, reference=reference)
    except (FlashSwapError, FileNotFoundError) as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(2)

    _echo_balances(deployment, "Engine balances before:")

    try:
        outcome = execute_scenario(
            deployment,
            borrow,
            min_out_leg1,
            min_out_leg2,
        )
    except ConfigError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(2)
    except FlashSwapError as e:
        reason = decode_revert_reason(e.revert_data()) or e.reason
        click.echo("\n" + "=" * 60)
        click.echo("FLASH SWAP ABORTED")
        click.echo("=" * 60)
        click.echo(f"Error: {e.code.value}")
        click.echo(f"Revert reason: {reason}")
        _echo_balances(deployment, "Engine balances after (unchanged):")
        sys.exit(1)

    symbol = deployment.flash["borrow"]
    decimals = deployment.token(symbol).decimals
    click.echo("\n" + "=" * 60)
    click.echo("FLASH SWAP SETTLED")
    click.echo("=" * 60)
    click.echo(f"Owed:     {format_wei(outcome.owed, decimals)} {symbol}")
    click.echo(f"Realized: {format_wei(outcome.realized, decimals)} {symbol}")
    click.echo(f"Profit:   {format_wei(outcome.profit, decimals)} {symbol}")
    _echo_balances(deployment, "Engine balances after:")


if __name__ == "__main__":
    main()
