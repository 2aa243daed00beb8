"""CLI entry point for inflationkit."""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path

import click

from inflationkit import __version__
from inflationkit.config import Config, ConfigError, load_config
from inflationkit.consensus import calculate_measure_spread, compute_consensus
from inflationkit.measures import CURRENCIES, normalize_currency
from inflationkit.models import MeasureResolution
from inflationkit.providers.measures import resolve_measures
from inflationkit.quality import score_data_quality


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _effective_config(ctx: click.Context, data_source: str | None) -> Config:
    config: Config = ctx.obj["config"]
    if data_source:
        config = replace(config, data=replace(config.data, source=data_source))
    return config


def _resolve(config: Config, currency: str) -> MeasureResolution:
    return asyncio.run(resolve_measures(currency, config=config))


def _currency_option(func):
    return click.option(
        "--currency", "-c",
        default=None,
        help="Currency code (USD, GBP, EUR, CAD, AUD, CHF, JPY, NZD).",
    )(func)


def _data_source_option(func):
    return click.option(
        "--data-source",
        default=None,
        help="Directory or http(s) base URL holding measure JSON files.",
    )(func)


def _json_option(func):
    return click.option(
        "--json", "as_json", is_flag=True, default=False, help="Emit JSON.",
    )(func)


@click.group()
@click.version_option(version=__version__, prog_name="inflationkit")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to inflationkit.toml configuration file.",
)
@click.option("--log-level", default=None, help="Logging level (DEBUG, INFO, WARNING).")
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, log_level: str | None) -> None:
    """inflationkit: multi-measure inflation consensus calculator."""
    ctx.ensure_object(dict)
    try:
        config = load_config(config_path)
    except ConfigError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)
    ctx.obj["config"] = config
    _configure_logging(log_level or config.logging.level)


@cli.command()
@click.argument("amount")
@click.argument("from_year", type=int)
@click.argument("to_year", type=int)
@_currency_option
@_data_source_option
@click.option(
    "--renormalize/--no-renormalize",
    default=None,
    help="Divide by the weight of measures that had data.",
)
@_json_option
@click.pass_context
def consensus(
    ctx: click.Context,
    amount: str,
    from_year: int,
    to_year: int,
    currency: str | None,
    data_source: str | None,
    renormalize: bool | None,
    as_json: bool,
) -> None:
    """Adjust AMOUNT from FROM_YEAR to TO_YEAR across all measures."""
    config = _effective_config(ctx, data_source)
    code = normalize_currency(currency or config.calculator.default_currency)
    if renormalize is None:
        renormalize = config.calculator.renormalize_weights

    resolution = _resolve(config, code)
    result = compute_consensus(
        resolution, code, from_year, to_year, amount, renormalize=renormalize,
    )
    spread = calculate_measure_spread(result.individual_measures)
    quality = score_data_quality(resolution)

    if as_json:
        payload = {
            "result": result.to_dict(),
            "spread": spread.to_dict(),
            "quality": quality.to_dict(),
            "has_real_data": resolution.has_real_data,
            "fallback_used": resolution.fallback_used,
        }
        click.echo(json.dumps(payload, indent=2, sort_keys=True))
        return

    if result.is_empty:
        click.echo(
            f"No consensus available for {code} {from_year} -> {to_year} "
            f"(amount {amount!r}).",
            err=True,
        )
        sys.exit(1)

    symbol = CURRENCIES[code].symbol if code in CURRENCIES else ""
    click.echo(
        f"{symbol}{result.amount:,.2f} in {from_year} -> "
        f"{symbol}{result.consensus_adjusted_amount:,.2f} in {to_year} "
        f"({result.consensus_total_inflation_percent:+.2f}% consensus)"
    )
    for m in result.individual_measures:
        click.echo(
            f"  {m.measure_name:<14} {symbol}{m.adjusted_amount:,.2f} "
            f"{m.total_inflation_percent:+.2f}%  weight {m.weight:.2f}  [{m.confidence}]"
        )
    if result.excluded_measures:
        click.echo(f"  Excluded (no data): {', '.join(result.excluded_measures)}")
    click.echo(f"Agreement: {spread.agreement_level} ({spread.description})")
    source_label = "simulated" if resolution.fallback_used else "measure files"
    click.echo(f"Data quality: {quality.score}/100 ({source_label})")


@cli.command()
@_currency_option
@_data_source_option
@_json_option
@click.pass_context
def measures(
    ctx: click.Context,
    currency: str | None,
    data_source: str | None,
    as_json: bool,
) -> None:
    """List the measures resolved for a currency."""
    config = _effective_config(ctx, data_source)
    code = normalize_currency(currency or config.calculator.default_currency)
    resolution = _resolve(config, code)

    if as_json:
        click.echo(json.dumps(resolution.to_dict(), indent=2, sort_keys=True))
        return

    if not resolution.measures:
        click.echo(f"No measures available for {code}.")
        return
    kind = "simulated" if resolution.fallback_used else "real"
    click.echo(f"{code}: {len(resolution.measures)} {kind} measure(s)")
    for name, m in resolution.measures.items():
        bounds = m.year_bounds()
        span = f"{bounds[0]}-{bounds[1]}" if bounds else "no data"
        click.echo(f"  {name:<14} weight {m.weight:.2f}  {span}  [{m.confidence}]")
        if m.description:
            click.echo(f"    {m.description}")


@cli.command()
@_currency_option
@_data_source_option
@_json_option
@click.pass_context
def quality(
    ctx: click.Context,
    currency: str | None,
    data_source: str | None,
    as_json: bool,
) -> None:
    """Show the data-quality score for a currency's measures."""
    config = _effective_config(ctx, data_source)
    code = normalize_currency(currency or config.calculator.default_currency)
    score = score_data_quality(_resolve(config, code))

    if as_json:
        click.echo(json.dumps(score.to_dict(), indent=2, sort_keys=True))
        return
    details = score.details
    click.echo(f"{code} data quality: {score.score}/100")
    click.echo(
        f"  {details.real_data_measures} real, {details.estimated_measures} estimated "
        f"of {details.total_measures} measure(s)"
    )
    click.echo(f"  Average coverage: {details.average_years_coverage:.1f} years")


@cli.command()
def currencies() -> None:
    """List supported currencies."""
    for info in CURRENCIES.values():
        click.echo(
            f"  {info.code}  {info.symbol:<4} {info.name} (from {info.earliest_year}, "
            f"avg {info.average_inflation_rate:.1%} a year)"
        )


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
