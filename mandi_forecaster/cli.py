"""
Mandi Price Forecaster — CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Load market records (``--data`` or ``config.data.records_file``).
  4. Run the analysis.
  5. Print an ASCII report; optionally export with ``--output``.

Install and run::

    pip install -e .
    mandi-forecaster --help
    mandi-forecaster validate-config
    mandi-forecaster list-varieties --data data/raw/onion.csv
    mandi-forecaster forecast --variety Onion --months 6
    mandi-forecaster rank-markets --variety Onion --state Maharashtra --district Pune
    mandi-forecaster rank-markets --variety Onion --state Maharashtra --distance 120 --vehicle pickup_truck
    mandi-forecaster analyze --variety Onion --state Maharashtra
"""

from __future__ import annotations

import json
import random
from pathlib import Path
from typing import Optional

import typer

app = typer.Typer(
    name="mandi-forecaster",
    help="Commodity price forecasting and market ranking for produce sellers.",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from pydantic import ValidationError

    from mandi_forecaster.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except (ValidationError, ValueError) as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Set up logging from config."""
    from mandi_forecaster.utils.logging import configure_logging
    configure_logging(config.logging)


def _load_dataset_or_exit(config, data_path: Optional[str], variety: Optional[str] = None):
    """Load records into a ``MarketDataset``, exiting on file errors."""
    from mandi_forecaster.analysis import MarketDataset
    from mandi_forecaster.ingestion.records import load_market_records

    path = Path(data_path or config.data.records_file)
    try:
        records = load_market_records(path, default_variety=variety)
    except (FileNotFoundError, ValueError) as exc:
        typer.echo(f"[ERROR] Could not load market records:\n{exc}", err=True)
        raise typer.Exit(code=1)

    if not records:
        typer.echo(f"[ERROR] No usable market records in {path}.", err=True)
        raise typer.Exit(code=1)
    return MarketDataset(records, config)


def _reference_or_none(state: Optional[str], district: Optional[str]):
    from mandi_forecaster.models.market import ReferenceLocation

    if state is None:
        if district is not None:
            typer.echo("[WARN] --district ignored without --state.", err=True)
        return None
    return ReferenceLocation(state=state, district=district)


def _rng(seed: Optional[int], config) -> random.Random:
    return random.Random(seed if seed is not None else config.forecast.seed)


def _export_or_exit(rows: list[dict], output: Optional[str]) -> None:
    from mandi_forecaster.reporting.export import export_rows

    if not output:
        return
    try:
        written = export_rows(rows, Path(output))
    except ValueError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"  Wrote {len(rows)} row(s) to {written}")


# Shared option declarations
_DATA_OPT = typer.Option(None, "--data", "-d", help="Market records file (.csv or .json).")
_CONFIG_OPT = typer.Option(None, "--config", help="Path to TOML config file.")
_VARIETY_OPT = typer.Option(..., "--variety", "-v", help="Commodity variety, e.g. Onion.")
_OUTPUT_OPT = typer.Option(None, "--output", "-o", help="Export rows to .csv or .json.")


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = _CONFIG_OPT,
    show_full: bool = typer.Option(False, "--full", help="Print the full config as JSON."),
) -> None:
    """Validate the configuration file and print parsed values.

    Exits with code 1 if the config fails validation.
    """
    config = _load_config_or_exit(config_path)

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  Records file:     {config.data.records_file}")
    typer.echo(f"  Forecast months:  {config.forecast.horizon_months}")
    typer.echo(f"  Noise amplitude:  {config.forecast.noise_amplitude}")
    typer.echo(f"  Markets shown:    {config.ranking.top_n}")
    typer.echo(f"  Log level:        {config.logging.level}")
    typer.echo(f"  Debug mode:       {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(config.model_dump(), indent=2, default=str))

    typer.echo("")
    typer.echo("[OK] Config valid.")


@app.command("list-varieties")
def list_varieties(
    data_path: Optional[str] = _DATA_OPT,
    config_path: Optional[str] = _CONFIG_OPT,
    state: Optional[str] = typer.Option(
        None, "--state", help="Also list the districts of this state."
    ),
) -> None:
    """List varieties and states present in the records file."""
    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    dataset = _load_dataset_or_exit(config, data_path)

    typer.echo(f"Records: {len(dataset)}")
    typer.echo(f"Varieties ({len(dataset.varieties())}): {', '.join(dataset.varieties())}")
    typer.echo(f"States ({len(dataset.states())}): {', '.join(dataset.states())}")
    if state:
        typer.echo(f"Districts in {state}: {', '.join(dataset.districts(state)) or '(none)'}")


@app.command("forecast")
def forecast(
    variety: str = _VARIETY_OPT,
    months: Optional[int] = typer.Option(
        None, "--months", "-m", help="Forecast horizon in months (default from config)."
    ),
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed for the noise term."),
    no_noise: bool = typer.Option(False, "--no-noise", help="Disable the noise term."),
    data_path: Optional[str] = _DATA_OPT,
    config_path: Optional[str] = _CONFIG_OPT,
    output: Optional[str] = _OUTPUT_OPT,
) -> None:
    """Forecast monthly prices for a variety."""
    from mandi_forecaster.forecasting.summary import summarize_forecast
    from mandi_forecaster.reporting.export import forecast_rows
    from mandi_forecaster.reporting.formatters import format_forecast_table

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    dataset = _load_dataset_or_exit(config, data_path, variety)

    forecasts = dataset.forecast(
        variety,
        months,
        rng=_rng(seed, config),
        noise_amplitude=0.0 if no_noise else None,
    )
    typer.echo(format_forecast_table(forecasts, variety, summarize_forecast(forecasts)))
    _export_or_exit(forecast_rows(forecasts), output)


@app.command("seasonal")
def seasonal(
    variety: str = _VARIETY_OPT,
    data_path: Optional[str] = _DATA_OPT,
    config_path: Optional[str] = _CONFIG_OPT,
    output: Optional[str] = _OUTPUT_OPT,
) -> None:
    """Show monthly seasonal price patterns for a variety."""
    from mandi_forecaster.reporting.export import models_to_rows
    from mandi_forecaster.reporting.formatters import format_seasonal_table

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    dataset = _load_dataset_or_exit(config, data_path, variety)

    patterns = dataset.seasonal_patterns(variety)
    typer.echo(format_seasonal_table(patterns, variety))
    _export_or_exit(models_to_rows(patterns), output)


@app.command("actions")
def actions(
    variety: str = _VARIETY_OPT,
    data_path: Optional[str] = _DATA_OPT,
    config_path: Optional[str] = _CONFIG_OPT,
    output: Optional[str] = _OUTPUT_OPT,
) -> None:
    """Show the month-by-month Sell / Store / Monitor table for a variety."""
    from mandi_forecaster.reporting.export import models_to_rows
    from mandi_forecaster.reporting.formatters import format_action_table

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    dataset = _load_dataset_or_exit(config, data_path, variety)

    rows = dataset.action_table(variety)
    typer.echo(format_action_table(rows, variety))
    _export_or_exit(models_to_rows(rows), output)


@app.command("rank-markets")
def rank_markets_cmd(
    variety: str = _VARIETY_OPT,
    state: Optional[str] = typer.Option(None, "--state", help="Seller's state."),
    district: Optional[str] = typer.Option(None, "--district", help="Seller's district."),
    top_n: Optional[int] = typer.Option(
        None, "--top", "-n", help="Number of markets to show (default from config)."
    ),
    distance_km: Optional[float] = typer.Option(
        None, "--distance", help="Road distance to the chosen market in km; prints a trip estimate."
    ),
    vehicle: Optional[str] = typer.Option(
        None, "--vehicle", help="Vehicle preset for the trip estimate (e.g. pickup_truck)."
    ),
    fuel_price: float = typer.Option(
        100.0, "--fuel-price", help="Fuel price per litre for the trip estimate."
    ),
    data_path: Optional[str] = _DATA_OPT,
    config_path: Optional[str] = _CONFIG_OPT,
    output: Optional[str] = _OUTPUT_OPT,
) -> None:
    """Rank markets for selling a variety from the seller's location."""
    from pydantic import ValidationError

    from mandi_forecaster.recommendations.trip import VEHICLE_PRESETS, VehicleInfo, estimate_trip
    from mandi_forecaster.reporting.export import models_to_rows
    from mandi_forecaster.reporting.formatters import format_market_table, format_trip_estimate

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    dataset = _load_dataset_or_exit(config, data_path, variety)

    markets = dataset.best_markets(variety, _reference_or_none(state, district), top_n)
    typer.echo(format_market_table(markets, variety))

    if distance_km is not None:
        if vehicle is not None and vehicle not in VEHICLE_PRESETS:
            typer.echo(
                f"[ERROR] Unknown vehicle {vehicle!r}; choose from {', '.join(VEHICLE_PRESETS)}.",
                err=True,
            )
            raise typer.Exit(code=1)
        try:
            if vehicle is None:
                profile = VehicleInfo(fuel_price_per_litre=fuel_price)
            else:
                profile = VehicleInfo.from_preset(vehicle, fuel_price)
            trip = estimate_trip(distance_km, profile)
        except (ValidationError, ValueError) as exc:
            typer.echo(f"[ERROR] Trip estimate failed: {exc}", err=True)
            raise typer.Exit(code=1)
        typer.echo(format_trip_estimate(trip))

    _export_or_exit(models_to_rows(markets), output)


@app.command("analyze")
def analyze(
    variety: str = _VARIETY_OPT,
    state: Optional[str] = typer.Option(None, "--state", help="Seller's state."),
    district: Optional[str] = typer.Option(None, "--district", help="Seller's district."),
    months: Optional[int] = typer.Option(None, "--months", "-m", help="Forecast horizon."),
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed for the noise term."),
    data_path: Optional[str] = _DATA_OPT,
    config_path: Optional[str] = _CONFIG_OPT,
    output: Optional[str] = typer.Option(
        None, "--output", "-o", help="Write the full analysis to a .json file."
    ),
) -> None:
    """Run the full analysis for a variety: forecast, seasonality, markets, insight."""
    from mandi_forecaster.reporting.export import export_to_json, forecast_rows, models_to_rows
    from mandi_forecaster.reporting.formatters import (
        format_action_table,
        format_forecast_table,
        format_insight,
        format_market_table,
        format_seasonal_table,
    )

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    dataset = _load_dataset_or_exit(config, data_path, variety)

    result = dataset.analyze(
        variety,
        _reference_or_none(state, district),
        horizon=months,
        rng=_rng(seed, config),
    )

    typer.echo(format_forecast_table(result.forecasts, variety, result.forecast_summary))
    typer.echo(format_seasonal_table(result.patterns, variety))
    typer.echo(format_action_table(result.actions, variety))
    typer.echo(format_market_table(result.markets, variety))
    typer.echo(format_insight(result.insight))

    if output:
        if Path(output).suffix.lower() != ".json":
            typer.echo("[ERROR] analyze --output must be a .json file.", err=True)
            raise typer.Exit(code=1)
        written = export_to_json(
            {
                "variety": variety,
                "forecasts": forecast_rows(result.forecasts),
                "seasonal_patterns": models_to_rows(result.patterns),
                "actions": models_to_rows(result.actions),
                "markets": models_to_rows(result.markets),
                "insight": result.insight.model_dump(mode="json"),
            },
            Path(output),
        )
        typer.echo(f"  Wrote analysis to {written}")


if __name__ == "__main__":
    app()
