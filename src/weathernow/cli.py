# connects input (location, units) to the service and prints the result
# the only place that reads the environment or turns an error into an exit code

from __future__ import annotations
import os
from typing import Optional

import typer
from dotenv import load_dotenv

from .client import ConfigError, InvalidArgumentError, VALID_UNITS, WeatherAPIError
from .logging_config import setup_logging
from .models import DEFAULT_BASE_URL
from .service import conditions, daily_forecast, format_daily

API_KEY_ENV = "OPENWEATHER_API_KEY"
BASE_URL_ENV = "OPENWEATHER_BASE_URL"

app = typer.Typer(
    add_completion=False,
    help="Print the current weather conditions for a location.",
)


def _read_api_key() -> str:
    api_key = os.getenv(API_KEY_ENV)
    if not api_key:
        raise ConfigError(f"environment variable {API_KEY_ENV} must be set")
    return api_key


@app.command()
def main(
    location: Optional[str] = typer.Argument(
        None, help="Location to look up, e.g. 'london' or 'tampa,us'."
    ),
    units: str = typer.Option(
        "imperial", "--units", help="One of: standard, metric, imperial."
    ),
    forecast: bool = typer.Option(
        False, "--forecast", help="Print the daily forecast instead of current conditions."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log requests to stderr."),
) -> None:
    # in production the key is injected by the environment, .env is a local convenience
    load_dotenv()
    setup_logging("DEBUG" if verbose else "WARNING")

    try:
        api_key = _read_api_key()
        if units not in VALID_UNITS:
            raise InvalidArgumentError("units flag must be set to one of: imperial, metric, standard")
        if not location:
            raise InvalidArgumentError(
                "positional argument for location must be given (e.g. 'london', 'tampa,us', etc.)"
            )
        base_url = os.getenv(BASE_URL_ENV) or DEFAULT_BASE_URL

        if forecast:
            place, days = daily_forecast(location, units, api_key, base_url=base_url)
            typer.echo(f"{place.name}, {place.country}")
            for day in days:
                typer.echo(format_daily(day, units))
        else:
            typer.echo(conditions(location, units, api_key, base_url=base_url))
    except WeatherAPIError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
