# decoding and business rules
# provides pure functions (decode and format) and small coordinators that compose them with the client

from __future__ import annotations
import json
import logging
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, List, Tuple

from .client import DecodeError, OpenWeatherClient
from .models import (
    CurrentWeather,
    DailyForecast,
    DayTemperature,
    DEFAULT_BASE_URL,
    GeoLocation,
    Metrics,
    WeatherSummary,
)

logger = logging.getLogger(__name__)

TEMPERATURE_INITIALS = MappingProxyType({
    "standard": "K",
    "metric": "C",
    "imperial": "F",
})

# sections the daily pipeline never needs from the one-call endpoint
DAILY_ONLY_EXCLUDES = ("current", "minutely", "hourly", "alerts")


def _load_json(data, what: str) -> Any:
    try:
        return json.loads(data)
    except (TypeError, ValueError) as exc:
        raise DecodeError(f"got error unmarshaling {what} json: {exc}") from exc


# missing sections decode to zero values, a wrong shape surfaces as KeyError/TypeError/ValueError/AttributeError
SHAPE_ERRORS = (KeyError, TypeError, ValueError, AttributeError)


def _summaries(items) -> Tuple[WeatherSummary, ...]:
    return tuple(WeatherSummary(description=str(s.get("description") or "")) for s in items or [])


def decode_current(data) -> CurrentWeather:
    payload = _load_json(data, "current weather")
    try:
        main = payload.get("main") or {}
        return CurrentWeather(
            summaries=_summaries(payload.get("weather")),
            metrics=Metrics(
                temp=float(main.get("temp") or 0.0),
                humidity=int(main.get("humidity") or 0),
            ),
        )
    except SHAPE_ERRORS as exc:
        raise DecodeError(f"unexpected current weather shape: {exc!r}") from exc


def decode_geo_data(data) -> GeoLocation:
    locations = _load_json(data, "geocode")
    if not isinstance(locations, list):
        raise DecodeError("response from Geocoding API must be a list of locations")
    if not locations:
        raise DecodeError("response from Geocoding API must contain at least one location")
    first = locations[0]
    try:
        return GeoLocation(
            name=str(first.get("name") or ""),
            country=str(first.get("country") or ""),
            lat=float(first.get("lat") or 0.0),
            lon=float(first.get("lon") or 0.0),
        )
    except SHAPE_ERRORS as exc:
        raise DecodeError(f"unexpected geocode shape: {exc!r}") from exc


def decode_forecast(data) -> List[DailyForecast]:
    if not data:
        raise DecodeError("data must be a non-empty response from the OneCall API")

    payload = _load_json(data, "onecall")
    try:
        return [
            DailyForecast(
                date=int(d.get("dt") or 0),
                temp=DayTemperature(
                    low=float((d.get("temp") or {}).get("min") or 0.0),
                    high=float((d.get("temp") or {}).get("max") or 0.0),
                ),
                humidity=int(d.get("humidity") or 0),
                summaries=_summaries(d.get("weather")),
            )
            for d in (payload or {}).get("daily") or []
        ]
    except SHAPE_ERRORS as exc:
        raise DecodeError(f"unexpected onecall shape: {exc!r}") from exc


def _description(summaries: Tuple[WeatherSummary, ...]) -> str:
    return summaries[0].description.strip() if summaries else ""


# an absent description leaves the leading separator in place: ", 9.21 C, humidity 46%"
def format_conditions(current: CurrentWeather, units: str) -> str:
    return "{}, {:.2f} {}, humidity {}%".format(
        _description(current.summaries),
        current.metrics.temp,
        TEMPERATURE_INITIALS.get(units, ""),
        current.metrics.humidity,
    )


def format_daily(day: DailyForecast, units: str) -> str:
    label = TEMPERATURE_INITIALS.get(units, "")
    when = datetime.fromtimestamp(day.date, tz=timezone.utc).strftime("%a %b %d")
    return (
        f"{when}: {_description(day.summaries)}, "
        f"low {day.temp.low:.2f} {label}, high {day.temp.high:.2f} {label}, "
        f"humidity {day.humidity}%"
    )


# single location path: fetch -> decode -> format
def conditions(location: str, units: str, api_key: str, base_url: str = DEFAULT_BASE_URL) -> str:
    client = OpenWeatherClient(api_key, base_url=base_url)
    data = client.current(location, units)
    current = decode_current(data)
    logger.debug("decoded current weather for %r: %s", location, current)
    return format_conditions(current, units)


# geocode first, the one-call endpoint only accepts coordinates
def daily_forecast(
    location: str, units: str, api_key: str, base_url: str = DEFAULT_BASE_URL
) -> Tuple[GeoLocation, List[DailyForecast]]:
    client = OpenWeatherClient(api_key, base_url=base_url)
    place = decode_geo_data(client.geocode(location))
    logger.debug("resolved %r to %s, %s (%.2f, %.2f)", location, place.name, place.country, place.lat, place.lon)
    days = decode_forecast(client.forecast(place.lat, place.lon, units, DAILY_ONLY_EXCLUDES))
    return place, days
