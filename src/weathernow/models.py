# models to keep openweather data shapes explicit and reusable across the app
# every entity is immutable and built from a single response

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Tuple

DEFAULT_BASE_URL = "https://api.openweathermap.org"
DEFAULT_TIMEOUT = 10.0
DEFAULT_USER_AGENT = "weathernow/0.1"


@dataclass(frozen=True)
class ClientConfig:
    # settings shared by every request a client makes
    api_key: str
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT


@dataclass(frozen=True)
class WeatherSummary:
    # qualitative description, e.g. "overcast clouds"
    description: str


@dataclass(frozen=True)
class Metrics:
    temp: float
    humidity: int


@dataclass(frozen=True)
class CurrentWeather:
    # "weather" and "main" sections of the current weather endpoint
    summaries: Tuple[WeatherSummary, ...] = ()
    metrics: Metrics = field(default_factory=lambda: Metrics(temp=0.0, humidity=0))


@dataclass(frozen=True)
class GeoLocation:
    name: str
    country: str
    lat: float
    lon: float


@dataclass(frozen=True)
class DayTemperature:
    low: float
    high: float


@dataclass(frozen=True)
class DailyForecast:
    # one entry of the one-call "daily" array, date is epoch seconds (UTC)
    date: int
    temp: DayTemperature
    humidity: int
    summaries: Tuple[WeatherSummary, ...] = ()
