# OOP boundary for external i/o
# all http, keys and url building live here, so the rest of the code is pure and testable
# a thread-local session per worker keeps one client safe to share across threads

from __future__ import annotations
import logging
import re
import threading
from typing import Iterable, List, Sequence, Tuple
from urllib.parse import urlencode

import requests

from .models import ClientConfig, DEFAULT_BASE_URL, DEFAULT_TIMEOUT, DEFAULT_USER_AGENT

logger = logging.getLogger(__name__)

VALID_UNITS = frozenset({"standard", "metric", "imperial"})
EXCLUDABLE_TIMEFRAMES = frozenset({"current", "minutely", "hourly", "daily", "alerts"})


class WeatherAPIError(RuntimeError):
    # base error type used to propagate clear messages from this package
    pass


class ConfigError(WeatherAPIError):
    pass


class InvalidArgumentError(WeatherAPIError):
    pass


class TransportError(WeatherAPIError):
    pass


class DecodeError(WeatherAPIError):
    pass


def validate_units(units: str) -> None:
    if units not in VALID_UNITS:
        raise InvalidArgumentError("units must be one of: standard, metric, imperial")


def validate_location(location: str) -> None:
    if not location:
        raise InvalidArgumentError("location argument must not be empty")


_APPID_VALUE = re.compile(r"(appid=)[^&\s'\"]*")


def redact_appid(text: str) -> str:
    # masks the appid query value wherever a url shows up, encoded or not
    return _APPID_VALUE.sub(r"\1***", text)


def filter_exclude(exclude: Iterable[str]) -> List[str]:
    # unknown timeframes are dropped, order and repeats are kept
    kept = []
    for tf in exclude:
        tf = tf.lower()
        if tf in EXCLUDABLE_TIMEFRAMES:
            kept.append(tf)
    return kept


class OpenWeatherClient:
    # this class encapsulates provider details like base URL, params and auth
    BASE_URL = DEFAULT_BASE_URL
    DEFAULT_TIMEOUT = DEFAULT_TIMEOUT

    def __init__(
        self,
        api_key: str,
        base_url: str = BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
        user_agent: str = DEFAULT_USER_AGENT,
    ):
        if not api_key:
            raise ConfigError("api_key argument must not be empty")

        self.config = ClientConfig(
            api_key=api_key,
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            user_agent=user_agent,
        )
        self._shared_session = session
        self._local = threading.local()

    def _build_session(self) -> requests.Session:
        # central place to configure http behavior like headers
        s = requests.Session()
        s.headers.update({"User-Agent": self.config.user_agent})
        return s

    def _session(self) -> requests.Session:
        if self._shared_session is not None:
            return self._shared_session
        sess = getattr(self._local, "session", None)
        if sess is None:
            sess = self._build_session()
            self._local.session = sess
        return sess

    def _get(self, path: str, params: Sequence[Tuple[str, str]]) -> bytes:
        # one GET per call, the raw body goes back to the caller undecoded
        # commas stay literal so "tampa,us" and exclude lists read as the API documents them
        query = urlencode(params, safe=",")
        url = f"{self.config.base_url}{path}"
        logger.debug("GET %s %s", path, urlencode([p for p in params if p[0] != "appid"], safe=","))

        try:
            resp = self._session().get(url, params=query, timeout=self.config.timeout)
        except requests.RequestException as exc:
            # requests echoes the full url (appid included) in its messages
            detail = redact_appid(str(exc))
            raise TransportError(f"error getting data from {path}: {detail}") from exc

        if resp.status_code >= 400:
            snippet = (resp.text or "")[:300]
            raise TransportError(f"HTTP {resp.status_code} from {path}. Body: {snippet}")

        logger.debug("GET %s -> %d (%d bytes)", path, resp.status_code, len(resp.content))
        return resp.content

    def current(self, location: str, units: str) -> bytes:
        validate_location(location)
        validate_units(units)
        return self._get(
            "/data/2.5/weather",
            [("q", location), ("units", units), ("appid", self.config.api_key)],
        )

    def geocode(self, location: str) -> bytes:
        validate_location(location)
        return self._get(
            "/geo/1.0/direct",
            [("q", location), ("limit", "1"), ("appid", self.config.api_key)],
        )

    def forecast(self, lat: float, lon: float, units: str, exclude: Iterable[str] = ()) -> bytes:
        validate_units(units)
        params = [
            ("lat", f"{lat:.2f}"),
            ("lon", f"{lon:.2f}"),
            ("units", units),
            ("appid", self.config.api_key),
        ]
        timeframes = filter_exclude(exclude)
        if timeframes:
            params.append(("exclude", ",".join(timeframes)))
        return self._get("/data/2.5/onecall", params)
