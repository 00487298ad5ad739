# dags/weather_conditions_dag.py
from __future__ import annotations
import os
from datetime import datetime, timedelta
from typing import List
from airflow.decorators import dag, task
from airflow.exceptions import AirflowFailException
from weathernow.client import WeatherAPIError
from weathernow.service import conditions

LOCATIONS: List[str] = [
    "Salt Lake City,UT,US",
    "Los Angeles,CA,US",
    "Boise,ID,US",
]
UNITS = "imperial"

@dag(
    dag_id="weather_conditions_report",
    start_date=datetime(2025, 1, 1),
    schedule="0 6 * * *",
    catchup=False,
    default_args={"owner": "weathernow", "retries": 1, "retry_delay": timedelta(minutes=2)},
    tags=["weather", "conditions"],
)
def weather_conditions_report():
    @task(pool="openweather", execution_timeout=timedelta(seconds=30))
    def fetch_conditions(location: str, units: str) -> dict:
        api_key = os.getenv("OPENWEATHER_API_KEY")
        if not api_key:
            raise AirflowFailException("OPENWEATHER_API_KEY not set in task environment")

        try:
            line = conditions(location, units, api_key)
        except WeatherAPIError as e:
            # message already carries the HTTP status or decode problem
            raise AirflowFailException(f"fetch_conditions({location}) failed: {e}") from e

        return {"location": location, "conditions": line}

    results = fetch_conditions.partial(units=UNITS).expand(location=LOCATIONS)

    @task
    def publish(rows: List[dict]) -> None:
        by = {r["location"]: r for r in rows}
        for location in LOCATIONS:
            print(f"{location}: {by[location]['conditions']}")

    publish(results)

dag = weather_conditions_report()
