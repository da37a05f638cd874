"""
Business logic for the weather fetch function.
"""

from serverless_tasks.dal import DocumentStore, ForecastSource
from serverless_tasks.handlers.utils.observability import count_metric, logger, tracer
from serverless_tasks.models.records import WeatherRecord


class WeatherService:
    """Copies the current forecast into the document store."""

    def __init__(self, forecast_source: ForecastSource, weather_store: DocumentStore):
        self.forecast_source = forecast_source
        self.weather_store = weather_store

    @tracer.capture_method
    def fetch_and_store(self) -> WeatherRecord:
        document = self.forecast_source.fetch()
        record = WeatherRecord.from_api_document(document)

        logger.info("Saving weather record", extra={"record_id": record.id})
        self.weather_store.put_item(record.to_item())

        count_metric("WeatherRecordStored")
        return record
