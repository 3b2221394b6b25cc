"""KPI stat sink exported through Prometheus."""

import structlog
from prometheus_client import Counter

from vs_chatbot.core.ports import StatKpi

logger = structlog.get_logger(__name__)

KPI_EVENTS = Counter(
    "vs_chatbot_kpi_events_total",
    "KPI events recorded by the dialog orchestrator",
    ["kpi"],
)


class PrometheusStatSink:
    """Counts KPI events per KPI name. Never raises."""

    def __init__(self, counter: Counter = KPI_EVENTS) -> None:
        self.counter = counter

    async def record_event(self, kpi: StatKpi, connection_id: str) -> None:
        try:
            self.counter.labels(kpi=kpi.value).inc()
            logger.debug("kpi_recorded", kpi=kpi.value, connection_id=connection_id)
        except Exception as e:
            logger.warning("kpi_record_failed", kpi=kpi.value, error=str(e))
