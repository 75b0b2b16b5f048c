from dataclasses import dataclass
from collections import deque


@dataclass
class CheckMetrics:
    """Core link checking metrics"""
    links_ok: int = 0
    links_broken: int = 0
    links_skipped: int = 0
    pages_scanned: int = 0
    requests_sent: int = 0
    method_fallbacks: int = 0
    duplicates_ignored: int = 0
    avg_response_time: float = 0.0


class MetricsCollector:
    """Collects counters for one crawl"""

    def __init__(self):
        self.metrics = CheckMetrics()

        # Keep the last 100 response times for the average
        self.response_times: deque = deque(maxlen=100)

    def record_link(self, state: str, response_time: float = None):
        if state == 'OK':
            self.metrics.links_ok += 1
        elif state == 'BROKEN':
            self.metrics.links_broken += 1
        elif state == 'SKIPPED':
            self.metrics.links_skipped += 1

        if response_time is not None:
            self.response_times.append(response_time)
            self.metrics.avg_response_time = sum(self.response_times) / len(self.response_times)

    def record_page_scanned(self):
        self.metrics.pages_scanned += 1

    def record_duplicate(self):
        self.metrics.duplicates_ignored += 1

    def update_requests(self, requests_sent: int, fallbacks: int):
        self.metrics.requests_sent = requests_sent
        self.metrics.method_fallbacks = fallbacks
