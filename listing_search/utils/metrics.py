"""
Routing Metrics Tracking Module

Module to collect and emit structured logging of road-distance lookup metrics
for the Nearby Listing Search application.

This module defines the RoutingMetrics class, which keeps counters for:
  - total lookups requested: every call made to a road-distance collaborator
  - successful lookups: lookups that resolved to a finite distance
  - failed lookups: network errors, bad responses, no route, bad input
  - missing credential lookups: lookups short-circuited because no API key was configured

Failures and missing credentials both surface to the caller as an unreachable
(+inf) distance. Keeping them apart here is what lets an operator tell
"the routing key is not configured" from "nothing is nearby".

Lookups run on worker threads, so counters are updated through `record()`,
which holds a lock.

Attributes:
    routing_metrics: Global instance of RoutingMetrics shared by every client that
                     is not handed its own instance.

Usage:
    ```python
    from listing_search.utils.metrics import routing_metrics

    routing_metrics.record("success")
    routing_metrics.log_metrics()
    ```
"""

import threading
from typing import Dict

from .logger import logger

OUTCOMES = ("success", "failure", "missing_credential")


class RoutingMetrics:
    """Track road-distance lookup metrics"""
    def __init__(self):
        self._lock = threading.Lock()
        self.total_requests:int = 0
        self.successful_requests:int = 0
        self.failed_requests:int = 0
        self.missing_credential:int = 0

    def record(self, outcome: str) -> None:
        if outcome not in OUTCOMES:
            raise ValueError(f"Unknown lookup outcome: {outcome}")
        with self._lock:
            self.total_requests += 1
            if outcome == "success":
                self.successful_requests += 1
            elif outcome == "failure":
                self.failed_requests += 1
            else:
                self.missing_credential += 1

    def snapshot(self) -> Dict[str, int]:
        with self._lock:
            return {
                "total_requests": self.total_requests,
                "successful_requests": self.successful_requests,
                "failed_requests": self.failed_requests,
                "missing_credential": self.missing_credential,
            }

    def reset(self) -> None:
        with self._lock:
            self.total_requests = 0
            self.successful_requests = 0
            self.failed_requests = 0
            self.missing_credential = 0

    def log_metrics(self):
        """Log current routing metrics"""
        metrics = self.snapshot()
        metrics["success_ratio"] = round(
            metrics["successful_requests"] / max(1, metrics["total_requests"]), 2
        )
        logger.info("Routing Metrics Summary", extra={"metrics": metrics})


routing_metrics = RoutingMetrics()
