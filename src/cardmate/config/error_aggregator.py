"""Error aggregation and reporting utilities."""

import logging
import threading
import time
import traceback
from dataclasses import dataclass, field
from datetime import datetime
from types import TracebackType
from typing import Dict, Optional, Set, Union

from cardmate.config.logging_config import ErrorAggregationConfig

StackTrace = Union[str, TracebackType, None]

@dataclass
class ErrorGroup:
    """Group of similar errors."""
    message: str
    count: int = 0
    first_seen: datetime = field(default_factory=datetime.now)
    last_seen: datetime = field(default_factory=datetime.now)
    services: Set[str] = field(default_factory=set)
    stack_traces: Set[str] = field(default_factory=set)

    def update(self, service: str, stack_trace: StackTrace = None) -> None:
        """Update error group with new occurrence."""
        self.count += 1
        self.last_seen = datetime.now()
        self.services.add(service)
        trace_str = _format_trace(stack_trace)
        if trace_str:
            self.stack_traces.add(trace_str)

def _format_trace(stack_trace: StackTrace) -> str:
    if stack_trace is None:
        return ""
    if isinstance(stack_trace, TracebackType):
        return ''.join(traceback.format_tb(stack_trace))
    return str(stack_trace)

class ErrorAggregator:
    """Aggregates and reports errors across services."""

    def __init__(self, config: ErrorAggregationConfig):
        """Initialize error aggregator.

        Args:
            config: Error aggregation configuration
        """
        self._errors: Dict[str, ErrorGroup] = {}
        self._lock = threading.Lock()
        self._config = config
        self._last_report = datetime.now()
        self.logger = logging.getLogger('error_aggregator')

        # Start reporting thread if enabled
        self._stop_flag = threading.Event()
        if config.enabled:
            self._report_thread = threading.Thread(target=self._periodic_report)
            self._report_thread.daemon = True
            self._report_thread.start()

    def add_error(
        self,
        message: str,
        service: str,
        stack_trace: StackTrace = None
    ) -> None:
        """Add error occurrence to aggregator.

        Args:
            message: Error message
            service: Service where error occurred
            stack_trace: Optional traceback object or formatted trace
        """
        if not self._config.enabled:
            return

        with self._lock:
            if message not in self._errors:
                self._errors[message] = ErrorGroup(message=message)
            error_group = self._errors[message]
            error_group.update(service, stack_trace)

            if (
                error_group.count >= self._config.error_threshold or
                (datetime.now() - error_group.first_seen).seconds >= self._config.time_threshold
            ):
                self._report_error_group(message, error_group)
                del self._errors[message]

    def pending(self) -> Dict[str, int]:
        """Counts of errors not yet reported, keyed by message."""
        with self._lock:
            return {message: group.count for message, group in self._errors.items()}

    def _report_error_group(self, message: str, error_group: ErrorGroup) -> None:
        """Report a single error group."""
        self.logger.error(
            f"{message} (occurrences: {error_group.count}, services: {', '.join(sorted(error_group.services))})"
        )
        for trace in error_group.stack_traces:
            if trace.strip():
                self.logger.debug(f"Stack trace:\n{trace}")

    def _periodic_report(self) -> None:
        """Periodically report all accumulated errors."""
        while not self._stop_flag.is_set():
            time.sleep(1)

            now = datetime.now()
            if (now - self._last_report).seconds >= self._config.report_interval:
                with self._lock:
                    for message, group in self._errors.items():
                        self._report_error_group(message, group)
                    self._errors.clear()
                    self._last_report = now

    def shutdown(self) -> None:
        """Shutdown aggregator and report remaining errors."""
        if not self._config.enabled:
            return

        self._stop_flag.set()
        if hasattr(self, '_report_thread'):
            self._report_thread.join()

        with self._lock:
            for message, group in self._errors.items():
                self._report_error_group(message, group)
            self._errors.clear()

# Global error aggregator instance
_error_aggregator: Optional[ErrorAggregator] = None

def init_error_aggregator(config: ErrorAggregationConfig) -> ErrorAggregator:
    """Initialize global error aggregator with configuration.

    Args:
        config: Error aggregation configuration
    """
    global _error_aggregator
    if _error_aggregator is not None:
        _error_aggregator.shutdown()
    _error_aggregator = ErrorAggregator(config)
    return _error_aggregator

def get_error_aggregator() -> Optional[ErrorAggregator]:
    """Get global error aggregator instance, if one was initialized."""
    return _error_aggregator

def aggregate_error(
    message: str,
    service: str,
    stack_trace: StackTrace = None
) -> None:
    """Add error to global aggregator.

    Library use without a configured aggregator only logs at debug level.
    """
    aggregator = get_error_aggregator()
    if aggregator is None:
        logging.getLogger('error_aggregator').debug(f"Unaggregated error in {service}: {message}")
        return
    aggregator.add_error(message, service, stack_trace)
