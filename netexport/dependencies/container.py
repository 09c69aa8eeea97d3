"""Service container wiring the export controller to its collaborators."""

import os
import platform
import time
from typing import Any, Dict, Optional

from netexport.config import ConfigurationService
from netexport.config.log import get_logger
from netexport.downloads.sink import InMemoryDownloadSink
from netexport.dump.builder import LogDumpBuilder
from netexport.dump.collector import LiveDataCollector
from netexport.dump.policy import SecurityStrippingPolicy
from netexport.dump.sanitizer import SecurityStripper
from netexport.export.controller import ExportController

logger = get_logger(__name__)


class ServiceContainer:
    """Holds the single export controller and the collaborators it was built with."""

    def __init__(self, config_service: Optional[ConfigurationService] = None):
        self.config_service = config_service or ConfigurationService()
        self.app_config = self.config_service.get_config()
        self.started_at = time.time()

        self.collector = LiveDataCollector(max_events=self.app_config.max_events)
        self.stripper = SecurityStripper(self.app_config.redact_fields)
        self.policy = SecurityStrippingPolicy(self.app_config.security_stripping)
        self.sink = InMemoryDownloadSink(max_bytes=self.app_config.max_download_bytes)
        self.builder = LogDumpBuilder(self.collector, self.stripper, poll_timeout=self.app_config.poll_timeout)
        self.controller = ExportController(self.builder, self.policy, self.sink)

        self.collector.register_poller('service_info', self._poll_service_info)
        logger.info('Service container initialized', security_stripping=self.policy.get())

    async def _poll_service_info(self) -> Dict[str, Any]:
        return {
            'pid': os.getpid(),
            'platform': platform.platform(),
            'uptime_seconds': round(time.time() - self.started_at, 3),
            'captured_events': len(self.collector.events()),
        }

    async def close(self) -> None:
        """Let in-flight dump builds report back before shutdown."""
        await self.builder.wait_pending()


def build_service_container(config_service: ConfigurationService) -> ServiceContainer:
    return ServiceContainer(config_service)
