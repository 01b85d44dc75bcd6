"""
Health Monitoring Module
========================

Process resource usage and artifact availability for the artifact server.
"""

import logging
import os
import time
from typing import Dict, Any, Optional

import psutil

from ..config.paths import ARTIFACTS, OutputPaths

logger = logging.getLogger(__name__)


class HealthMonitor:
    """
    Reports process memory, uptime and whether the pipeline outputs exist.
    """

    def __init__(self):
        self.start_time = time.time()
        self.memory_threshold_mb = 1024

    def check_system_health(self, paths: Optional[OutputPaths] = None) -> Dict[str, Any]:
        try:
            process = psutil.Process(os.getpid())
            memory_mb = process.memory_info().rss / 1024 / 1024
        except psutil.Error as e:
            logger.warning(f"⚠️ Could not read process memory: {e}")
            memory_mb = 0.0

        health_status: Dict[str, Any] = {
            'memory_usage_mb': round(memory_mb, 1),
            'uptime_seconds': round(time.time() - self.start_time, 1),
            'memory_threshold_exceeded': memory_mb > self.memory_threshold_mb,
            'overall_status': 'healthy',
            'artifacts': {},
        }

        if paths is not None:
            for name in ARTIFACTS:
                health_status['artifacts'][name] = paths.existing(paths.artifact(name)) is not None

        if health_status['memory_threshold_exceeded']:
            health_status['overall_status'] = 'warning'
        elif paths is not None and not all(health_status['artifacts'].values()):
            health_status['overall_status'] = 'degraded'

        return health_status


_health_monitor: Optional[HealthMonitor] = None


def get_health_monitor() -> HealthMonitor:
    global _health_monitor
    if _health_monitor is None:
        _health_monitor = HealthMonitor()
    return _health_monitor
