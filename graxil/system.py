"""Host system information: CPU, memory, operating system and temperatures."""

from __future__ import annotations

import logging
import platform
import socket
from dataclasses import asdict, dataclass
from typing import Iterable, Optional

import psutil

logger = logging.getLogger(__name__)

_CPU_LABEL_WORDS = ("cpu", "core", "package", "processor")


@dataclass
class SystemInfo:
    """Snapshot of the host's load, memory and identity."""

    cpu_usage: float
    cpu_cores: int
    cpu_name: str
    memory_total: int
    memory_used: int
    memory_usage: float
    os_name: Optional[str] = None
    kernel_version: Optional[str] = None
    hostname: Optional[str] = None
    cpu_temperature: Optional[float] = None
    max_temperature: Optional[float] = None

    def to_dict(self) -> dict:
        """Plain dictionary suitable for JSON serialisation."""
        return asdict(self)


def pick_temperatures(
    readings: Iterable[tuple[str, Optional[float]]],
) -> tuple[Optional[float], Optional[float]]:
    """Pick the CPU temperature and the highest temperature from sensor readings.

    ``readings`` holds ``(label, temperature)`` pairs; a temperature of ``None``
    is ignored. The CPU temperature is the first reading whose label names a
    CPU, core, package or processor. Only positive readings count as a maximum.
    """
    cpu_temp: Optional[float] = None
    max_temp: Optional[float] = None
    highest = 0.0
    for label, temperature in readings:
        if temperature is None:
            continue
        lowered = label.lower()
        if cpu_temp is None and any(word in lowered for word in _CPU_LABEL_WORDS):
            cpu_temp = temperature
        if temperature > highest:
            highest = temperature
            max_temp = temperature
    return cpu_temp, max_temp


def _sensor_readings() -> list[tuple[str, Optional[float]]]:
    sensors = getattr(psutil, "sensors_temperatures", None)
    if sensors is None:
        return []
    try:
        groups = sensors() or {}
    except (OSError, RuntimeError) as exc:
        logger.debug("Temperature sensors unavailable: %s", exc)
        return []
    readings = []
    for chip, entries in groups.items():
        for entry in entries:
            label = f"{chip} {entry.label or ''}".strip()
            readings.append((label, entry.current))
    return readings


def _cpu_brand() -> str:
    try:
        with open("/proc/cpuinfo", encoding="utf-8", errors="replace") as handle:
            for line in handle:
                key, _, value = line.partition(":")
                if key.strip() == "model name" and value.strip():
                    return value.strip()
    except OSError:
        pass
    return platform.processor() or "Unknown"


def _os_name() -> Optional[str]:
    try:
        return platform.freedesktop_os_release().get("NAME") or platform.system() or None
    except OSError:
        return platform.system() or None


def collect_system_info() -> SystemInfo:
    """Gather current CPU, memory, OS and temperature information."""
    per_cpu = psutil.cpu_percent(percpu=True)
    cpu_usage = sum(per_cpu) / len(per_cpu) if per_cpu else 0.0
    memory = psutil.virtual_memory()
    usage = memory.used / memory.total * 100.0 if memory.total else 0.0
    cpu_temp, max_temp = pick_temperatures(_sensor_readings())
    return SystemInfo(
        cpu_usage=float(cpu_usage),
        cpu_cores=len(per_cpu),
        cpu_name=_cpu_brand() if per_cpu else "Unknown",
        memory_total=int(memory.total),
        memory_used=int(memory.used),
        memory_usage=usage,
        os_name=_os_name(),
        kernel_version=platform.release() or None,
        hostname=socket.gethostname() or None,
        cpu_temperature=cpu_temp,
        max_temperature=max_temp,
    )