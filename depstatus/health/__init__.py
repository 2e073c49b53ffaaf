"""Health subsystem — target registry, check orchestrator, aggregation."""

from .aggregate import Severity, is_healthy, severity
from .checker import CheckError, HealthChecker
from .models import CheckResult, Importance, Probe, Status, Target
from .registry import TargetRegistry
