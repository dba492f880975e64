"""Deployment resolution and sequencing services."""

from .executor import OperationExecutor, SubprocessOperationExecutor
from .guard import IdempotencyGuard, build_at_least, parse_build
from .planner import OperationPlanner, PlanOrderError, validate_order
from .probes import StateProbe, StaticStateProbe, WindowsStateProbe
from .renderers import ConfigFileWriter, render_ini, render_xml
from .runner import DeploymentRunner
from .validator import SpecValidator
from .variants import GENERATIONS, GenerationProfile, VariantResolver

__all__ = [
    "GENERATIONS",
    "ConfigFileWriter",
    "DeploymentRunner",
    "GenerationProfile",
    "IdempotencyGuard",
    "OperationExecutor",
    "OperationPlanner",
    "PlanOrderError",
    "SpecValidator",
    "StateProbe",
    "StaticStateProbe",
    "SubprocessOperationExecutor",
    "VariantResolver",
    "WindowsStateProbe",
    "build_at_least",
    "parse_build",
    "render_ini",
    "render_xml",
    "validate_order",
]
