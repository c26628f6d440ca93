"""Services (business logic) for mac-tidy-cli."""

from . import validator
from . import scanner_service
from . import remediation_service
from . import maintenance_service
from . import self_update_service
from . import update_sources
from . import update_gate
from . import update_executor

maintenance = maintenance_service

__all__ = [
    "maintenance",
    "validator",
    "scanner_service",
    "remediation_service",
    "maintenance_service",
    "self_update_service",
    "update_sources",
    "update_gate",
    "update_executor",
]
