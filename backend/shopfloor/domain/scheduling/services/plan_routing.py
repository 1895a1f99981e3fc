"""
Plan routing expansion.

A production plan stores its machine routing as a JSON document keyed by
process stage::

    {
        "bunching": {"machine": "BM-001", "sequence": 1, "estimatedTime": 2.5},
        "extruder": [{"machine": "EXT-001", "sequence": 2, "estimatedTime": 1.2}],
        "laying": {...},
        "finalExtruder": {...}
    }

This module flattens such a document into Operations and knows the machine
catalog (types, rated capacity and default setup/cleanup times).
"""

import json
import math
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from ...shared.exceptions import RoutingParseError
from ..entities.operation import Operation

DEFAULT_SETUP_HOURS = 1.0
DEFAULT_CLEANUP_HOURS = 0.5

# routing document key -> machine type, in process order
ROUTING_STAGES: tuple[tuple[str, str], ...] = (
    ("bunching", "bunching"),
    ("extruder", "extruder"),
    ("laying", "laying"),
    ("finalExtruder", "final_extruder"),
)


@dataclass(frozen=True)
class MachineType:
    key: str
    name: str
    machines: tuple[str, ...]
    capacity_per_hour: float
    setup_hours: float = DEFAULT_SETUP_HOURS
    cleanup_hours: float = DEFAULT_CLEANUP_HOURS


class MachineCatalog:
    """Known machine types and the machines belonging to them."""

    def __init__(self, machine_types: list[MachineType]) -> None:
        self._types = {mt.key: mt for mt in machine_types}

    @classmethod
    def default(cls) -> "MachineCatalog":
        return cls(
            [
                MachineType("bunching", "Bunching Machine", ("BM-001",), 5000),
                MachineType("extruder", "Extruder Machine", ("EXT-001",), 10800),
                MachineType("laying", "Laying Machine", ("LAY-001",), 5000, setup_hours=0.5),
                MachineType("final_extruder", "Final Extruder", ("FEXT-001",), 3000),
            ]
        )

    def __contains__(self, machine_id: object) -> bool:
        return any(machine_id in mt.machines for mt in self._types.values())

    def __iter__(self):
        for mt in self._types.values():
            yield from mt.machines

    def __len__(self) -> int:
        return sum(len(mt.machines) for mt in self._types.values())

    def get(self, key: str) -> MachineType | None:
        return self._types.get(key)

    def run_hours(self, machine_type: str, quantity: float) -> float:
        """Run time for ``quantity`` on a machine type, rounded up to 0.01 h."""
        mt = self._types.get(machine_type)
        if mt is None or mt.capacity_per_hour <= 0:
            raise KeyError(f"Unknown machine type: {machine_type}")
        return math.ceil(quantity / mt.capacity_per_hour * 100) / 100


def parse_routing(plan_id: str, raw: str | Mapping[str, Any] | None) -> dict[str, Any]:
    """Decode a stored routing document."""
    if raw is None or raw == "":
        return {}
    if isinstance(raw, Mapping):
        return dict(raw)
    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise RoutingParseError(plan_id, f"routing is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise RoutingParseError(plan_id, "routing must be a JSON object")
    return data


def expand_plan_routing(
    plan_id: str,
    routing: str | Mapping[str, Any] | None,
    declared_start: datetime | None = None,
    *,
    catalog: MachineCatalog | None = None,
    product_code: str | None = None,
    priority: str | None = None,
) -> list[Operation]:
    """
    Flatten a plan routing document into Operations ordered by sequence.

    Duration is setup + run + cleanup hours. Setup and cleanup fall back to the
    catalog defaults of the stage's machine type when the routing entry does not
    carry them; run time falls back to the quantity at the type's rated capacity.
    The plan's product code and priority are stamped on every operation.
    """
    document = parse_routing(plan_id, routing)
    if catalog is None:
        catalog = MachineCatalog.default()
    plan_fields = {"product_code": product_code, "priority": priority}

    operations: list[Operation] = []
    for key, machine_type in ROUTING_STAGES:
        entries = document.get(key)
        if not entries:
            continue
        if isinstance(entries, Mapping):
            entries = [entries]
        if not isinstance(entries, list):
            raise RoutingParseError(plan_id, f"stage '{key}' must be an object or list")
        for entry in entries:
            if not isinstance(entry, Mapping):
                raise RoutingParseError(plan_id, f"stage '{key}' has a non-object entry")
            operations.append(
                _to_operation(plan_id, catalog, machine_type, entry, declared_start, plan_fields)
            )

    return sorted(operations, key=lambda op: op.sequence)


def _to_operation(
    plan_id: str,
    catalog: MachineCatalog,
    machine_type: str,
    entry: Mapping[str, Any],
    declared_start: datetime | None,
    plan_fields: Mapping[str, Any],
) -> Operation:
    mt = catalog.get(machine_type)
    try:
        setup = _hours(entry.get("setupTime"), mt.setup_hours if mt else DEFAULT_SETUP_HOURS)
        cleanup = _hours(
            entry.get("cleanupTime"), mt.cleanup_hours if mt else DEFAULT_CLEANUP_HOURS
        )
        sequence = int(entry.get("sequence") or 0)
        quantity = entry.get("quantity")
        quantity = float(quantity) if quantity not in (None, "") else None
        run = _hours(entry.get("estimatedTime"), None)
        if run is None:
            run = _hours(entry.get("operationTime"), None)
        if run is None:
            run = catalog.run_hours(machine_type, quantity) if mt and quantity else 0.0
    except (KeyError, TypeError, ValueError) as e:
        raise RoutingParseError(plan_id, f"invalid {machine_type} entry: {e}") from e

    return Operation.from_components(
        setup_hours=setup,
        run_hours=run,
        cleanup_hours=cleanup,
        sequence=sequence,
        machine_id=entry.get("machine") or entry.get("machineId"),
        declared_start=declared_start,
        plan_id=plan_id,
        operation=entry.get("operation"),
        machine_type=machine_type,
        quantity=quantity,
        unit=entry.get("unit") or "meters",
        notes=entry.get("notes") or f"Auto-generated from plan {plan_id} using slot",
        **plan_fields,
    )


def _hours(value: Any, default: float | None) -> float | None:
    if value is None or value == "":
        return default
    return float(value)
