"""Rendering of instance details for the terminal."""

from __future__ import annotations

import json
from typing import Any

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from .models import ServiceInstance


def _format_value(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, sort_keys=True)


def write_instance_details(console: Console, instance: ServiceInstance) -> None:
    """Print the name, status, class/plan and parameters of ``instance``."""

    details = Table(box=None, show_header=False, pad_edge=False)
    details.add_column("Field", style="bold")
    details.add_column("Value")
    details.add_row("Name:", Text(instance.name))
    details.add_row("Namespace:", Text(instance.namespace))
    details.add_row("Status:", Text(instance.status_summary()))
    details.add_row("Class:", Text(instance.spec.class_external_name or ""))
    details.add_row("Plan:", Text(instance.spec.plan_external_name or ""))
    if instance.spec.external_id:
        details.add_row("External ID:", Text(instance.spec.external_id))
    console.print(details)

    console.print()
    console.print("Parameters:", style="bold")
    parameters = instance.spec.parameters or {}
    if not parameters:
        console.print("  No parameters defined")
    else:
        table = Table(box=box.SIMPLE, show_edge=False)
        table.add_column("Name")
        table.add_column("Value")
        for key in sorted(parameters):
            table.add_row(Text(key), Text(_format_value(parameters[key])))
        console.print(table)

    secret_refs = [
        item.get("secretKeyRef", {}) for item in instance.spec.parameters_from
    ]
    if secret_refs:
        console.print()
        console.print("Parameters from secrets:", style="bold")
        for ref in secret_refs:
            console.print(f"  {ref.get('name', '')}[{ref.get('key', '')}]", markup=False)
