"""JSON envelope output for machine-readable CLI responses."""

import json
import sys
from typing import Any, Dict, NoReturn, Optional

import click


def emit_success(data: Dict[str, Any]) -> None:
    """Print a success envelope to stdout."""
    click.echo(json.dumps({"success": True, "data": data, "error": None}, indent=2))


def emit_error(
    message: str,
    *,
    code: str,
    remediation: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
) -> NoReturn:
    """Print an error envelope to stdout and exit with status 1."""
    data: Dict[str, Any] = {"error_code": code}
    if remediation:
        data["remediation"] = remediation
    if details:
        data["details"] = details
    click.echo(json.dumps({"success": False, "data": data, "error": message}, indent=2))
    sys.exit(1)
