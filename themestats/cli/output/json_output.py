"""JSON output mode utilities."""

import json
from typing import Any

from rich.console import Console


def json_output(console: Console, data: Any) -> None:
    """Output data as formatted JSON."""
    console.print_json(json.dumps(data, default=str))
