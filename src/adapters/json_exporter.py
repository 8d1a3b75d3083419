"""JSON export of migration plans.

- Lets other tools (CI checks, reviews) read exactly what a run would submit.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Sequence

from core.domain.models import MigrationPlan


def plans_to_payload(plans: Sequence[MigrationPlan]) -> dict[str, Any]:
    return {"migrations": [p.model_dump(mode="json") for p in plans]}


def dumps_plans(plans: Sequence[MigrationPlan]) -> str:
    return json.dumps(plans_to_payload(plans), ensure_ascii=False, indent=2, sort_keys=True) + "\n"


def export_plans_json(*, plans: Sequence[MigrationPlan], output_path: Path) -> Path:
    """Write plans to UTF-8 JSON with a stable layout."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(dumps_plans(plans), encoding="utf-8")
    return output_path
