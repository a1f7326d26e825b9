"""Describe the registered split methods for clients choosing how to divide an expense.

Run as a module to print the catalog:

    python -m common.settlement_engine.catalog --format markdown
"""

from __future__ import annotations

import argparse
import json
from typing import Any, Dict, List, Optional, Type

from pydantic import BaseModel, Field

from . import split_rules
from .split_rules.base import SplitRule

RESIDUAL_POLICY_TEXT = {
    "first_participant": "first participant in roster order",
    "first_listed": "first member listed in params",
    "none": "not redistributed (amounts must match the total exactly)",
}


class SplitParamField(BaseModel):
    name: str
    required: bool
    value_type: str = ""


class SplitMethodCatalogEntry(BaseModel):
    method_id: str
    method_title: str
    description: str = ""
    residual_policy: str
    residual_absorbed_by: str
    params: List[SplitParamField] = Field(default_factory=list)
    params_schema: Dict[str, Any] = Field(default_factory=dict)


def _params_fields(params_model: Type[BaseModel]) -> List[SplitParamField]:
    schema_props = params_model.model_json_schema().get("properties", {})
    fields = []
    for name, info in params_model.model_fields.items():
        prop = schema_props.get(name, {})
        value_type = prop.get("type", "")
        if value_type == "object":
            value_type = "mapping of member id to amount"
        fields.append(SplitParamField(name=name, required=info.is_required(), value_type=value_type))
    return fields


def describe_split_method(rule_cls: Type[SplitRule]) -> SplitMethodCatalogEntry:
    policy = getattr(rule_cls, "residual_policy", "none")
    return SplitMethodCatalogEntry(
        method_id=rule_cls.method_id,
        method_title=getattr(rule_cls, "method_title", ""),
        description=getattr(rule_cls, "description", ""),
        residual_policy=policy,
        residual_absorbed_by=RESIDUAL_POLICY_TEXT.get(policy, policy),
        params=_params_fields(rule_cls.params_model),
        params_schema=rule_cls.params_model.model_json_schema(),
    )


def build_catalog(rules: Optional[split_rules.SplitRuleRegistry] = None) -> List[SplitMethodCatalogEntry]:
    source = rules or split_rules.registry
    return sorted(
        (describe_split_method(source.get(method_id)) for method_id in source.ids()),
        key=lambda entry: entry.method_id,
    )


def render_markdown(entries: List[SplitMethodCatalogEntry]) -> str:
    lines = [
        "| Method | Params | Rounding residual |",
        "|---|---|---|",
    ]
    for entry in entries:
        params = ", ".join(
            f"`{p.name}`" + ("" if p.required else " (optional)") for p in entry.params
        ) or "none"
        lines.append(f"| `{entry.method_id}` | {params} | {entry.residual_absorbed_by} |")
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="List the registered expense split methods.")
    parser.add_argument(
        "--format",
        choices=("yaml", "json", "markdown"),
        default="yaml",
        help="Output format (default: yaml).",
    )
    args = parser.parse_args(argv)

    entries = build_catalog()
    if args.format == "markdown":
        print(render_markdown(entries))
        return

    payload = [entry.model_dump(exclude={"params_schema"}) for entry in entries]
    if args.format == "json":
        print(json.dumps(payload, indent=2))
    else:
        import yaml

        print(yaml.safe_dump(payload, sort_keys=False))


if __name__ == "__main__":
    main()
