from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path


def _ensure_backend_on_path() -> None:
    backend_dir = Path(__file__).resolve().parents[1]
    if str(backend_dir) not in sys.path:
        sys.path.insert(0, str(backend_dir))


def _load_json(path: Path):
    with path.open() as handle:
        return json.load(handle)


def _write_markdown(report, out_path: Path) -> None:
    title = report.group_id or "group"
    lines = [
        f"# Settlement {title}",
        "",
        f"Generated at: {report.generated_at.isoformat()}",
        f"Tolerance: {report.tolerance}",
        "",
        "## Net balances",
    ]
    for entry in report.net_balances:
        lines.append(f"- {entry.member}: {entry.balance}")
    lines.append("")
    lines.append("## Suggested payments")
    if not report.suggested_payments:
        lines.append("- Nothing to settle.")
    for payment in report.suggested_payments:
        lines.append(f"- {payment.debtor} pays {payment.creditor} {payment.amount}")
    lines.append("")
    lines.append(
        f"Total owed: {report.totals.total_owed} in {report.totals.payment_count} payment(s) "
        f"(detailed ledger had {report.totals.detailed_edge_count} debt(s))."
    )
    if report.notes:
        lines.append("")
        lines.append("## Notes")
        for note in report.notes:
            lines.append(f"- {note.key}: {note.message} | {note.values}")
    out_path.write_text("\n".join(lines))


def run_group_settlement_from_file(ledger_path: Path):
    _ensure_backend_on_path()
    from common.settlement_engine.config import get_settlement_config
    from common.settlement_engine.models import GroupLedger
    from common.settlement_engine.runner import SettlementRunner

    ledger = GroupLedger.model_validate(_load_json(ledger_path))
    return SettlementRunner(get_settlement_config()).run(ledger)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Compute balances and suggested payments for a group ledger snapshot.",
    )
    parser.add_argument(
        "--ledger",
        required=True,
        help="Path to a group ledger JSON file (active_members, expenses, payments).",
    )
    parser.add_argument(
        "--output-dir",
        default=None,
        help="Output directory for settlement files (defaults to the ledger's directory).",
    )
    args = parser.parse_args(argv)

    ledger_path = Path(args.ledger).resolve()
    if not ledger_path.exists():
        raise SystemExit(f"Ledger file not found: {ledger_path}")
    output_dir = Path(args.output_dir).resolve() if args.output_dir else ledger_path.parent
    output_dir.mkdir(parents=True, exist_ok=True)

    report = run_group_settlement_from_file(ledger_path)

    base_name = f"settlement_{report.group_id or ledger_path.stem}"
    out_json = output_dir / f"{base_name}.json"
    out_md = output_dir / f"{base_name}.md"
    out_json.write_text(json.dumps(report.model_dump(mode="json"), indent=2))
    _write_markdown(report, out_md)

    print(f"Wrote {out_json}")
    print(f"Wrote {out_md}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
