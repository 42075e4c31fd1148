from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

# Findings listed per rule in the Markdown report; the JSON report has all of them.
_MARKDOWN_FINDINGS = 10


def _ensure_backend_on_path() -> None:
    backend_dir = Path(__file__).resolve().parents[1]
    if str(backend_dir) not in sys.path:
        sys.path.insert(0, str(backend_dir))


def _load_json(path: Path):
    with path.open() as handle:
        return json.load(handle)


def _parse_dataset_arg(value: str) -> tuple[str, Path]:
    name, sep, path = value.partition("=")
    if not sep or not name.strip() or not path.strip():
        raise argparse.ArgumentTypeError(f"Expected TEMPLATE=PATH, got {value!r}")
    return name.strip(), Path(path.strip())


def _load_datasets(pairs: list[tuple[str, Path]]) -> dict[str, object]:
    from common.compliance import TemplateName

    known = {t.value for t in TemplateName}
    datasets: dict[str, object] = {}
    for name, path in pairs:
        if name not in known:
            raise SystemExit(f"Unknown template {name!r}; expected one of: {', '.join(sorted(known))}")
        if not path.exists():
            raise SystemExit(f"Dataset file not found: {path}")
        datasets[name] = _load_json(path)
    return datasets


def _write_markdown(report, out_path: Path) -> None:
    lines = [
        f"# Compliance Analysis {report.run_id}",
        "",
        f"Generated at: {report.generated_at.isoformat()}",
        "",
        "## Totals",
    ]
    for status, count in report.totals.items():
        lines.append(f"- {status.value}: {count}")
    lines.append("")
    lines.append("## Tests")
    for outcome in report.outcomes:
        lines.append("")
        lines.append(f"### {outcome.rule_id}: {outcome.status.value}")
        if outcome.reason:
            lines.append(f"- Reason: {outcome.reason}")
        if outcome.config:
            lines.append(f"- Config: {json.dumps(outcome.config, sort_keys=True)}")
        result = outcome.result
        if result is None:
            continue
        lines.append(f"- Findings: {len(result.summary)} ({len(result.results)} records)")
        lines.append(f"- Row issues: {len(result.errors)}")
        for entry in result.summary[:_MARKDOWN_FINDINGS]:
            lines.append(f"  - {json.dumps(entry.model_dump(mode='json'), sort_keys=True)}")
        if len(result.summary) > _MARKDOWN_FINDINGS:
            lines.append(f"  - ... {len(result.summary) - _MARKDOWN_FINDINGS} more")
    out_path.write_text("\n".join(lines) + "\n")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Run compliance tests over JSON template datasets and write JSON/MD reports."
    )
    parser.add_argument(
        "--dataset",
        action="append",
        type=_parse_dataset_arg,
        required=True,
        metavar="TEMPLATE=PATH",
        help='Template dataset as a JSON array of records, e.g. "Sales Register=sales.json" (repeatable).',
    )
    parser.add_argument(
        "--rule",
        action="append",
        dest="rules",
        default=None,
        help="Test id to run (repeatable). Defaults to every test the datasets allow.",
    )
    parser.add_argument(
        "--config",
        default=None,
        help='JSON file of per-test overrides: {"<test id>": {"threshold": 10}}.',
    )
    parser.add_argument("--out", default=None, help="Write the JSON report here (default: stdout).")
    parser.add_argument("--markdown", default=None, help="Also write a Markdown report here.")
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Stop at the first test that cannot be evaluated.",
    )
    args = parser.parse_args(argv)

    _ensure_backend_on_path()
    from common.compliance import ClientRulesConfig, RuleExecutionError, RulesRunner, UnknownRuleError
    from common.compliance.settings import configure_logging, get_settings

    configure_logging(get_settings())

    datasets = _load_datasets(args.dataset)
    client_config = ClientRulesConfig()
    if args.config:
        client_config = ClientRulesConfig(rules=_load_json(Path(args.config)))

    try:
        report = RulesRunner().run(
            datasets,
            rule_ids=args.rules,
            client_config=client_config,
            raise_on_error=args.strict,
        )
    except (UnknownRuleError, RuleExecutionError) as exc:
        print(str(exc), file=sys.stderr)
        return 1

    payload = json.dumps(report.model_dump(mode="json"), indent=2)
    if args.out:
        Path(args.out).write_text(payload)
    else:
        print(payload)
    if args.markdown:
        _write_markdown(report, Path(args.markdown))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
