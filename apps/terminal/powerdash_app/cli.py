"""CLI entrypoints for the PowerDash live dashboard, replay and diagnostics."""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import asdict
from pathlib import Path

from powerdash_core import (
    DiagnosticsExporter,
    PowerMonitor,
    ReplayRunner,
    build_doctor_payload,
    load_config,
)
from powerdash_core.config import log_level
from powerdash_core.logging_setup import configure_logging, install_crash_hooks
from powerdash_renderer import list_themes
from powerdash_renderer.ansi import CLEAR_SCREEN, CURSOR_HOME


def _print_json(data: object) -> None:
    print(json.dumps(data, indent=2, sort_keys=True, default=str))


def cmd_run(args: argparse.Namespace) -> int:
    cfg = load_config()
    if args.theme:
        cfg.ui.theme = args.theme
    if args.no_sudo:
        cfg.sampler.use_sudo = False

    install_crash_hooks()
    return PowerMonitor(cfg).run()


def cmd_replay(args: argparse.Namespace) -> int:
    cfg = load_config()
    out = None
    if not args.quiet:
        out = sys.stdout
        out.write(CURSOR_HOME + CLEAR_SCREEN)

    runner = ReplayRunner(theme_name=(args.theme or cfg.ui.theme), out=out, delay_s=args.delay)
    report = runner.run(
        Path(args.transcript),
        ioreg_path=(Path(args.ioreg) if args.ioreg else None),
        strict=not args.no_strict,
    )
    payload = asdict(report)
    payload["success"] = len(report.errors) == 0
    _print_json(payload)
    return 0 if not report.errors else 2


def cmd_doctor(args: argparse.Namespace) -> int:
    cfg = load_config()
    payload = build_doctor_payload(cfg)

    if args.export:
        exporter = DiagnosticsExporter()
        out_dir = Path(args.out_dir).expanduser().resolve() if args.out_dir else None
        bundle = exporter.bundle(cfg=cfg, doctor_payload=payload, output_dir=out_dir)
        payload["diagnostics_bundle"] = str(bundle)

    _print_json(payload)
    return 0


def cmd_themes(_args: argparse.Namespace) -> int:
    _print_json(list_themes())
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="powerdash", description="Live Mac power dashboard and tools")
    sub = parser.add_subparsers(dest="command", required=True)

    run_cmd = sub.add_parser("run", help="Run the live dashboard (needs sudo for powermetrics)")
    run_cmd.add_argument("--theme", choices=list_themes(), default=None)
    run_cmd.add_argument("--no-sudo", action="store_true", help="Launch powermetrics directly, e.g. when already root")
    run_cmd.set_defaults(func=cmd_run)

    replay_cmd = sub.add_parser("replay", help="Render frames from captured powermetrics output")
    replay_cmd.add_argument("--transcript", required=True, help="Path to captured `powermetrics -f text` output")
    replay_cmd.add_argument("--ioreg", default=None, help="Optional `ioreg -rn AppleSmartBattery` dump")
    replay_cmd.add_argument("--delay", type=float, default=0.0, help="Seconds to pause after each frame")
    replay_cmd.add_argument("--theme", choices=list_themes(), default=None)
    replay_cmd.add_argument("--quiet", action="store_true", help="Only print the JSON report")
    replay_cmd.add_argument("--no-strict", action="store_true", help="Skip delimiter/reading checks")
    replay_cmd.set_defaults(func=cmd_replay)

    doctor_cmd = sub.add_parser("doctor", help="Print diagnostics and tool availability")
    doctor_cmd.add_argument("--export", action="store_true", help="Export offline diagnostics bundle")
    doctor_cmd.add_argument("--out-dir", default=None, help="Optional output directory for diagnostics bundle")
    doctor_cmd.set_defaults(func=cmd_doctor)

    themes_cmd = sub.add_parser("themes", help="List dashboard themes")
    themes_cmd.set_defaults(func=cmd_themes)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    cfg = load_config()
    configure_logging(keep_files=cfg.diagnostics.keep_log_files, level=log_level(cfg))
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
