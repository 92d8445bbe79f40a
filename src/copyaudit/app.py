from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional

from copyaudit.core.managers.config_manager import config_manager
from copyaudit.core.utils.configure_logging import configure_logger

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INVALID_INPUT = 1
EXIT_FETCH_FAILED = 2
EXIT_ERROR = 3

_STATUS_TO_EXIT = {200: EXIT_OK, 400: EXIT_INVALID_INPUT, 502: EXIT_FETCH_FAILED}

SEVERITY_ICONS = {"high": "🔴", "medium": "🟡", "low": "🔵"}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="copyaudit",
        description="Audit the written copy of a website for long sentences and passive voice."
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Overrides debug.level from settings.json (DEBUG, INFO, WARNING, ...)"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    audit = sub.add_parser("audit", help="Audit one website and print the report")
    audit.add_argument("url", help="Website to audit, e.g. example.com")
    audit.add_argument("--json", action="store_true", help="Print the raw JSON response")

    serve = sub.add_parser("serve", help="Start the HTTP API")
    serve.add_argument("--host", default=config_manager.get_nested("server.host", "0.0.0.0"))
    serve.add_argument("--port", type=int, default=config_manager.get_nested("server.port", 5000))
    serve.add_argument("--debug", action="store_true")

    return parser


def render_report(payload: dict) -> str:
    """Formats an audit response body for the console."""
    lines = [payload.get("message", "")]

    details = payload.get("details")
    if details:
        lines.append(f"  Pages scanned: {details.get('pagesScanned')}")
        lines.append(f"  Content found: {details.get('contentFound')}")
        lines.append(f"  Suggestion:    {details.get('suggestion')}")
        return "\n".join(lines)

    audit = payload.get("audit")
    if not audit:
        return "\n".join(lines)

    summary = audit["summary"]
    lines.append(
        f"  Issues: {summary['totalViolations']} | Pages: {summary['pagesCrawled']} | "
        f"Top issues: {', '.join(summary['topIssues']) or '-'}"
    )
    for index, violation in enumerate(audit["violations"], start=1):
        icon = SEVERITY_ICONS.get(violation["severity"], "•")
        lines.append(f"\n{index}. {icon} [{violation['type']}] {violation['page']}")
        lines.append(f"   \"{violation['text']}\"")
        lines.append(f"   → {violation['suggestion']}")
    return "\n".join(lines)


def run_audit(url: str, as_json: bool = False) -> int:
    from copyaudit.core.audit_service import AuditService

    response, status = AuditService().audit_site(url)
    payload = response.to_wire()
    print(json.dumps(payload, indent=2, ensure_ascii=False) if as_json else render_report(payload))
    return _STATUS_TO_EXIT.get(status, EXIT_ERROR)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    configure_logger(
        args.log_level or config_manager.get_nested("debug.level", "INFO"),
        module_specific_levels=config_manager.get_nested("debug.modules", {}),
        silenced_loggers=config_manager.get_nested("debug.silenced", {}),
    )

    if args.command == "audit":
        return run_audit(args.url, as_json=args.json)

    if args.command == "serve":
        from auditor.server.app import run_server

        run_server(args.host, args.port, debug=args.debug)
        return EXIT_OK

    return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
