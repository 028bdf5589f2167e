"""CLI entrypoint: resolve the display payload once, or serve it over HTTP."""

from __future__ import annotations

import argparse
import dataclasses
import logging
from datetime import datetime, timezone

from magtag_gateway.gateway import collect_documents, resolve_display
from magtag_gateway.schemas import DisplayPayloadOut
from magtag_gateway.settings import GatewaySettings, get_settings, load_settings


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="magtag-gateway",
        description="Resolve what the e-ink display should show for an NHL team.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    parser.add_argument(
        "-t",
        "--team",
        type=int,
        help="NHL team id (defaults to DEFAULT_TEAM_ID).",
    )
    parser.add_argument(
        "-l",
        "--line",
        "--today-file",
        dest="today_file",
        type=str,
        help="Read today's schedule (with linescore) from this JSON file.",
    )
    parser.add_argument(
        "-n",
        "--next",
        "--next-file",
        dest="next_file",
        type=str,
        help="Read the next-game team document from this JSON file.",
    )
    parser.add_argument(
        "--now",
        type=str,
        help="Resolve as of this ISO-8601 instant instead of the current time.",
    )
    parser.add_argument(
        "--serve",
        action="store_true",
        help="Serve the HTTP API on PORT instead of printing one payload.",
    )
    return parser.parse_args(argv)


def _resolve_now(raw: str | None) -> datetime:
    if not raw:
        return datetime.now(timezone.utc)
    try:
        parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError as exc:
        raise SystemExit(f"--now must be an ISO-8601 timestamp: {raw}") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _apply_overrides(settings: GatewaySettings, args: argparse.Namespace) -> GatewaySettings:
    overrides = {}
    if args.today_file:
        overrides["today_file"] = args.today_file
    if args.next_file:
        overrides["next_file"] = args.next_file
    return dataclasses.replace(settings, **overrides) if overrides else settings


def _serve(settings: GatewaySettings, verbose: bool) -> None:
    import uvicorn

    from magtag_gateway.main import app

    app.dependency_overrides[get_settings] = lambda: settings
    logging.info("Starting on port %s", settings.port)
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=settings.port,
        log_level="debug" if verbose else "info",
    )


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    settings = _apply_overrides(load_settings(), args)
    if args.serve:
        _serve(settings, args.verbose)
        return

    team_id = args.team if args.team is not None else settings.default_team_id
    now = _resolve_now(args.now)
    logging.info("Resolving team_id=%s now=%s", team_id, now.isoformat())
    documents = collect_documents(team_id, settings)
    payload = resolve_display(documents, team_id, settings, now)
    print(DisplayPayloadOut(**dataclasses.asdict(payload)).model_dump_json(by_alias=True))


if __name__ == "__main__":
    main()
