"""CLI entrypoint for Elvia demos."""

from __future__ import annotations

from argparse import ArgumentParser
import sys

from elvia.demo.fixtures import SCENARIOS
from elvia.demo.runner import run_scenario
from elvia.observability.logging import configure_logging
from elvia.runtime import build_runtime
from elvia.scheduler.graduation import parse_date
from elvia.settings import get_app_settings


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(description="Run Elvia graduation engagement demos.")
    commands = parser.add_subparsers(dest="command", required=True)

    scenario = commands.add_parser("scenario", help="Run an in-process scenario.")
    scenario.add_argument("name", choices=sorted(SCENARIOS), help="Scenario to run.")

    serve = commands.add_parser("serve", help="Run the HTTP API.")
    serve.add_argument("--host", default="0.0.0.0")
    serve.add_argument("--port", default=3000, type=int)

    check = commands.add_parser("check", help="Run one graduation check.")
    check.add_argument("--date", default=None, help="Date to check (YYYY-MM-DD).")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_app_settings()

    if args.command == "scenario":
        result = run_scenario(SCENARIOS[args.name](), settings)
        for event in result.events:
            print(f"{event.timestamp.isoformat()} {event.event_type} student={event.student_id}")
        print(f"Scenario {args.name} finished for student {result.student_id}: {result.state}")
        return 0

    if args.command == "serve":
        import uvicorn

        uvicorn.run("elvia.api.app:create_app", factory=True, host=args.host, port=args.port)
        return 0

    configure_logging(settings.log_level, service=settings.service_name)
    try:
        on = parse_date(args.date)
    except ValueError as exc:
        print(str(exc), file=sys.stderr)
        return 2
    runtime = build_runtime(settings)
    try:
        graduating = runtime.trigger.check(on)
    finally:
        runtime.stop()
    for student in graduating:
        print(f"{student.id}\t{student.name}\t{student.title}")
    print(f"{len(graduating)} student(s) graduating on {on or runtime.trigger.today()}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
