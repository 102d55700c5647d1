import argparse
import json
from pathlib import Path
from typing import Any

import pydantic
import requests

from . import __version__
from .client import ApiError, HiringApiClient
from .config import Settings
from .env import load_env
from .models import Job
from .retry import RetryError
from .schema import validate_job_payload, validate_questions
from .service import ValidationError, score_job_answers


def _read_json(path_str: str) -> Any:
    input_path = Path(path_str)
    if not input_path.exists():
        raise SystemExit(f"Input file not found: {input_path}")
    with input_path.open("r", encoding="utf-8") as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as e:
            raise SystemExit(f"Invalid JSON in {input_path}: {e}")


def _client(args: argparse.Namespace) -> HiringApiClient:
    return HiringApiClient(args.url or Settings.from_env().api_url)


def cmd_serve(args: argparse.Namespace) -> None:
    import uvicorn

    from .api import create_app

    settings = Settings.from_env()
    host = args.host or settings.host
    port = args.port or settings.port
    app = create_app(settings=settings)
    print(f"{app.title} running on http://{host}:{port}")
    print(f"Environment: {settings.environment}")
    uvicorn.run(app, host=host, port=port, log_level=settings.log_level.lower())


def cmd_validate(args: argparse.Namespace) -> None:
    job = _read_json(args.input)
    errors = validate_job_payload(job)
    if not errors:
        errors = validate_questions(job["questions"])
    if errors:
        print("Invalid:")
        for e in errors:
            print(f" - {e}")
        raise SystemExit(2)
    print("Valid")


def cmd_score(args: argparse.Namespace) -> None:
    try:
        job = Job.model_validate(_read_json(args.job))
    except pydantic.ValidationError as e:
        raise SystemExit(f"Job file must be a stored job with question ids: {e}")
    application = _read_json(args.input)
    answers = application.get("answers") if isinstance(application, dict) else None
    try:
        _, total, maximum, breakdown = score_job_answers(job, answers)
    except ValidationError as e:
        print("Invalid:")
        for err in e.errors:
            print(f" - {err}")
        raise SystemExit(2)

    for item in breakdown:
        print(f"{item.points_earned:>7.2f} / {item.points_possible:<7.2f} {item.question_text}")
    print(f"Total: {total:.2f} / {maximum:.2f}")


def _exit_remote_error(e: Exception) -> None:
    if isinstance(e, ApiError):
        print(f"Request failed: {e.status_code} {e.error}")
        for detail in e.details:
            print(f" - {detail}")
    else:
        print(f"Request failed: {e}")
    raise SystemExit(1)


def cmd_submit(args: argparse.Namespace) -> None:
    application = _read_json(args.input)
    try:
        result = _client(args).submit_application(application)
    except (ApiError, RetryError, requests.RequestException) as e:
        _exit_remote_error(e)
    print(f"Application: {result['id']}")
    print(f"Score: {result['totalScore']} / {result['maxScore']}")


def cmd_jobs(args: argparse.Namespace) -> None:
    try:
        jobs = _client(args).list_jobs()
    except (ApiError, RetryError, requests.RequestException) as e:
        _exit_remote_error(e)
    if not jobs:
        print("No jobs posted.")
        return
    print(f"Found {len(jobs)} jobs:\n")
    for job in jobs:
        print(f"ID: {job['id']}")
        print(f"  Title: {job['title']}")
        print(f"  Customer: {job['customer']}")
        print(f"  Location: {job['location']}")
        print(f"  Questions: {len(job['questions'])}")
        print()


def cmd_applications(args: argparse.Namespace) -> None:
    try:
        applications = _client(args).list_applications(args.job_id, sort_by=args.sort_by)
    except (ApiError, RetryError, requests.RequestException) as e:
        _exit_remote_error(e)
    if not applications:
        print("No applications.")
        return
    for application in applications:
        print(
            f"{application['totalScore']:>7} / {application['maxScore']:<7} "
            f"{application['candidateName']} <{application['candidateEmail']}> "
            f"{application['submittedAt']}"
        )


def main(argv=None):
    load_env()
    parser = argparse.ArgumentParser(prog="hirescore", description="Job postings with automatically scored applications")
    parser.add_argument("--version", action="store_true", help="Show version")

    subparsers = parser.add_subparsers(dest="command")
    srv = subparsers.add_parser("serve", help="Run the HTTP API")
    srv.add_argument("--host", help="Bind address (default: HIRESCORE_HOST or 0.0.0.0)")
    srv.add_argument("--port", type=int, help="Port (default: HIRESCORE_PORT or 3000)")
    srv.set_defaults(func=cmd_serve)

    val = subparsers.add_parser("validate", help="Validate a job JSON and its questions")
    val.add_argument("--input", required=True, help="Path to job JSON input")
    val.set_defaults(func=cmd_validate)

    scr = subparsers.add_parser("score", help="Score an application JSON against a stored job JSON, offline")
    scr.add_argument("--job", required=True, help="Path to job JSON (as returned by the API, with question ids)")
    scr.add_argument("--input", required=True, help="Path to application JSON with answers")
    scr.set_defaults(func=cmd_score)

    sub = subparsers.add_parser("submit", help="Submit an application JSON to a running service")
    sub.add_argument("--input", required=True, help="Path to application JSON")
    sub.add_argument("--url", help="Service base URL (default: HIRESCORE_API_URL)")
    sub.set_defaults(func=cmd_submit)

    jbs = subparsers.add_parser("jobs", help="List jobs on a running service")
    jbs.add_argument("--url", help="Service base URL (default: HIRESCORE_API_URL)")
    jbs.set_defaults(func=cmd_jobs)

    aps = subparsers.add_parser("applications", help="List applications for a job on a running service")
    aps.add_argument("--job-id", required=True, help="Job ID")
    aps.add_argument("--sort-by", choices=["score", "date"], help="Sort order (default: score)")
    aps.add_argument("--url", help="Service base URL (default: HIRESCORE_API_URL)")
    aps.set_defaults(func=cmd_applications)

    args = parser.parse_args(argv)

    if args.version:
        print(__version__)
        return

    if hasattr(args, "func"):
        args.func(args)
        return

    parser.print_help()


if __name__ == "__main__":
    main()
