"""
Command-line entry point for the Video CMS admin API.

Reads API_URL / API_TOKEN from .env (or flags) and prints JSON, which makes
it handy for checking a deployment without opening the Streamlit console.

Usage:
    python main.py companies
    python main.py users --company-id c1 --role admin
    python main.py user USER_ID
    python main.py questions VIDEO_ID
    python main.py question QUESTION_ID
    python main.py stats --period 7d
    python main.py check-domain someone@example.com
"""

import argparse
import json
import sys
from typing import List, Optional

from api.auth import static_token_provider
from api.client import ApiClient
from api.models.stats_schemas import StatsPeriod
from api.models.user_schemas import UserRole
from config.settings import settings
from services import QueryCache, QueryState, Services
from utils.logging_config import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Query the Video CMS admin API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--base-url",
        default=settings.API_URL,
        help=f"API base URL (default: {settings.API_URL})",
    )
    parser.add_argument(
        "--token",
        default=settings.API_TOKEN,
        help="Bearer token (default: API_TOKEN from .env)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Override LOG_LEVEL",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("companies", help="List companies")

    users = commands.add_parser("users", help="List users")
    users.add_argument("--company-id", default=None, help="Only users of this company")
    users.add_argument("--role", choices=[role.value for role in UserRole], default=None,
                       help="Only users with this role")

    user = commands.add_parser("user", help="Show one user")
    user.add_argument("user_id", help="User id")

    commands.add_parser("videos", help="List videos")

    questions = commands.add_parser("questions", help="List a video's questions")
    questions.add_argument("video_id", help="Video id")

    question = commands.add_parser("question", help="Show one question with its answers")
    question.add_argument("question_id", help="Question id")

    stats = commands.add_parser("stats", help="Dashboard statistics")
    stats.add_argument("--period", choices=[period.value for period in StatsPeriod],
                       default=StatsPeriod.LAST_30_DAYS.value, help="Aggregation window (default: 30d)")

    check = commands.add_parser("check-domain", help="Check whether an email's domain may sign up")
    check.add_argument("email", help="Email address to check")

    return parser


def run_query(args: argparse.Namespace, services: Services) -> QueryState:
    if args.command == "companies":
        return services.companies.companies()
    if args.command == "users":
        return services.users.users(company_id=args.company_id, role=args.role)
    if args.command == "user":
        return services.users.user(args.user_id)
    if args.command == "videos":
        return services.videos.videos()
    if args.command == "questions":
        return services.questions.video_questions(args.video_id)
    if args.command == "question":
        return services.questions.question(args.question_id)
    if args.command == "stats":
        return services.stats.stats(args.period)
    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    with ApiClient(args.base_url, static_token_provider(args.token),
                   timeout=settings.API_TIMEOUT_SECONDS) as api:
        services = Services(api, QueryCache())

        if args.command == "check-domain":
            result = services.auth.check_access(args.email)
            print(json.dumps(result.model_dump(by_alias=True), indent=2))
            return 0 if result.allowed else 1

        state = run_query(args, services)
        if state.is_error:
            error = state.error
            print(f"Error: {error.message}", file=sys.stderr)
            for field, message in error.field_errors().items():
                print(f"  {field}: {message}", file=sys.stderr)
            return 1

        print(json.dumps(state.data, indent=2))
        return 0


if __name__ == "__main__":
    sys.exit(main())
