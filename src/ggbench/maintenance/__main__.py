import argparse
import getpass
import logging
import os

from ggbench.constants import DEFAULT_ELO_SCORE
from ggbench.util.logging import configure_logging
from ggbench.util.postgres import managed_session

from .operations import create_admin, reset_ratings


def get_parser():
    parser = argparse.ArgumentParser(prog="python -m ggbench.maintenance")
    subparsers = parser.add_subparsers(dest="command", required=True)

    reset_parser = subparsers.add_parser(
        "reset-ratings", help="Reset every model's standings and delete all votes"
    )
    reset_parser.add_argument(
        "--default-score",
        type=int,
        default=int(os.environ.get("ELO_DEFAULT_SCORE", DEFAULT_ELO_SCORE)),
    )
    reset_parser.add_argument("--yes", action="store_true")

    admin_parser = subparsers.add_parser(
        "create-admin", help="Create or promote an admin account"
    )
    admin_parser.add_argument("--username", type=str, default="admin")
    admin_parser.add_argument("--password", type=str, default=None)

    return parser


def main(options):
    if options.command == "reset-ratings":
        if not options.yes:
            answer = input("This deletes every vote. Type 'reset' to continue: ")
            if answer.strip() != "reset":
                print("Aborted.")
                return 1

        with managed_session() as db:
            models, votes = reset_ratings(db, default_score=options.default_score)
        print(f"Reset {models} model(s) to {options.default_score}, deleted {votes} vote(s).")

    elif options.command == "create-admin":
        password = options.password or getpass.getpass("Password: ")
        with managed_session() as db:
            user = create_admin(db, options.username, password)
            username = user.username
        print(f"Admin {username!r} is ready.")

    return 0


if __name__ == "__main__":
    configure_logging(
        humanize=True,
        level=getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO),
    )
    parser = get_parser()
    options = parser.parse_args()
    raise SystemExit(main(options))
