#!/usr/bin/env python3
"""Seed an organization and its owner account, or change an organization's status."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from barberflow import create_app
from barberflow.errors import ApiError
from barberflow.extensions import db
from barberflow.provisioning import seed_organization, set_organization_status


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Provision BarberFlow organizations.")
    sub = parser.add_subparsers(dest="command", required=True)

    create = sub.add_parser("create", help="Create an organization with an owner account")
    create.add_argument("slug", help="Public slug, e.g. barberflow-model")
    create.add_argument("name", help="Display name")
    create.add_argument("owner_email")
    create.add_argument("owner_password")
    create.add_argument("--owner-name", default="Owner")

    status = sub.add_parser("status", help="Activate or suspend an organization")
    status.add_argument("slug")
    status.add_argument("status", choices=["active", "suspended"])
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    app = create_app()

    with app.app_context():
        try:
            if args.command == "create":
                organization, owner = seed_organization(
                    db.session,
                    slug=args.slug,
                    name=args.name,
                    owner_email=args.owner_email,
                    owner_password=args.owner_password,
                    owner_name=args.owner_name,
                )
                app.logger.info("Created organization %s with owner %s", organization.slug, owner.email)
            else:
                set_organization_status(db.session, args.slug, args.status)
        except ApiError as exc:
            app.logger.error("%s", exc.message)
            sys.exit(1)


if __name__ == "__main__":
    main()
