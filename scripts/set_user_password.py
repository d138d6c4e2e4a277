"""Reset the password of an existing staff account."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

from werkzeug.security import generate_password_hash

# Ensure the project root is on sys.path so ``barberflow`` can be imported when the script is executed directly.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from barberflow import create_app
from barberflow.extensions import db
from barberflow.models import User


def set_password(email: str, password: str) -> bool:
    app = create_app()

    with app.app_context():
        user = User.query.filter_by(email=email.strip().lower()).first()
        if user is None:
            app.logger.error("No user with email %s", email)
            return False

        user.password_hash = generate_password_hash(password)
        db.session.commit()

        app.logger.info("Password for %s user '%s' has been reset.", user.role, user.email)
        return True


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reset a staff account password.")
    parser.add_argument("email", help="User email address")
    parser.add_argument("password", help="Plain-text password to hash and store")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    if not set_password(args.email, args.password):
        sys.exit(1)


if __name__ == "__main__":
    main()
