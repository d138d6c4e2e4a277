"""Flask extensions shared by the BarberFlow app."""
from __future__ import annotations

from flask_sqlalchemy import SQLAlchemy

# Pooled engine plus a session scoped to each app context; the session is
# removed (and any open transaction rolled back) on context teardown.
db = SQLAlchemy()
