"""
Tests for the database setup script
"""

from setup_db import create_admin, main
from sqlalchemy.orm import Session

from tradejournal.db.session import make_engine
from tradejournal.models.user import User


def test_create_admin_creates_and_promotes(db, user):
    created = create_admin(db, "boss@example.com", "boss", "password123")
    assert created.role == "admin"

    promoted = create_admin(db, "trader@example.com", "ignored", None)
    assert promoted.id == user.id
    assert promoted.role == "admin"


def test_main_creates_tables_and_admin(tmp_path):
    url = f"sqlite:///{tmp_path / 'journal.db'}"

    assert main(["--database-url", url, "--admin-email", "boss@example.com", "--admin-password", "password123"]) == 0
    assert main(["--database-url", url, "--admin-email", "new@example.com"]) == 1

    with Session(make_engine(url)) as session:
        admins = session.query(User).filter(User.role == "admin").all()
    assert [a.email for a in admins] == ["boss@example.com"]
