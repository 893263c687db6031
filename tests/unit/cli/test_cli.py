"""Unit tests for the developer CLI."""

from contextlib import contextmanager

from typer.testing import CliRunner

from src.bookhub.core.security import pwd_context
from src.bookhub.core.services import BookService
from src.bookhub.entities.user import UserRepository
from src.cli import app
from src.cli import book_commands, user_commands
from src.cli.utils import load_sample_catalog

runner = CliRunner()


def _use_session(monkeypatch, session, *modules):
    @contextmanager
    def _database_session():
        yield session
        session.commit()

    for module in modules:
        monkeypatch.setattr(module, "database_session", _database_session)


class TestSampleCatalog:
    def test_catalog_is_valid(self):
        books = load_sample_catalog()

        assert len(books) >= 12
        assert len({book.isbn for book in books}) == len(books)
        assert len({book.genre for book in books}) >= 10

    def test_seeding_twice_inserts_once(self, session):
        books = load_sample_catalog()
        service = BookService(session)

        assert len(service.create_books(books)) == len(books)
        assert service.create_books(books) == []


class TestCommands:
    def test_help_lists_command_groups(self):
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        for group in ("db", "users", "books", "serve"):
            assert group in result.output

    def test_create_user_and_issue_token(self, monkeypatch, session, token_service):
        _use_session(monkeypatch, session, user_commands)
        monkeypatch.setattr(user_commands, "AccessTokenService", lambda: token_service)

        created = runner.invoke(
            app, ["users", "create", "Ada", "Ada@Example.com", "--password", "pw"]
        )
        assert created.exit_code == 0, created.output

        user = UserRepository(session).get_by_email("ada@example.com")
        assert user is not None
        assert pwd_context.verify("pw", user.password_hash)

        issued = runner.invoke(app, ["users", "token", "ada@example.com"])
        assert issued.exit_code == 0, issued.output
        token = issued.output.strip().splitlines()[-1]
        assert token_service.verify_access_token(token) == user.id

    def test_duplicate_user_fails(self, monkeypatch, session, user_factory):
        user_factory(email="ada@example.com")
        _use_session(monkeypatch, session, user_commands)

        result = runner.invoke(app, ["users", "create", "Ada", "ada@example.com", "-p", "pw"])

        assert result.exit_code == 1

    def test_token_for_unknown_email_fails(self, monkeypatch, session):
        _use_session(monkeypatch, session, user_commands)

        result = runner.invoke(app, ["users", "token", "nobody@example.com"])

        assert result.exit_code == 1

    def test_books_list(self, monkeypatch, session, book_factory):
        book_factory(title="Dune", genre="Science Fiction")
        book_factory(title="Emma", genre="Romance")
        _use_session(monkeypatch, session, book_commands)

        result = runner.invoke(app, ["books", "list", "--genre", "Romance"])

        assert result.exit_code == 0
        assert "Emma" in result.output
        assert "Dune" not in result.output
