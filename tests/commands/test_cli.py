"""Tests for the moneta command line."""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from moneta.cli import app
from moneta.config import get_profile
from moneta.store.queries import get_account, list_logs
from moneta.store.schema import get_db_path

runner = CliRunner()


@pytest.fixture(autouse=True)
def moneta_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point XDG data and config at a temporary directory."""
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("MONETA_LANG", "en-US")
    monkeypatch.delenv("MONETA_LOG_LEVEL", raising=False)
    return tmp_path


@pytest.fixture
def initialized() -> None:
    result = runner.invoke(app, ["init"])
    assert result.exit_code == 0, result.output


@pytest.fixture
def setup_ledger(initialized: None) -> None:
    """An account with 1000.00 and an expense category."""
    for args in (
        ["accounts", "add", "Checking", "--type", "checking", "--balance", "1000"],
        ["categories", "add", "Food", "--type", "expense"],
        ["tags", "add", "trip"],
    ):
        result = runner.invoke(app, args)
        assert result.exit_code == 0, result.output


def add_expense(value: str = "150.00", *extra: str) -> None:
    args = ["transactions", "add", value, "15/01/2025", "--type", "expense", "--account", "1", "--category", "1"]
    result = runner.invoke(app, [*args, *extra])
    assert result.exit_code == 0, result.output


class TestInit:
    """Tests for moneta init."""

    def test_creates_database_and_config(self, moneta_home: Path) -> None:
        """Should create both files under the XDG directories."""
        result = runner.invoke(app, ["init"])

        assert result.exit_code == 0
        assert get_db_path() == moneta_home / "data" / "moneta" / "moneta.db"
        assert get_db_path().exists()
        assert (moneta_home / "config" / "moneta" / "config.toml").exists()

    def test_refuses_to_overwrite(self, initialized: None) -> None:
        """A second init should fail without --force."""
        result = runner.invoke(app, ["init"])

        assert result.exit_code == 1
        assert "Initialization failed" in result.output

    def test_migrate_keeps_data(self, setup_ledger: None) -> None:
        """--migrate should keep existing rows."""
        result = runner.invoke(app, ["init", "--migrate"])

        assert result.exit_code == 0
        assert get_account(1)["name"] == "Checking"

    def test_commands_need_database(self) -> None:
        """Commands should point at 'moneta init' when there is no database."""
        result = runner.invoke(app, ["accounts", "list"])

        assert result.exit_code == 1
        assert "moneta init" in result.output


class TestAccountCommands:
    """Tests for the accounts group."""

    def test_add_and_list(self, setup_ledger: None) -> None:
        """Should list the created account with its balance."""
        result = runner.invoke(app, ["accounts", "list"])

        assert result.exit_code == 0
        assert "Checking" in result.output
        assert "1000.00" in result.output

    def test_invalid_type(self, initialized: None) -> None:
        """Should list the accepted account types."""
        result = runner.invoke(app, ["accounts", "add", "Wallet", "--type", "piggy"])

        assert result.exit_code == 1
        assert "savings" in result.output

    def test_update_nothing(self, setup_ledger: None) -> None:
        """Should refuse an update without options."""
        result = runner.invoke(app, ["accounts", "update", "1"])

        assert result.exit_code == 1
        assert "Nothing to update" in result.output

    def test_show_missing(self, initialized: None) -> None:
        """Should report a missing account."""
        result = runner.invoke(app, ["accounts", "show", "5"])

        assert result.exit_code == 1
        assert "Account 5 not found." in result.output


class TestTransactionCommands:
    """Tests for the transactions group."""

    def test_expense_lowers_balance(self, setup_ledger: None) -> None:
        """A 150.00 expense should leave 850.00."""
        add_expense("150.00")

        assert get_account(1)["balance"] == "850.00"
        result = runner.invoke(app, ["accounts", "show", "1"])
        assert "850.00" in result.output

    def test_delete_restores_balance(self, setup_ledger: None) -> None:
        """Deleting the expense should restore the balance."""
        add_expense("150.00")

        result = runner.invoke(app, ["transactions", "delete", "1"])

        assert result.exit_code == 0
        assert get_account(1)["balance"] == "1000.00"

    def test_update_value(self, setup_ledger: None) -> None:
        """Changing the value should apply the difference."""
        add_expense("100")

        result = runner.invoke(app, ["transactions", "update", "1", "--value", "80"])

        assert result.exit_code == 0
        assert get_account(1)["balance"] == "920.00"

    def test_list_by_month(self, setup_ledger: None) -> None:
        """Should show transactions of the requested month only."""
        add_expense("10", "--tag", "1")

        january = runner.invoke(app, ["transactions", "list", "--month", "2025-01"])
        february = runner.invoke(app, ["transactions", "list", "--month", "2025-02"])

        assert "January 2025" in january.output
        assert "15/01/2025" in january.output
        assert "No records found." in february.output

    def test_amount_sign_follows_balance(self, setup_ledger: None) -> None:
        """A card expense raises what is owed, so it shows with a plus sign."""
        result = runner.invoke(app, ["cards", "add", "Gold", "--flag", "visa"])
        assert result.exit_code == 0, result.output

        card_args = ["transactions", "add", "40", "15/01/2025", "--type", "expense", "--source", "creditCard"]
        card = runner.invoke(app, [*card_args, "--card", "1", "--category", "1"])
        account = runner.invoke(
            app, ["transactions", "add", "40", "15/01/2025", "--type", "expense", "--account", "1", "--category", "1"]
        )

        assert card.exit_code == 0, card.output
        assert "Amount: +" in card.output
        assert "Amount: -" in account.output

    def test_invalid_amount(self, setup_ledger: None) -> None:
        """Should explain the accepted amount format."""
        result = runner.invoke(
            app,
            ["transactions", "add", "12.345", "2025-01-15", "--type", "expense", "--account", "1", "--category", "1"],
        )

        assert result.exit_code == 1
        assert "Invalid amount: 12.345" in result.output
        assert get_account(1)["balance"] == "1000.00"

    def test_invalid_date(self, setup_ledger: None) -> None:
        """Should reject dates it cannot read."""
        result = runner.invoke(
            app, ["transactions", "add", "10", "someday", "--type", "expense", "--account", "1", "--category", "1"]
        )

        assert result.exit_code == 1
        assert "Invalid date: someday" in result.output

    def test_rejection_is_audited(self, setup_ledger: None) -> None:
        """A rejected transaction should be logged as an alert."""
        result = runner.invoke(
            app, ["transactions", "add", "10", "2025-01-15", "--type", "expense", "--account", "99", "--category", "1"]
        )

        assert result.exit_code == 1
        assert "Account 99 not found." in result.output
        alert = list_logs()[0]
        assert alert["type"] == "alert"
        assert alert["detail"] == {"key": "ACCOUNT_NOT_FOUND", "id": 99}

    def test_message_language(self, setup_ledger: None, monkeypatch: pytest.MonkeyPatch) -> None:
        """Messages should follow the configured language."""
        monkeypatch.setenv("MONETA_LANG", "pt-BR")

        result = runner.invoke(app, ["transactions", "show", "42"])

        assert result.exit_code == 1
        assert "Transação 42 não encontrada." in result.output

    def test_delete_used_account(self, setup_ledger: None) -> None:
        """An account with transactions cannot be deleted."""
        add_expense("10")

        result = runner.invoke(app, ["accounts", "delete", "1"])

        assert result.exit_code == 1
        assert "1 transaction(s)" in result.output


class TestProfileAndLogs:
    """Tests for profile and logs commands."""

    def test_hide_values(self, setup_ledger: None) -> None:
        """Amounts should be masked when hide_values is on."""
        result = runner.invoke(app, ["profile", "update", "--hide-values"])
        assert result.exit_code == 0
        assert get_profile()["hide_values"] is True

        result = runner.invoke(app, ["accounts", "show", "1"])

        assert "1000.00" not in result.output
        assert "•••••" in result.output

    def test_language_stored_resolved(self, initialized: None) -> None:
        """A language preference should be stored as a supported tag."""
        result = runner.invoke(app, ["profile", "update", "--language", "es-MX"])

        assert result.exit_code == 0
        assert get_profile()["language"] == "es-ES"

    def test_invalid_currency(self, initialized: None) -> None:
        """Should refuse unknown currencies."""
        result = runner.invoke(app, ["profile", "update", "--currency", "GBP"])

        assert result.exit_code == 1
        assert "BRL" in result.output

    def test_logs_list_and_purge(self, setup_ledger: None) -> None:
        """Should list entries and purge them by date."""
        result = runner.invoke(app, ["logs", "--category", "account"])
        assert result.exit_code == 0
        assert "create" in result.output

        result = runner.invoke(app, ["logs", "--purge-before", "2099-01-01"])
        assert result.exit_code == 0
        assert "Removed 3 log entries." in result.output
        assert list_logs() == []

    def test_backup(self, setup_ledger: None, tmp_path: Path) -> None:
        """Should copy the database and config."""
        target = tmp_path / "backups"

        result = runner.invoke(app, ["backup", "--output", str(target)])

        assert result.exit_code == 0
        assert len(list(target.glob("moneta_*.db"))) == 1
        assert len(list(target.glob("config_*.toml"))) == 1
