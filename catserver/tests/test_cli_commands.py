"""Tests for the CLI command handler and the REPL command dispatcher."""

import json

import pytest

from catserver.adapters.cli.commands import CLICommandHandler
from catserver.adapters.store.memory import InMemoryCategoryStore
from catserver.core.dispatcher import Dispatcher
from catserver.core.protocol_service import ProtocolService
from catserver.main import execute_cli_command
from catserver.tests.fakes import FakeProtocolPort


@pytest.fixture
def handler() -> CLICommandHandler:
    return CLICommandHandler(ProtocolService(Dispatcher(InMemoryCategoryStore())))


class TestCLICommandHandler:
    def test_list_categories(self, handler: CLICommandHandler) -> None:
        result = handler.list_categories()

        assert result["status"] == "success"
        assert result["operation"] == "list"
        assert result["response"]["status"] == "1 Ok"
        assert len(json.loads(result["response"]["body"])) == 3

    def test_list_text_format(self, handler: CLICommandHandler) -> None:
        result = handler.list_categories(output_format="text")
        assert result["message"].splitlines() == [
            "Status: 1 Ok",
            "Categories (3):",
            "  1: Beverages",
            "  2: Condiments",
            "  3: Confections",
        ]

    def test_add_and_show(self, handler: CLICommandHandler) -> None:
        added = handler.add_category("Spices")
        assert added["response"]["status"] == "2 Created"

        shown = handler.show_category(4, output_format="text")
        assert shown["message"] == "Status: 1 Ok\nCategory 4: Spices"

    def test_rename(self, handler: CLICommandHandler) -> None:
        result = handler.rename_category(1, "Drinks")
        assert result["response"] == {"status": "3 Updated", "body": "Updated"}
        assert json.loads(handler.show_category(1)["response"]["body"])["name"] == "Drinks"

    def test_remove_missing_is_error(self, handler: CLICommandHandler) -> None:
        result = handler.remove_category(9999, output_format="text")
        assert result["status"] == "error"
        assert result["message"] == "Status: 5 not found"

    def test_echo_text(self, handler: CLICommandHandler) -> None:
        result = handler.echo("hello", output_format="text")
        assert result["message"] == "Status: 1 Ok\nBody: hello"

    def test_raw_request_skips_client_validation(self, handler: CLICommandHandler) -> None:
        result = handler.raw_request({"method": "read", "path": "/api/categories"})
        assert result["status"] == "error"
        assert result["response"]["status"] == "4 missing method, missing date"

    def test_requests_carry_current_date(self) -> None:
        fake = FakeProtocolPort()
        CLICommandHandler(fake).show_category(2)
        request = fake.last_request
        assert request["method"] == "read"
        assert request["path"] == "/api/categories/2"
        assert isinstance(request["date"], int)


class TestExecuteCLICommand:
    def test_dispatches_add(self, handler: CLICommandHandler) -> None:
        result = execute_cli_command(handler, "add", {"name": "Dairy"})
        assert json.loads(result["response"]["body"]) == {"cid": 4, "name": "Dairy"}

    def test_raw_strips_format(self, handler: CLICommandHandler) -> None:
        result = execute_cli_command(
            handler,
            "raw",
            {"method": "echo", "date": 1700000000, "body": "x", "format": "json"},
        )
        assert result["response"] == {"status": "1 Ok", "body": "x"}

    def test_missing_parameter(self, handler: CLICommandHandler) -> None:
        with pytest.raises(ValueError) as exc_info:
            execute_cli_command(handler, "rename", {"cid": 1})
        assert "name" in str(exc_info.value)

    def test_unknown_command(self, handler: CLICommandHandler) -> None:
        with pytest.raises(ValueError) as exc_info:
            execute_cli_command(handler, "drop", {})
        assert "Unknown command" in str(exc_info.value)

    def test_arguments_must_be_object(self, handler: CLICommandHandler) -> None:
        with pytest.raises(ValueError):
            execute_cli_command(handler, "list", [])  # type: ignore[arg-type]
