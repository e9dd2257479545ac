"""Command-line parsing of scripts/list_attachments.py."""

import argparse
import importlib.util
from pathlib import Path

import pytest

from src.core.attachments.schemas import OwnerType

SCRIPT = Path(__file__).resolve().parents[2] / "scripts" / "list_attachments.py"


@pytest.fixture(scope="module")
def cli():
    module_spec = importlib.util.spec_from_file_location("list_attachments", SCRIPT)
    module = importlib.util.module_from_spec(module_spec)
    module_spec.loader.exec_module(module)
    return module


class TestDeleteArgument:
    def test_valid_reference(self, cli):
        args = cli.parse_args(["--delete", "project:7:42"])
        assert args.delete == (OwnerType.PROJECT, 7, 42)

    def test_type_is_case_insensitive(self, cli):
        assert cli.attachment_ref("Task:3:9") == (OwnerType.TASK, 3, 9)

    @pytest.mark.parametrize(
        "value, message",
        [
            ("project:7", "expected TYPE:OWNER_ID:ID"),
            ("project:7:42:1", "expected TYPE:OWNER_ID:ID"),
            ("invoice:7:42", "unknown attachment type"),
            ("project:seven:42", "must be integers"),
        ],
    )
    def test_malformed_reference(self, cli, value, message):
        with pytest.raises(argparse.ArgumentTypeError, match=message):
            cli.attachment_ref(value)

    def test_malformed_reference_is_a_usage_error(self, cli, capsys):
        with pytest.raises(SystemExit) as exc_info:
            cli.parse_args(["--delete", "project:7"])
        assert exc_info.value.code == 2
        assert "--delete" in capsys.readouterr().err

    def test_project_requires_client(self, cli, capsys):
        with pytest.raises(SystemExit):
            cli.parse_args(["--project", "7"])
        assert "--project requires --client" in capsys.readouterr().err
