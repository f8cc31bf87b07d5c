from unittest.mock import patch

import pytest

import cli
from domain.errors import StoreOpenError
from services.inventory import InventoryService


def test_storage_type_is_required():
    with pytest.raises(SystemExit) as excinfo:
        cli.main([])
    assert excinfo.value.code == 2


def test_invalid_storage_type_is_usage_error():
    with pytest.raises(SystemExit):
        cli.main(["--storage-type", "postgres"])


def test_args_override_settings():
    args = cli.build_parser().parse_args(
        ["--storage-type", "sqlite", "--file", "x.sqlite", "--port", "9000", "--no-notify"]
    )

    config = cli.settings_from_args(args)

    assert config.STORAGE_TYPE == "sqlite"
    assert config.STORAGE_FILE == "x.sqlite"
    assert config.PORT == 9000
    assert config.NOTIFY_ENABLED is False


@patch.object(cli.uvicorn, "run")
def test_main_runs_server_with_built_store(mock_run, tmp_path):
    path = tmp_path / "cli.json"

    assert cli.main(["--storage-type", "json", "--file", str(path), "--port", "55556"]) == 0

    app = mock_run.call_args.args[0]
    assert isinstance(app.state.inventory, InventoryService)
    assert mock_run.call_args.kwargs["port"] == 55556
    assert path.exists()
    app.state.inventory.close()


@patch.object(cli.uvicorn, "run")
@patch.object(cli, "build_inventory", side_effect=StoreOpenError("locked"))
def test_main_reports_store_failure(mock_build, mock_run):
    assert cli.main(["--storage-type", "json"]) == 1
    mock_run.assert_not_called()


@patch.object(cli.uvicorn, "run")
@patch.object(cli.logging, "basicConfig")
def test_main_configures_logging(mock_basic_config, mock_run):
    cli.main(["--storage-type", "volatile", "--no-notify"])

    assert mock_basic_config.call_args.kwargs["level"] == cli.Settings().LOG_LEVEL
    mock_run.call_args.args[0].state.inventory.close()
