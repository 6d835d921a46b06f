"""
Tests for the menu-import command.
"""
import io
import json

import pytest
from sqlalchemy import create_engine, func, select

from menu_import.models import MenuItem, Restaurant
from menu_import.scripts.import_restaurants import main


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite:///{tmp_path / 'menu_import.db'}"


def _write(tmp_path, document, name="restaurants.json"):
    path = tmp_path / name
    path.write_text(json.dumps(document) if not isinstance(document, str) else document)
    return str(path)


def _count(database_url, model):
    engine = create_engine(database_url)
    try:
        with engine.connect() as conn:
            return conn.execute(select(func.count()).select_from(model)).scalar()
    finally:
        engine.dispose()


class TestImportCommand:
    """Tests for command-line imports."""

    def test_import_file(self, tmp_path, database_url, restaurant_data_path, capsys):
        exit_code = main([restaurant_data_path, "--database-url", database_url, "--create-schema"])

        assert exit_code == 0
        output = json.loads(capsys.readouterr().out)
        assert output["success"] is True
        assert output["results"]["menu_items_created"] == 7
        assert _count(database_url, Restaurant) == 2
        assert _count(database_url, MenuItem) == 7

    def test_console_prints_events(self, tmp_path, database_url, capsys):
        path = _write(tmp_path, {"restaurants": [{"name": "Poppo's Cafe"}]})

        exit_code = main([path, "--console", "--database-url", database_url, "--create-schema"])

        assert exit_code == 0
        assert "[INFO] Created restaurant: Poppo's Cafe" in capsys.readouterr().out

    def test_reads_stdin(self, database_url, monkeypatch, capsys):
        stdin = io.TextIOWrapper(io.BytesIO(b'{"restaurants": [{"name": "Casa del Poppo"}]}'))
        monkeypatch.setattr("sys.stdin", stdin)

        exit_code = main(["-", "--database-url", database_url, "--create-schema"])

        assert exit_code == 0
        assert json.loads(capsys.readouterr().out)["results"]["restaurants_processed"] == 1

    def test_invalid_json_exit_code(self, tmp_path, database_url, capsys):
        path = _write(tmp_path, "{not json")

        exit_code = main([path, "--database-url", database_url, "--create-schema"])

        assert exit_code == 2
        output = json.loads(capsys.readouterr().out)
        assert output["success"] is False
        assert output["message"].startswith("Data validation error:")

    def test_validation_failure_exit_code(self, tmp_path, database_url, capsys):
        path = _write(tmp_path, {"restaurants": [{"name": "A", "menus": [{"name": "  "}]}]})

        exit_code = main([path, "--database-url", database_url, "--create-schema"])

        assert exit_code == 1
        assert json.loads(capsys.readouterr().out)["message"] == "Validation failed: Name can't be blank"
        assert _count(database_url, Restaurant) == 0

    def test_missing_file(self, tmp_path, database_url, capsys):
        exit_code = main([str(tmp_path / "missing.json"), "--database-url", database_url])

        assert exit_code == 2
        assert "cannot read" in capsys.readouterr().err
