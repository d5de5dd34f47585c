"""
CLI tests using typer's CliRunner against a throwaway database.
"""
import json

from typer.testing import CliRunner

from adapters.cli.main import app

runner = CliRunner()


def invoke(*args, input=None):
    result = runner.invoke(app, list(args), input=input)
    assert result.exit_code == 0, result.output
    return result


class TestLogging:
    def test_log_list_and_stats(self, cli_env):
        invoke("log", "--date", "2024-05-01", "-i", "7", "-s", "Nausea", "-l", "Temporal",
               "-m", "Ibuprofen:400mg:total")
        result = invoke("list")
        assert "2024-05-01" in result.output
        assert "Ibuprofen" in result.output

        result = invoke("insights")
        assert "Nausea" in result.output
        assert "Ibuprofen" in result.output

        assert "Total logged" in invoke("stats").output

    def test_rest_and_day(self, cli_env):
        invoke("rest", "--date", "2024-05-02")
        result = invoke("day", "2024-05-02", "--filter", "Rest")
        assert "Rest" in result.output

    def test_invalid_intensity_fails(self, cli_env):
        result = runner.invoke(app, ["log", "-i", "11"])
        assert result.exit_code != 0

    def test_bad_relief_fails(self, cli_env):
        result = runner.invoke(app, ["log", "-m", "Ibuprofen:400mg:great"])
        assert result.exit_code != 0

    def test_edit_and_delete_by_prefix(self, cli_env):
        from factory import ServiceFactory
        from infrastructure.config import Settings

        invoke("log", "--date", "2024-05-01", "-i", "3")
        factory = ServiceFactory(Settings.from_env())
        factory.initialize()
        crisis_id = factory.crisis_repository.get_all()[0].id

        invoke("edit", crisis_id[:8], "-i", "9", "--notes", "changed")
        reread = ServiceFactory(Settings.from_env())
        reread.initialize()
        edited = reread.crisis_repository.get_by_id(crisis_id)
        assert (edited.intensity, edited.notes) == (9, "changed")

        assert "Deleted" in invoke("delete", crisis_id).output
        assert "No crisis" in invoke("delete", crisis_id).output


class TestCalendarAndProfile:
    def test_calendar(self, cli_env):
        invoke("log", "--date", "2024-05-01", "-i", "5")
        result = invoke("calendar", "2024", "5")
        assert "2024-05" in result.output
        assert "31" in result.output

    def test_onboard_and_profile(self, cli_env):
        assert "No profile" in invoke("profile").output
        invoke("onboard", input="Ana\n31\nChronic\n")
        result = invoke("profile")
        assert "Ana" in result.output
        assert "Chronic" in result.output


class TestBackup:
    def test_export_clear_import(self, cli_env, tmp_path):
        invoke("log", "--date", "2024-05-01", "-i", "5")
        target = tmp_path / "backup.json"
        invoke("export", "-o", str(target))
        assert json.loads(target.read_text())["version"] == 1

        invoke("clear", "--yes")
        assert "Nothing logged" in invoke("list").output

        assert "Imported 1 crises" in invoke("import", str(target), "--yes").output
        assert "2024-05-01" in invoke("list").output

    def test_invalid_import_fails(self, cli_env, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_text('{"version": 1}')
        result = runner.invoke(app, ["import", str(bad), "--yes"])
        assert result.exit_code == 1
        assert "Import failed" in result.output


def test_version():
    result = invoke("--version")
    assert "alivio v" in result.output
