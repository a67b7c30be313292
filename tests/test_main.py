"""Command line entry point tests."""
import json

from main import main


class TestMain:
    """python main.py <workbook>"""

    def test_prints_json_result(self, chain_workbook, capsys):
        exit_code = main([str(chain_workbook)])

        assert exit_code == 0
        payload = json.loads(capsys.readouterr().out)
        assert payload["maxPain"] == {"strike": 3500, "pain": 55000.0}
        assert payload["summary"]["totalOI"] == 300 + 800 + 650 + 500 + 900 + 250
        assert payload["summary"]["totalDisplayStrikeCount"] == 3

    def test_band_arguments(self, chain_workbook, capsys):
        exit_code = main([str(chain_workbook), "--low", "3450", "--high", "3550"])

        assert exit_code == 0
        payload = json.loads(capsys.readouterr().out)
        assert [row["Strike"] for row in payload["displayStrikes"]] == [3500]

    def test_output_file(self, chain_workbook, tmp_path, capsys):
        output = tmp_path / "result.json"

        exit_code = main([str(chain_workbook), "--output", str(output)])

        assert exit_code == 0
        assert capsys.readouterr().out == ""
        assert json.loads(output.read_text())["maxPain"]["strike"] == 3500

    def test_missing_file_fails(self, tmp_path, capsys):
        exit_code = main([str(tmp_path / "missing.xlsx")])

        assert exit_code == 1
        assert capsys.readouterr().out == ""

    def test_inverted_band_fails(self, chain_workbook):
        assert main([str(chain_workbook), "--low", "4000", "--high", "3000"]) == 1

    def test_invalid_config_fails(self, chain_workbook, monkeypatch):
        monkeypatch.setenv("PUT_SHEET", "call")

        assert main([str(chain_workbook)]) == 1

    def test_non_numeric_band_env_fails(self, chain_workbook, monkeypatch, capsys):
        monkeypatch.setenv("DISPLAY_BAND_LOW", "low")

        assert main([str(chain_workbook)]) == 1
        assert capsys.readouterr().out == ""
