from pathlib import Path

from click.testing import CliRunner

from swagger_report.cli import main

FIXTURES = Path(__file__).parent / "fixtures"


class TestCliRender:
    def test_render_swagger(self, tmp_path):
        output_file = tmp_path / "out" / "users.md"
        runner = CliRunner()
        result = runner.invoke(main, [
            "render", str(FIXTURES / "users.json"),
            "-o", str(output_file),
        ])

        assert result.exit_code == 0, result.output
        assert output_file.exists()
        assert output_file.read_text(encoding="utf-8").startswith("# User Service")
        assert "Report saved to" in result.output

    def test_render_with_options(self, tmp_path):
        output_file = tmp_path / "users.md"
        runner = CliRunner()
        result = runner.invoke(main, [
            "render", str(FIXTURES / "users.json"),
            "-o", str(output_file),
            "--order", "/api/user/{id}=1",
            "--ignore", "_app_id",
        ])

        assert result.exit_code == 0, result.output
        report = output_file.read_text(encoding="utf-8")
        assert "_app_id" not in report
        titles = [line for line in report.splitlines() if line.startswith("### ")]
        assert titles[0] == "### Get user"

    def test_render_with_config_file(self, tmp_path):
        config_file = tmp_path / "report.yaml"
        config_file.write_text("order:\n  /api/ghost: 1\nignored: [name]\n", encoding="utf-8")
        output_file = tmp_path / "users.md"
        runner = CliRunner()
        result = runner.invoke(main, [
            "render", str(FIXTURES / "users.json"),
            "-o", str(output_file),
            "-c", str(config_file),
        ])

        assert result.exit_code == 0, result.output
        report = output_file.read_text(encoding="utf-8")
        assert [l for l in report.splitlines() if l.startswith("### ")][0] == "### Haunted endpoint"
        assert "| name |" not in report

    def test_bad_order_option(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, [
            "render", str(FIXTURES / "users.json"),
            "-o", str(tmp_path / "users.md"),
            "--order", "/api/user/query",
        ])

        assert result.exit_code != 0
        assert "--order" in result.output

    def test_malformed_document(self, tmp_path):
        doc = tmp_path / "bad.json"
        doc.write_text("[1, 2, 3]", encoding="utf-8")
        output_file = tmp_path / "bad.md"
        runner = CliRunner()
        result = runner.invoke(main, ["render", str(doc), "-o", str(output_file)])

        assert result.exit_code == 1
        assert "document root must be a mapping" in result.output
        assert not output_file.exists()
