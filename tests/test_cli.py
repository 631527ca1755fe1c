"""Tests for the extract-translations command line."""

import json

import yaml

from translation_extract.cli import main


class TestExtractTranslationsScript:
    """Tests for scripts/extract_translations.py."""

    def test_script_exists(self, repo_root):
        assert (repo_root / "scripts" / "extract_translations.py").is_file()

    def test_importable_with_main(self):
        from scripts.extract_translations import main as script_main
        assert script_main is main


class TestMain:
    """End-to-end CLI runs."""

    def test_success(self, sample_src_dir, tmp_i18n_dir, capsys):
        output = tmp_i18n_dir / "en.json"
        exit_code = main(["--input", str(sample_src_dir), "--output", str(output)])

        assert exit_code == 0
        summary = json.loads(capsys.readouterr().out)
        assert summary[0]["path"] == str(output)
        assert summary[0]["total"] == 6
        assert output.is_file()

    def test_flags(self, sample_src_dir, tmp_i18n_dir, capsys):
        output = tmp_i18n_dir / "en.json"
        exit_code = main([
            "-i", str(sample_src_dir),
            "-o", str(output),
            "--format", "namespaced-json",
            "--format-indentation", "  ",
            "--sort",
            "--clean",
            "--string-as-default-value", "",
        ])

        assert exit_code == 0
        text = output.read_text()
        assert text.startswith('{\n  "FOOTER"')
        assert json.loads(text)["HOME"]["ADMIN"] == ""

    def test_custom_marker_and_pipe(self, tmp_path, tmp_i18n_dir):
        src = tmp_path / "src"
        src.mkdir()
        (src / "page.html").write_text("<p i18n>Marked</p>{{ 'Piped' | t }}{{ 'Other' | translate }}")
        output = tmp_i18n_dir / "en.json"

        exit_code = main(["-i", str(src), "-o", str(output), "--marker", "i18n", "--pipe", "t"])

        assert exit_code == 0
        assert list(json.loads(output.read_text())) == ["Marked", "Piped"]

    def test_config_file_with_override(self, sample_src_dir, tmp_path, tmp_i18n_dir):
        output = tmp_i18n_dir / "en.json"
        config_path = tmp_path / "extract.yaml"
        with open(config_path, "w") as f:
            yaml.dump({"input": [str(sample_src_dir)], "output": [str(output)], "parsers": ["pipe"]}, f)

        exit_code = main(["--config", str(config_path), "--sort"])

        assert exit_code == 0
        assert list(json.loads(output.read_text())) == ["FOOTER.COPYRIGHT", "HOME.SUBTITLE"]

    def test_parse_error_exit_1(self, tmp_path, tmp_i18n_dir, capsys):
        src = tmp_path / "src"
        src.mkdir()
        (src / "broken.html").write_text("@if (a) { <p>open")

        exit_code = main(["-i", str(src), "-o", str(tmp_i18n_dir / "en.json")])

        assert exit_code == 1
        assert "broken.html" in capsys.readouterr().err

    def test_missing_input_exit_2(self, tmp_path, capsys):
        exit_code = main(["-i", str(tmp_path / "missing"), "-o", str(tmp_path / "en.json")])
        assert exit_code == 2
        assert "does not exist" in capsys.readouterr().err

    def test_missing_required_options_exit_2(self, capsys):
        assert main([]) == 2
        assert "Error" in capsys.readouterr().err

    def test_invalid_existing_catalog_exit_2(self, sample_src_dir, tmp_i18n_dir):
        output = tmp_i18n_dir / "en.json"
        output.write_text("[1, 2]")
        assert main(["-i", str(sample_src_dir), "-o", str(output)]) == 2
