"""Tests for the command-line interface."""

import json

from click.testing import CliRunner
from openpyxl import load_workbook
from receipt_parser.cli import cli

RECEIPT = "Joe's Diner\n01/02/2024\nBurger 8.50\nFries 2.00\nSubtotal 10.50\nTax 1.00\nTotal 11.50\n"


class TestParseCommand:
    """Test suite for 'receipts parse'."""

    def setup_method(self):
        """Set up test fixtures."""
        self.runner = CliRunner()

    def test_parse_file(self, tmp_path):
        path = tmp_path / "joes.txt"
        path.write_text(RECEIPT, encoding="utf-8")

        result = self.runner.invoke(cli, ['parse', str(path)])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data['vendor'] == "Joe's Diner"
        assert data['total'] == 11.5
        assert 'selected_total' not in data

    def test_parse_stdin_with_selection(self):
        result = self.runner.invoke(cli, ['parse', '-', '--select', '1'], input=RECEIPT)

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data['line_items'][0]['selected'] is True
        assert data['line_items'][1]['selected'] is False
        assert data['selected_total'] == 8.5

    def test_select_all(self):
        result = self.runner.invoke(cli, ['parse', '--select-all'], input=RECEIPT)

        assert json.loads(result.output)['selected_total'] == 10.5

    def test_out_of_range_selection_is_usage_error(self):
        result = self.runner.invoke(cli, ['parse', '--select', '3'], input=RECEIPT)

        assert result.exit_code == 2
        assert "not an item number" in result.output

    def test_non_ascii_digit_selection_is_usage_error(self):
        result = self.runner.invoke(cli, ['parse', '--select', '\u00b2'], input=RECEIPT)

        assert result.exit_code == 2
        assert "not an item number" in result.output


class TestCombineCommand:

    def test_combine_pages(self, tmp_path):
        first = tmp_path / "p1.txt"
        second = tmp_path / "p2.txt"
        first.write_text("Joe's Diner\nBurger 8.50", encoding="utf-8")
        second.write_text("Total 8.50", encoding="utf-8")

        result = CliRunner().invoke(cli, ['combine', str(first), str(second)])

        assert result.exit_code == 0, result.output
        assert result.output == "[[PAGE 1]]\nJoe's Diner\nBurger 8.50\n\n[[PAGE 2]]\nTotal 8.50\n"


class TestRunCommand:
    """Test suite for 'receipts run'."""

    def setup_method(self):
        """Set up test fixtures."""
        self.runner = CliRunner()

    def test_batch_run(self, tmp_path):
        input_dir = tmp_path / "in"
        (input_dir / "march").mkdir(parents=True)
        (input_dir / "joes.txt").write_text(RECEIPT, encoding="utf-8")
        (input_dir / "march" / "cafe.txt").write_text("Cafe\nLatte 4.25", encoding="utf-8")
        (input_dir / "notes.md").write_text("ignored", encoding="utf-8")
        output_dir = tmp_path / "out"

        result = self.runner.invoke(cli, ['run', '--in', str(input_dir), '--out', str(output_dir),
                                          '--max-workers', '2', '--summary'])

        assert result.exit_code == 0, result.output
        assert "Successfully parsed: 2" in result.output
        assert "Items needing review: 1" in result.output
        assert (output_dir / "json" / "joes.json").exists()
        assert (output_dir / "json" / "march" / "cafe.json").exists()

        ws = load_workbook(output_dir / "receipts.xlsx")["Line Items"]
        descriptions = [row[2].value for row in ws.iter_rows(min_row=2)]
        assert sorted(descriptions) == ["Burger", "Fries", "Latte"]

    def test_same_file_name_in_two_folders(self, tmp_path):
        input_dir = tmp_path / "in"
        (input_dir / "a").mkdir(parents=True)
        (input_dir / "b").mkdir()
        (input_dir / "a" / "receipt.txt").write_text(RECEIPT.replace("Joe's Diner", "Shop A"), encoding="utf-8")
        (input_dir / "b" / "receipt.txt").write_text("Nothing here", encoding="utf-8")
        output_dir = tmp_path / "out"

        result = self.runner.invoke(cli, ['run', '--in', str(input_dir), '--out', str(output_dir)])

        assert result.exit_code == 0, result.output
        first = json.loads((output_dir / "json" / "a" / "receipt.json").read_text(encoding="utf-8"))
        second = json.loads((output_dir / "json" / "b" / "receipt.json").read_text(encoding="utf-8"))
        assert first["vendor"] == "Shop A"
        assert second["vendor"] == "Nothing here"

        ws = load_workbook(output_dir / "receipts.xlsx")["Receipts"]
        rows = {row[1].value: (row[8].value, row[9].value) for row in ws.iter_rows(min_row=2)}
        assert rows["Shop A"][0] == "OK"
        assert rows["Nothing here"] == ("REVIEW", "missing date; no line items; missing total")

    def test_config_patterns(self, tmp_path):
        input_dir = tmp_path / "in"
        input_dir.mkdir()
        (input_dir / "joes.ocr").write_text(RECEIPT, encoding="utf-8")
        config = tmp_path / "config.yml"
        config.write_text("input_patterns: ['*.ocr']\n", encoding="utf-8")

        result = self.runner.invoke(cli, ['run', '--in', str(input_dir), '--out', str(tmp_path / "out"),
                                          '--config', str(config)])

        assert result.exit_code == 0, result.output
        assert "Successfully parsed: 1" in result.output

    def test_empty_directory(self, tmp_path):
        input_dir = tmp_path / "in"
        input_dir.mkdir()

        result = self.runner.invoke(cli, ['run', '--in', str(input_dir), '--out', str(tmp_path / "out")])

        assert result.exit_code == 0
        assert "No text files found." in result.output
        assert not (tmp_path / "out" / "receipts.xlsx").exists()

    def test_undecodable_file_is_reported(self, tmp_path):
        input_dir = tmp_path / "in"
        input_dir.mkdir()
        (input_dir / "bad.txt").write_bytes(b"\xff\xfe\xfa not utf-8")

        result = self.runner.invoke(cli, ['run', '--in', str(input_dir), '--out', str(tmp_path / "out")])

        assert result.exit_code == 0, result.output
        assert "Failed: 1" in result.output
        assert "bad.txt - error" in result.output

    def test_bad_config_exits_with_error(self, tmp_path):
        input_dir = tmp_path / "in"
        input_dir.mkdir()

        result = self.runner.invoke(cli, ['run', '--in', str(input_dir), '--out', str(tmp_path / "out"),
                                          '--config', str(tmp_path / "missing.yml")])

        assert result.exit_code == 1
        assert "Config file not found" in result.output
