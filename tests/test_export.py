"""Tests for JSON and Excel export."""

import json

from openpyxl import load_workbook
from receipt_parser import ReviewQueue, parse
from receipt_parser.export import ExcelExporter, JsonExporter, RECEIPT_HEADERS

COMPLETE = "Joe's Diner\n01/02/2024\nBurger $8.50\nFries 2.00\nSubtotal 10.50\nTax 1.00\nTotal 11.50"


class TestJsonExporter:

    def test_writes_one_file_per_receipt(self, tmp_path):
        exporter = JsonExporter(tmp_path / "json")

        path = exporter.export("joes.txt", parse(COMPLETE))

        assert path == tmp_path / "json" / "joes.json"
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["vendor"] == "Joe's Diner"
        assert data["currency"] == "USD"
        assert [item["description"] for item in data["line_items"]] == ["Burger", "Fries"]


class TestExcelExporter:
    """Test suite for ExcelExporter."""

    def setup_method(self):
        """Set up test fixtures."""
        self.queue = ReviewQueue()
        self.results = [
            {'file_path': 'in/empty.txt', 'receipt': parse("")},
            {'file_path': 'in/joes.txt', 'receipt': parse(COMPLETE)},
            {'file_path': 'in/broken.txt', 'receipt': None, 'error': 'bad bytes'},
        ]
        for result in self.results:
            if result['receipt'] is not None:
                self.queue.add_from_parse(result['file_path'], result['receipt'])
        self.queue.add_item(file_path='in/broken.txt', reason='Processing failed: bad bytes')

    def test_receipts_sheet(self, tmp_path):
        output = tmp_path / "out" / "receipts.xlsx"

        ExcelExporter(output).export_receipts(self.results, self.queue.items)

        wb = load_workbook(output)
        assert wb.sheetnames == ["Receipts", "Line Items"]
        ws = wb["Receipts"]
        assert [cell.value for cell in ws[1]] == RECEIPT_HEADERS
        # OK rows come before rows flagged for review
        assert ws.cell(row=2, column=1).value == "joes.txt"
        assert ws.cell(row=2, column=2).value == "Joe's Diner"
        assert ws.cell(row=2, column=6).value == 11.5
        assert ws.cell(row=2, column=9).value == "OK"
        assert ws.cell(row=3, column=1).value == "empty.txt"
        assert ws.cell(row=3, column=9).value == "REVIEW"
        assert ws.cell(row=4, column=1).value == "broken.txt"
        assert ws.cell(row=4, column=10).value == "Processing failed: bad bytes"

    def test_line_items_sheet(self, tmp_path):
        output = tmp_path / "receipts.xlsx"

        ExcelExporter(output).export_receipts(self.results, self.queue.items)

        ws = load_workbook(output)["Line Items"]
        rows = [[cell.value for cell in row] for row in ws.iter_rows(min_row=2)]
        assert rows == [
            ["joes.txt", 1, "Burger", 8.5],
            ["joes.txt", 2, "Fries", 2.0],
        ]

    def test_summary_block(self, tmp_path):
        output = tmp_path / "receipts.xlsx"

        ExcelExporter(output).export_receipts(self.results, self.queue.items, include_summary=True)

        ws = load_workbook(output)["Receipts"]
        assert ws.cell(row=1, column=1).value == "RECEIPT SUMMARY"
        assert ws.cell(row=3, column=2).value == 3
        assert ws.cell(row=3, column=5).value == 11.5

    def test_create_receipt_row_for_failed_file(self):
        row = ExcelExporter.create_receipt_row("in/broken.txt", None)

        assert row['file_name'] == "broken.txt"
        assert row['total'] is None
        assert row['items'] == 0

    def test_review_status_follows_full_path(self, tmp_path):
        """Test equally named files in different folders keep their own status."""
        results = [
            {'file_path': 'in/a/receipt.txt', 'receipt': parse(COMPLETE)},
            {'file_path': 'in/b/receipt.txt', 'receipt': parse("Nothing here")},
        ]
        queue = ReviewQueue()
        for result in results:
            queue.add_from_parse(result['file_path'], result['receipt'])
        output = tmp_path / "receipts.xlsx"

        ExcelExporter(output).export_receipts(results, queue.items)

        ws = load_workbook(output)["Receipts"]
        assert ws.cell(row=2, column=2).value == "Joe's Diner"
        assert ws.cell(row=2, column=9).value == "OK"
        assert ws.cell(row=3, column=2).value == "Nothing here"
        assert ws.cell(row=3, column=9).value == "REVIEW"


def test_json_keeps_relative_folders(tmp_path):
    exporter = JsonExporter(tmp_path / "json")

    first = exporter.export("a/receipt.txt", parse(COMPLETE))
    second = exporter.export("b/receipt.txt", parse("Nothing here"))

    assert first == tmp_path / "json" / "a" / "receipt.json"
    assert second == tmp_path / "json" / "b" / "receipt.json"
    assert json.loads(first.read_text(encoding="utf-8"))["vendor"] == "Joe's Diner"
