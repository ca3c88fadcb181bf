"""JSON and Excel export of parsed receipts and review data."""

import json
import logging
from typing import List, Dict, Any, Optional
from pathlib import Path
import pandas as pd
from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill, Alignment
from openpyxl.utils import get_column_letter

from .models import ParsedReceipt
from .review import ReviewItem

logger = logging.getLogger(__name__)

RECEIPT_HEADERS = ["File Name", "Vendor", "Date", "Subtotal", "Tax", "Total", "Currency",
                   "Items", "Review Status", "Review Reason"]
ITEM_HEADERS = ["File Name", "Position", "Description", "Amount"]


def _amount(value) -> Optional[float]:
    return float(value) if value is not None else None


class JsonExporter:
    """Write one JSON document per parsed receipt."""

    def __init__(self, output_dir: Path, indent: int = 2):
        self.output_dir = Path(output_dir)
        self.indent = indent

    def export(self, relative_path: str, receipt: ParsedReceipt) -> Path:
        """
        Write receipt.to_dict() to <output_dir>/<relative_path>.json.

        Subdirectories of relative_path are kept, so equally named files from
        different input folders do not overwrite each other.
        """
        json_path = self.output_dir / Path(relative_path).with_suffix('.json')
        json_path.parent.mkdir(parents=True, exist_ok=True)
        with open(json_path, 'w', encoding='utf-8') as f:
            json.dump(receipt.to_dict(), f, ensure_ascii=False, indent=self.indent)
        logger.debug(f"Wrote {json_path}")
        return json_path


class ExcelExporter:
    """Export parsed receipts, their line items and review items to Excel."""

    def __init__(self, output_path: Path):
        """
        Initialize Excel exporter.

        Args:
            output_path: Path for the output Excel file
        """
        self.output_path = Path(output_path)
        self.workbook = Workbook()

    def export_receipts(self,
                        results: List[Dict[str, Any]],
                        review_items: List[ReviewItem],
                        include_summary: bool = False):
        """
        Export batch results to a workbook.

        Args:
            results: Dicts with 'file_path' and 'receipt' (None when the file failed)
            review_items: Receipts needing review
            include_summary: Whether to add a summary block above the receipts
        """
        try:
            if "Sheet" in self.workbook.sheetnames:
                self.workbook.remove(self.workbook["Sheet"])

            rows = [self.create_receipt_row(r['file_path'], r.get('receipt')) for r in results]
            self._create_receipts_sheet(rows, review_items, include_summary)
            self._create_items_sheet(results)

            self.output_path.parent.mkdir(parents=True, exist_ok=True)
            self.workbook.save(str(self.output_path))

            logger.info(f"Excel file exported to: {self.output_path}")

        except Exception as e:
            logger.error(f"Failed to export Excel file: {e}")
            raise

    def _write_headers(self, ws, headers: List[str], row: int):
        for col, header in enumerate(headers, 1):
            cell = ws.cell(row=row, column=col, value=header)
            cell.font = Font(bold=True)
            cell.fill = PatternFill(start_color="E6E6E6", end_color="E6E6E6", fill_type="solid")
            cell.alignment = Alignment(horizontal="center")

    def _create_receipts_sheet(self, rows: List[Dict[str, Any]], review_items: List[ReviewItem],
                               include_summary: bool):
        """One row per file; receipts flagged for review are listed last."""
        ws = self.workbook.create_sheet("Receipts")
        current_row = 1

        if include_summary:
            current_row = self._add_summary_section(ws, rows, current_row)
            current_row += 2

        review_lookup = {str(item.file_path): item for item in review_items}

        self._write_headers(ws, RECEIPT_HEADERS, current_row)
        current_row += 1

        ok_rows = [row for row in rows if row['file_path'] not in review_lookup]
        flagged_rows = [row for row in rows if row['file_path'] in review_lookup]

        for row in ok_rows + flagged_rows:
            review_item = review_lookup.get(row['file_path'])
            values = [
                row['file_name'], row['vendor'], row['date'], row['subtotal'], row['tax'],
                row['total'], row['currency'], row['items'],
                "REVIEW" if review_item else "OK",
                review_item.reason if review_item else "",
            ]
            for col, value in enumerate(values, 1):
                ws.cell(row=current_row, column=col, value=value)
            current_row += 1

        column_widths = [25, 30, 14, 12, 12, 12, 10, 8, 14, 50]
        for i, width in enumerate(column_widths, 1):
            ws.column_dimensions[get_column_letter(i)].width = width

        logger.info(f"Created receipts sheet with {len(rows)} receipts and {len(review_items)} review items")

    def _create_items_sheet(self, results: List[Dict[str, Any]]):
        ws = self.workbook.create_sheet("Line Items")
        self._write_headers(ws, ITEM_HEADERS, 1)
        current_row = 2
        for result in results:
            receipt = result.get('receipt')
            if receipt is None:
                continue
            file_name = Path(result['file_path']).name
            for position, item in enumerate(receipt.line_items, 1):
                ws.cell(row=current_row, column=1, value=file_name)
                ws.cell(row=current_row, column=2, value=position)
                ws.cell(row=current_row, column=3, value=item.description)
                ws.cell(row=current_row, column=4, value=float(item.amount))
                current_row += 1

        for i, width in enumerate([25, 10, 50, 12], 1):
            ws.column_dimensions[get_column_letter(i)].width = width

    def _add_summary_section(self, ws, rows: List[Dict[str, Any]], start_row: int) -> int:
        """Add summary statistics to the top of the receipts sheet."""
        if not rows:
            ws.cell(row=start_row, column=1, value="No receipts to summarize")
            return start_row + 1

        df = pd.DataFrame(rows)
        totals = df['total'].dropna()

        ws.cell(row=start_row, column=1, value="RECEIPT SUMMARY").font = Font(bold=True, size=14)
        current_row = start_row + 2

        ws.cell(row=current_row, column=1, value="Receipts:").font = Font(bold=True)
        ws.cell(row=current_row, column=2, value=len(df))

        ws.cell(row=current_row, column=4, value="Grand Total:").font = Font(bold=True)
        ws.cell(row=current_row, column=5, value=round(float(totals.sum()), 2))

        ws.cell(row=current_row, column=7, value="Average Total:").font = Font(bold=True)
        ws.cell(row=current_row, column=8, value=round(float(totals.mean()), 2) if len(totals) else None)

        return current_row + 1

    @staticmethod
    def create_receipt_row(file_path: str, receipt: Optional[ParsedReceipt]) -> Dict[str, Any]:
        """
        Create a flat row dictionary for one processed file.

        Args:
            file_path: Source text file
            receipt: Parsed receipt, or None if the file could not be processed

        Returns:
            Row dictionary
        """
        if receipt is None:
            return {
                'file_path': str(file_path),
                'file_name': Path(file_path).name,
                'vendor': None, 'date': None, 'subtotal': None, 'tax': None,
                'total': None, 'currency': None, 'items': 0,
            }
        return {
            'file_path': str(file_path),
            'file_name': Path(file_path).name,
            'vendor': receipt.vendor,
            'date': receipt.date,
            'subtotal': _amount(receipt.subtotal),
            'tax': _amount(receipt.tax),
            'total': _amount(receipt.total),
            'currency': receipt.currency.value if receipt.currency else None,
            'items': len(receipt.line_items),
        }
