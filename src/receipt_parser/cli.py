"""Command-line interface for receipt text parsing."""

import logging
import click
from pathlib import Path
from typing import List, Dict, Any, Optional
import json
from concurrent.futures import ThreadPoolExecutor, as_completed
from tqdm import tqdm
import sys
from collections import Counter

from .config import load_config
from .export import ExcelExporter, JsonExporter
from .pages import OcrProgress, OcrStage, ProgressCallback, combine_pages
from .parse import ReceiptTextParser
from .review import ReviewQueue
from .selection import set_all_selected, set_item_selected, selected_total

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

logger = logging.getLogger(__name__)


def configure_logging(level: str = 'INFO'):
    """Send log records to stderr so stdout stays clean for JSON output."""
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stderr)]
    )


class FileAuditTracker:
    """Track the last reported stage of every file during processing."""

    def __init__(self):
        self.files: Dict[str, Dict[str, Any]] = {}

    def add_file(self, filepath: Path):
        self.files[str(filepath)] = {'status': 'found', 'reason': None}

    def update_file(self, filepath: Path, **kwargs):
        key = str(filepath)
        if key in self.files:
            self.files[key].update(kwargs)

    def get_summary(self) -> Dict[str, int]:
        """Get summary counts by status."""
        return dict(Counter(info['status'] for info in self.files.values()))

    def get_missing_files(self) -> List[str]:
        """Files that did not finish successfully."""
        return [
            f"{Path(filepath).name} - {info['status']}: {info.get('reason') or 'unknown'}"
            for filepath, info in self.files.items()
            if info['status'] != OcrStage.DONE.value
        ]


class ReceiptProcessor:
    """Batch processor turning recognized text files into parsed receipts."""

    def __init__(self,
                 config: Dict[str, Any],
                 max_workers: Optional[int] = None,
                 on_progress: Optional[ProgressCallback] = None):
        """
        Initialize the receipt processor.

        Args:
            config: Loaded configuration
            max_workers: Number of parallel workers (overrides config)
            on_progress: Called with an OcrProgress for every stage change
        """
        self.config = config
        self.max_workers = max_workers or config['max_workers']
        self.encoding = config['encoding']
        self.on_progress = on_progress

        self.parser = ReceiptTextParser()
        self.review_queue = ReviewQueue(tolerance=config['review']['tolerance'])
        self.audit = FileAuditTracker()

        self.stats = {
            'total_files': 0,
            'processed': 0,
            'failed': 0,
            'review_items': 0
        }

    def _report(self, receipt_path: Path, stage: OcrStage, percent: Optional[int] = None,
                message: Optional[str] = None):
        self.audit.update_file(receipt_path, status=stage.value,
                               reason=message if stage == OcrStage.ERROR else None)
        if self.on_progress:
            self.on_progress(OcrProgress(stage=stage, percent=percent,
                                         message=message or receipt_path.name))

    def find_text_files(self, input_dir: Path) -> List[Path]:
        """Find all recognized-text files in the input directory, recursively."""
        text_files = set()
        for pattern in self.config['input_patterns']:
            text_files.update(path for path in input_dir.glob(f'**/{pattern}') if path.is_file())

        text_files = sorted(text_files)
        logger.info(f"Found {len(text_files)} text files in {input_dir}")

        for text_file in text_files:
            logger.debug(f"  Found: {text_file.relative_to(input_dir)}")
            self.audit.add_file(text_file)

        return text_files

    def process_single_file(self, receipt_path: Path, input_dir: Path,
                            json_exporter: JsonExporter) -> Dict[str, Any]:
        """
        Parse a single text file and write its JSON under the same relative path.

        Returns:
            Dict with 'file_path', 'receipt' and, on failure, 'error'
        """
        try:
            self._report(receipt_path, OcrStage.LOADING, 0)
            text = receipt_path.read_text(encoding=self.encoding)

            receipt = self.parser.parse(text)
            json_exporter.export(str(receipt_path.relative_to(input_dir)), receipt)
            self.review_queue.add_from_parse(str(receipt_path), receipt)

            self._report(receipt_path, OcrStage.DONE, 100)
            self.stats['processed'] += 1
            return {'file_path': str(receipt_path), 'receipt': receipt}

        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to process {receipt_path}: {e}")
            self.stats['failed'] += 1
            self._report(receipt_path, OcrStage.ERROR, message=str(e))

            self.review_queue.add_item(
                file_path=str(receipt_path),
                reason=f"Processing failed: {e}",
                raw_snippet=f"Error: {e}"
            )
            return {'file_path': str(receipt_path), 'receipt': None, 'error': str(e)}

    def process_batch(self, input_dir: Path, output_dir: Path) -> List[Dict[str, Any]]:
        """
        Process all text files in the input directory.

        Args:
            input_dir: Directory containing recognized text files
            output_dir: Output directory for results

        Returns:
            List of per-file results, in file order
        """
        text_files = self.find_text_files(input_dir)
        self.stats['total_files'] = len(text_files)

        if not text_files:
            logger.warning("No text files found!")
            return []

        json_exporter = JsonExporter(output_dir / 'json')
        results = []

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            future_to_file = {
                executor.submit(self.process_single_file, text_file, input_dir, json_exporter): text_file
                for text_file in text_files
            }

            with tqdm(total=len(text_files), desc="Parsing receipts", file=sys.stderr) as pbar:
                for future in as_completed(future_to_file):
                    results.append(future.result())
                    pbar.update(1)
                    pbar.set_postfix({
                        'processed': self.stats['processed'],
                        'failed': self.stats['failed']
                    })

        self.stats['review_items'] = len(self.review_queue.items)
        results.sort(key=lambda r: r['file_path'])

        logger.info(f"Batch processing complete. Processed: {self.stats['processed']}, "
                    f"Failed: {self.stats['failed']}, Review items: {self.stats['review_items']}")
        return results


def parse_selection(value: str, item_count: int) -> List[int]:
    """Turn a 1-based '1,3' option value into 0-based indices."""
    indices = []
    for part in value.split(','):
        part = part.strip()
        if not part:
            continue
        if not part.isdecimal() or not 1 <= int(part) <= item_count:
            raise click.BadParameter(f"'{part}' is not an item number between 1 and {item_count}",
                                     param_hint="'--select'")
        indices.append(int(part) - 1)
    return indices


@click.group()
def cli():
    """Receipt text parser - turn recognized receipt text into structured data."""
    pass


@cli.command()
@click.argument('text_file', type=click.File('r', encoding='utf-8'), default='-')
@click.option('--select', 'select', default=None, help='Comma-separated item numbers to select (1-based)')
@click.option('--select-all', is_flag=True, help='Select every line item')
@click.option('--indent', default=2, type=int, help='JSON indentation')
@click.option('--debug', is_flag=True, help='Enable debug output')
def parse(text_file, select: Optional[str], select_all: bool, indent: int, debug: bool):
    """
    Parse one recognized-text file (or stdin) and print JSON.

    Example:
        receipts parse receipt.txt --select 1,3
    """
    configure_logging('DEBUG' if debug else 'WARNING')

    receipt = ReceiptTextParser().parse(text_file.read())

    if select_all:
        receipt = set_all_selected(receipt, True)
    if select:
        for index in parse_selection(select, len(receipt.line_items)):
            receipt = set_item_selected(receipt, index, True)

    output = receipt.to_dict()
    if select_all or select:
        output['selected_total'] = float(selected_total(receipt))

    click.echo(json.dumps(output, ensure_ascii=False, indent=indent))


@cli.command()
@click.argument('page_files', nargs=-1, required=True,
                type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--encoding', default='utf-8', help='Encoding of the page files')
def combine(page_files: List[Path], encoding: str):
    """Combine per-page text files into one document with page markers."""
    click.echo(combine_pages(path.read_text(encoding=encoding) for path in page_files))


@cli.command()
@click.option('--in', 'input_dir', required=True, type=click.Path(exists=True, file_okay=False, path_type=Path),
              help='Input directory containing recognized text files')
@click.option('--out', 'output_dir', required=True, type=click.Path(path_type=Path),
              help='Output directory for results')
@click.option('--config', 'config_path', default=None, type=click.Path(path_type=Path),
              help='Path to YAML configuration file')
@click.option('--max-workers', default=None, type=int,
              help='Maximum number of parallel workers')
@click.option('--summary', is_flag=True, help='Include summary block in Excel output')
@click.option('--debug', is_flag=True, help='Enable debug output')
def run(input_dir: Path,
        output_dir: Path,
        config_path: Optional[Path],
        max_workers: Optional[int],
        summary: bool,
        debug: bool):
    """
    Parse a folder of recognized receipt texts and generate JSON and Excel output.

    Example:
        receipts run --in ./ocr_text --out ./out --summary
    """
    try:
        config = load_config(config_path)
        configure_logging('DEBUG' if debug else config['log_level'])

        output_dir.mkdir(parents=True, exist_ok=True)
        logger.info(f"Input directory: {input_dir}")
        logger.info(f"Output directory: {output_dir}")

        def log_progress(progress: OcrProgress):
            logger.debug(f"[{progress.stage.value}] {progress.message}")

        processor = ReceiptProcessor(config=config, max_workers=max_workers, on_progress=log_progress)
        results = processor.process_batch(input_dir, output_dir)

        if not results:
            click.echo("No text files found.")
            return

        excel_path = output_dir / 'receipts.xlsx'
        ExcelExporter(excel_path).export_receipts(
            results=results,
            review_items=processor.review_queue.items,
            include_summary=summary
        )

        click.echo("=" * 50)
        click.echo("PROCESSING SUMMARY")
        click.echo("=" * 50)
        click.echo(f"Total files found: {processor.stats['total_files']}")
        click.echo(f"Successfully parsed: {processor.stats['processed']}")
        click.echo(f"Failed: {processor.stats['failed']}")
        click.echo(f"Items needing review: {len(processor.review_queue.items)}")
        click.echo("Output files:")
        click.echo(f"  - Excel: {excel_path}")
        click.echo(f"  - JSON: {output_dir / 'json'}")

        missing_files = processor.audit.get_missing_files()
        if missing_files:
            click.echo(f"FILES NOT PROCESSED ({len(missing_files)}):")
            for missing in missing_files[:10]:
                click.echo(f"  - {missing}")
            if len(missing_files) > 10:
                click.echo(f"  ... and {len(missing_files) - 10} more")

    except Exception as e:
        logger.error(f"Processing failed: {e}")
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


if __name__ == '__main__':
    cli()
