"""Receipt parsing components - small, independently testable matchers."""

from .date_parser import DateParser
from .amount_parser import AmountParser
from .vendor_parser import VendorParser
from .line_scanner import ScanState, scan_line, scan_lines

__all__ = ['DateParser', 'AmountParser', 'VendorParser', 'ScanState', 'scan_line', 'scan_lines']
