"""Excel workbook builder for aggregate tables."""
from .writer import ExcelWriter
