"""Reading and writing the facility lookup input CSV."""

from .input_csv import parse_input_csv, parse_input_rows, write_input_csv

__all__ = ["parse_input_csv", "parse_input_rows", "write_input_csv"]
