"""Conversion of extracted breeding and pregnancy events into billing entries.

This module provides:
- extract_owner_id / get_classification_id / get_pregnancy_classification_id /
  format_date: the deterministic rule functions
- convert_* functions mapping extracted records to SubmissionRecords
- render_*_preview: fixed-width tables for the operator review checkpoint
"""

from .preview import (
    display_width,
    render_breeding_preview,
    render_pregnancy_preview,
    render_table,
)
from .service import (
    CLASSIFICATION_LABELS,
    convert_breeding_record,
    convert_breeding_records,
    convert_pregnancy_record,
    convert_pregnancy_records,
    extract_owner_id,
    format_date,
    get_classification_id,
    get_pregnancy_classification_id,
    is_ambiguous_owner_source,
)

__all__ = [
    "extract_owner_id",
    "is_ambiguous_owner_source",
    "get_classification_id",
    "get_pregnancy_classification_id",
    "format_date",
    "convert_breeding_record",
    "convert_breeding_records",
    "convert_pregnancy_record",
    "convert_pregnancy_records",
    "CLASSIFICATION_LABELS",
    "display_width",
    "render_table",
    "render_breeding_preview",
    "render_pregnancy_preview",
]
