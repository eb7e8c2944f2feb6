"""Formatting utilities for git-dir-status annotations."""

from rich.cells import cell_len

from git_dir_status.config import AnnotationStyle
from git_dir_status.constants import FAST_FORWARD_COLORS, FIELD_NAMES
from git_dir_status.models.status import DirectoryStatusRecord, FieldWidths


def display_width(value: str) -> int:
    """Number of terminal cells value occupies (wide characters count twice)."""
    return cell_len(value)


def pad_cells(value: str, width: int) -> str:
    """
    Left-justify value to width terminal cells.

    Args:
        value: Text to pad
        width: Target width in cells

    Returns:
        value followed by enough spaces to fill width cells. Values that are
        already wider are returned unchanged.
    """
    return value + " " * max(0, width - display_width(value))


def format_annotation(
    record: DirectoryStatusRecord, widths: FieldWidths, style: AnnotationStyle
) -> str:
    """
    Format the annotation text for one directory.

    Args:
        record: Status of the directory
        widths: Column widths of the current table
        style: Separator and trailer to use

    Returns:
        "{branch}-{remote}-{ff} " with each field padded to its column width.

    Example:
        "main-origin-true    " next to "dev -origin-missing "
    """
    columns = [pad_cells(record.field_text(name), widths[name]) for name in FIELD_NAMES]
    return style.separator.join(columns) + style.trailer


def annotation_rich_style(record: DirectoryStatusRecord, style: AnnotationStyle) -> str:
    """Rich style for an annotation, coloured by its fast-forward state."""
    color = FAST_FORWARD_COLORS.get(record.fast_forward.value, "")
    return " ".join(part for part in (style.style, color) if part)
