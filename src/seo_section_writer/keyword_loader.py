"""
Keyword set loading from CSV and Excel files.

A keyword file has one keyword per row and an optional type column that
marks each keyword as mandatory or optional:

    keyword,type
    seo tool,mandatory
    ai writing,mandatory
    rank faster,optional

Rows without a type column (or with an unrecognised value) are mandatory.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

import pandas as pd

logger = logging.getLogger(__name__)


class KeywordLoadError(Exception):
    """Raised when keyword loading fails."""
    pass


# Common column name variations for keyword data
KEYWORD_COLUMN_VARIANTS = ["keyword", "keywords", "term", "terms", "query", "queries", "phrase"]
TYPE_COLUMN_VARIANTS = ["type", "keyword_type", "kind", "priority", "group"]

MANDATORY_VALUES = ("mandatory", "required", "must", "primary", "m", "yes", "true", "1")
OPTIONAL_VALUES = ("optional", "pool", "secondary", "o", "no", "false", "0")


@dataclass
class KeywordSets:
    """Mandatory and optional keywords loaded from a file."""
    mandatory: list[str] = field(default_factory=list)
    optional: list[str] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.mandatory) + len(self.optional)


def _normalize_column_name(name: str) -> str:
    """Normalize column name for matching."""
    return str(name).lower().strip().replace(" ", "_").replace("-", "_")


def _find_column(df: pd.DataFrame, variants: list[str]) -> Optional[str]:
    """
    Find a column in the DataFrame matching one of the variant names.

    Returns:
        The actual column name if found, None otherwise.
    """
    normalized_columns = {_normalize_column_name(col): col for col in df.columns}

    for variant in variants:
        normalized = _normalize_column_name(variant)
        if normalized in normalized_columns:
            return normalized_columns[normalized]

    return None


def _read_dataframe(path: Path, sheet_name: Optional[str]) -> pd.DataFrame:
    suffix = path.suffix.lower()

    if suffix == ".csv":
        try:
            return pd.read_csv(path, encoding="utf-8")
        except UnicodeDecodeError:
            try:
                return pd.read_csv(path, encoding="latin-1")
            except Exception as e:
                raise KeywordLoadError(f"Failed to read CSV file: {e}")
        except Exception as e:
            raise KeywordLoadError(f"Failed to read CSV file: {e}")

    if suffix in (".xlsx", ".xls"):
        try:
            if sheet_name:
                return pd.read_excel(path, sheet_name=sheet_name)
            return pd.read_excel(path)
        except Exception as e:
            raise KeywordLoadError(f"Failed to read Excel file: {e}")

    raise KeywordLoadError(
        f"Unsupported file format: {suffix}. Supported formats: .csv, .xlsx, .xls"
    )


def _is_optional(value) -> bool:
    if pd.isna(value):
        return False
    normalized = str(value).strip().lower()
    if normalized in OPTIONAL_VALUES:
        return True
    if normalized not in MANDATORY_VALUES:
        logger.debug("Unrecognised keyword type %r, treating as mandatory", value)
    return False


def parse_keyword_dataframe(df: pd.DataFrame) -> KeywordSets:
    """
    Split a DataFrame of keywords into mandatory and optional lists.

    Raises:
        KeywordLoadError: If the frame is empty or has no keyword column.
    """
    if df.empty:
        raise KeywordLoadError("Keyword file is empty")

    keyword_col = _find_column(df, KEYWORD_COLUMN_VARIANTS)
    if keyword_col is None:
        raise KeywordLoadError(
            f"No keyword column found. Expected one of: {', '.join(KEYWORD_COLUMN_VARIANTS)}. "
            f"Found columns: {', '.join(str(c) for c in df.columns)}"
        )
    type_col = _find_column(df, TYPE_COLUMN_VARIANTS)

    sets = KeywordSets()
    for _, row in df.iterrows():
        phrase = row[keyword_col]
        if pd.isna(phrase) or not str(phrase).strip():
            continue
        phrase = str(phrase).strip()

        if type_col is not None and _is_optional(row[type_col]):
            sets.optional.append(phrase)
        else:
            sets.mandatory.append(phrase)

    if not sets:
        raise KeywordLoadError("No valid keywords found in file")

    return sets


def load_keyword_sets(file_path: Union[str, Path], sheet_name: Optional[str] = None) -> KeywordSets:
    """
    Load mandatory and optional keywords from a CSV or Excel file.

    Args:
        file_path: Path to the keyword file.
        sheet_name: Optional sheet name for Excel files.

    Returns:
        KeywordSets with both lists in file order.

    Raises:
        KeywordLoadError: If the file cannot be read or is invalid.
    """
    path = Path(file_path)

    if not path.exists():
        raise KeywordLoadError(f"File not found: {file_path}")

    sets = parse_keyword_dataframe(_read_dataframe(path, sheet_name))
    logger.info(
        "Loaded %d mandatory and %d optional keywords from %s",
        len(sets.mandatory), len(sets.optional), path.name,
    )
    return sets
