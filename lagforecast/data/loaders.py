"""CSV loading and column validation for monthly observation files."""

from typing import Dict, List, Optional, Any, Sequence, Union
from dataclasses import dataclass, field
import logging
from pathlib import Path

import pandas as pd

from lagforecast.utils.error_handling import MissingColumn

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    """Result of column validation."""
    is_valid: bool
    errors: List[str]
    warnings: List[str] = field(default_factory=list)
    missing_columns: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "is_valid": self.is_valid,
            "errors": self.errors,
            "warnings": self.warnings,
            "missing_columns": self.missing_columns,
        }


class DataLoader:
    """Loads raw observation tables, keeping every cell as text."""

    def load_csv(
        self,
        path: Union[str, Path],
        required_columns: Optional[Sequence[str]] = None,
    ) -> pd.DataFrame:
        """
        Load a delimited file without numeric coercion.

        Values such as "1,234" or "N/A" are kept verbatim so that the
        cleaning policy, not the reader, decides what they become.

        Args:
            path: Path to the CSV file
            required_columns: Columns that must be present

        Returns:
            DataFrame of strings with stripped column names

        Raises:
            FileNotFoundError: If the file doesn't exist
            MissingColumn: If a required column is absent
        """
        file_path = Path(path)
        if not file_path.exists():
            raise FileNotFoundError(f"CSV file not found: {path}")

        df = pd.read_csv(file_path, dtype=str, keep_default_na=False)
        df.columns = [str(c).strip() for c in df.columns]
        logger.info(f"Loaded {len(df)} rows from {path}")

        if required_columns:
            result = self.validate_columns(df, required_columns)
            if not result.is_valid:
                raise MissingColumn("; ".join(result.errors))

        return df

    def validate_columns(
        self,
        df: pd.DataFrame,
        required_columns: Sequence[str],
    ) -> ValidationResult:
        """
        Check that every required column is present.

        Args:
            df: DataFrame to validate
            required_columns: Column names expected in the frame

        Returns:
            ValidationResult with validation details
        """
        missing = [col for col in required_columns if col not in df.columns]
        errors = [f"Missing required column: {col}" for col in missing]

        warnings: List[str] = []
        extra = [col for col in df.columns if col not in required_columns]
        if extra:
            warnings.append(f"Unused columns: {extra}")

        return ValidationResult(
            is_valid=not errors,
            errors=errors,
            warnings=warnings,
            missing_columns=missing,
        )


def resolve_column(df: pd.DataFrame, ref: Union[str, int]) -> str:
    """
    Resolve a column reference given by name or by 0-based position.

    Raises:
        MissingColumn: If the name is absent or the position out of range
    """
    if isinstance(ref, int) and not isinstance(ref, bool):
        if not 0 <= ref < len(df.columns):
            raise MissingColumn(
                f"Column position {ref} out of range for {len(df.columns)} columns"
            )
        return df.columns[ref]
    if ref not in df.columns:
        raise MissingColumn(f"Column '{ref}' not found in input")
    return ref
