"""Unit tests for CSV loading."""

import pandas as pd
import pytest

from lagforecast.data.loaders import DataLoader, resolve_column
from lagforecast.utils.error_handling import MissingColumn


@pytest.fixture
def csv_path(tmp_path):
    path = tmp_path / "data.csv"
    path.write_text(
        'Month, Year,GCC_Total_Imports,Estimated_Violence_Fatalities\n'
        'Jan,2024,"1,234",N/A\n'
        'Feb,2024,"2,000",15\n'
    )
    return path


class TestDataLoader:

    def test_keeps_raw_text(self, csv_path):
        df = DataLoader().load_csv(csv_path)
        assert list(df.columns) == ["Month", "Year", "GCC_Total_Imports", "Estimated_Violence_Fatalities"]
        assert df["GCC_Total_Imports"].iloc[0] == "1,234"
        assert df["Estimated_Violence_Fatalities"].iloc[0] == "N/A"

    def test_required_columns(self, csv_path):
        df = DataLoader().load_csv(csv_path, required_columns=["Month", "Year"])
        assert len(df) == 2

    def test_missing_required_column(self, csv_path):
        with pytest.raises(MissingColumn, match="Gold"):
            DataLoader().load_csv(csv_path, required_columns=["Gold_Price_USD_oz"])

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            DataLoader().load_csv(tmp_path / "absent.csv")

    def test_validate_columns_reports_extras(self, csv_path):
        df = DataLoader().load_csv(csv_path)
        result = DataLoader().validate_columns(df, ["Month", "Year"])
        assert result.is_valid
        assert result.warnings
        assert result.to_dict()["missing_columns"] == []


class TestResolveColumn:

    def test_by_position_and_name(self):
        df = pd.DataFrame(columns=["Month", "Year", "Imports"])
        assert resolve_column(df, 2) == "Imports"
        assert resolve_column(df, "Year") == "Year"

    def test_out_of_range(self):
        with pytest.raises(MissingColumn):
            resolve_column(pd.DataFrame(columns=["a"]), 3)

    def test_unknown_name(self):
        with pytest.raises(MissingColumn):
            resolve_column(pd.DataFrame(columns=["a"]), "b")
