"""
TabSense - analysis engine for spreadsheet-like row data.

Infers column types, ranks and cross-tabulates values for charts, summarizes
columns, flags outliers and data-quality issues, and turns chat commands
into chart requests.
"""

from tabsense.core.engine import AnalysisEngine
from tabsense.core.config import ValidationRulesConfig

__version__ = "0.1.0"

__all__ = ["AnalysisEngine", "ValidationRulesConfig", "__version__"]
