"""
Chat intent router.

Routes a chat message to one analysis by keyword, checked in this order:

    no rows loaded                          -> NO_DATA
    "missing"                               -> MISSING_VALUES
    "summary" / "describe" / "statistics"   -> SUMMARY
    "outlier"                               -> OUTLIERS
    "visualize" / "bar chart" / "show top"  -> CHART (or CHART_NOT_FOUND)
    anything else                           -> HELP

The reply carries structured payloads only; rendering is the host's job.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Sequence

from tabsense.chat.commands import CommandParser
from tabsense.core.logging_config import get_logger
from tabsense.core.scalars import Row
from tabsense.profiler.anomaly import OutlierDetector
from tabsense.profiler.frequency import FrequencyAggregator
from tabsense.profiler.profile_result import convert_numpy_types
from tabsense.profiler.statistics_calculator import StatisticsCalculator

logger = get_logger(__name__)

NO_DATA_MESSAGE = "Please upload a CSV or Excel file first."
HELP_MESSAGE = 'Try: "summary", "missing values", or "outliers in column X".'
CHART_NOT_FOUND_MESSAGE = (
    "I couldn't find those columns. Try: visualize City with Payment Method bar chart "
    "or show top 10 for Product as bars."
)

SUMMARY_KEYWORDS = ("summary", "describe", "statistics")
CHART_KEYWORDS = ("visualize", "bar chart", "show top")


class ChatIntent(Enum):
    NO_DATA = "no_data"
    MISSING_VALUES = "missing_values"
    SUMMARY = "summary"
    OUTLIERS = "outliers"
    CHART = "chart"
    CHART_NOT_FOUND = "chart_not_found"
    HELP = "help"


@dataclass
class ChatReply:
    """
    Assistant answer to one chat message.

    Attributes:
        intent: Which analysis the message was routed to
        message: Short text for the user
        payload: Structured result of the analysis (None for text-only replies)
    """
    intent: ChatIntent
    message: str
    payload: Any = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        payload = self.payload
        if isinstance(payload, dict):
            payload = {
                key: value.to_dict() if hasattr(value, "to_dict") else value
                for key, value in payload.items()
            }
        elif hasattr(payload, "to_dict"):
            payload = payload.to_dict()
        return {
            "intent": self.intent.value,
            "message": self.message,
            "payload": convert_numpy_types(payload),
        }


class ChatAssistant:
    """
    Keyword-routed chat front end over the analysis components.

    Example:
        >>> assistant = ChatAssistant()
        >>> reply = assistant.respond("any missing values?", [{"City": None}])
        >>> reply.intent, reply.payload
        (<ChatIntent.MISSING_VALUES: 'missing_values'>, {'City': 1})
    """

    def __init__(
        self,
        statistics_calculator: Optional[StatisticsCalculator] = None,
        outlier_detector: Optional[OutlierDetector] = None,
        frequency_aggregator: Optional[FrequencyAggregator] = None,
        command_parser: Optional[CommandParser] = None
    ):
        self.statistics_calculator = statistics_calculator or StatisticsCalculator()
        self.outlier_detector = outlier_detector or self.statistics_calculator.outlier_detector
        self.frequency_aggregator = frequency_aggregator or FrequencyAggregator(
            self.statistics_calculator.type_inferrer
        )
        self.command_parser = command_parser or CommandParser()

    def respond(self, text: str, rows: Sequence[Row]) -> ChatReply:
        """
        Answer a chat message about ``rows``.

        Args:
            text: User message
            rows: Current row set

        Returns:
            ChatReply describing the routed intent and its result
        """
        text = text.strip()
        if not rows:
            return ChatReply(ChatIntent.NO_DATA, NO_DATA_MESSAGE)
        if not text:
            return ChatReply(ChatIntent.HELP, HELP_MESSAGE)

        lower = text.lower()

        if "missing" in lower:
            return ChatReply(
                ChatIntent.MISSING_VALUES,
                "Missing values by column",
                self.statistics_calculator.missing_counts(rows)
            )

        if any(keyword in lower for keyword in SUMMARY_KEYWORDS):
            return ChatReply(
                ChatIntent.SUMMARY,
                "Quick summary",
                self.statistics_calculator.summarize(rows)
            )

        if "outlier" in lower:
            return ChatReply(
                ChatIntent.OUTLIERS,
                "Potential outliers (z-score > 3)",
                self.outlier_detector.outlier_report(rows)
            )

        if any(keyword in lower for keyword in CHART_KEYWORDS):
            return self._chart_reply(text, rows)

        logger.debug(f"No intent matched: {text!r}")
        return ChatReply(ChatIntent.HELP, HELP_MESSAGE)

    def _chart_reply(self, text: str, rows: Sequence[Row]) -> ChatReply:
        spec = self.command_parser.parse(text, rows)
        if spec is None:
            return ChatReply(ChatIntent.CHART_NOT_FOUND, CHART_NOT_FOUND_MESSAGE)

        chart = self.frequency_aggregator.build_chart(rows, spec)
        title = f"{spec.category} by {spec.group_by}" if spec.group_by else spec.category
        return ChatReply(ChatIntent.CHART, title, {"spec": spec, "chart": chart})
