"""Pipeline Controller - routes each log line to the header parser or to the
row translator and batch submitter, containing every row-level failure."""
import logging
from enum import Enum
from typing import Iterable, Optional, Sequence, Tuple

from log_metrics.domain.entities.column_schema import ColumnSchema
from log_metrics.domain.entities.data_point import Dimension
from log_metrics.domain.errors import DuplicateHeaderRow, PipelineError
from log_metrics.domain.services.batch_submitter import BatchSubmitter
from log_metrics.domain.services.header_parser import is_timestamp_token, parse_header, split_line
from log_metrics.domain.services.pipeline_stats import PipelineStats
from log_metrics.domain.services.row_translator import is_numeric, translate_row

logger = logging.getLogger(__name__)


class PipelineState(str, Enum):
    AWAITING_SCHEMA = "awaiting_schema"
    STREAMING = "streaming"


class MetricsPipeline:
    """Turns a stream of CSV stats lines into metric submissions.

    The first line that names a "time" column defines the schema. Later lines
    are data, except:

    - a repeated header, or a row whose time cell reads "time", is skipped
      silently
    - any other line naming a "time" column replaces the schema, which is
      what a server restart or reconnect looks like

    handle_line() never raises; failures are logged and the line is dropped.
    """

    def __init__(
        self,
        submitter: BatchSubmitter,
        dimensions: Sequence[Dimension] = (),
        stats: Optional[PipelineStats] = None,
    ):
        self.submitter = submitter
        self.dimensions: Tuple[Dimension, ...] = tuple(dimensions)
        self.stats = stats or submitter.stats
        self._schema: Optional[ColumnSchema] = None

    @property
    def schema(self) -> Optional[ColumnSchema]:
        return self._schema

    @property
    def state(self) -> PipelineState:
        if self._schema is None:
            return PipelineState.AWAITING_SCHEMA
        return PipelineState.STREAMING

    def handle_line(self, line: str) -> None:
        """Process one line. Errors are reported, never raised."""
        self.stats.increment("lines_received")
        if not line.strip():
            return

        try:
            self._route(line)
        except PipelineError as e:
            self.stats.increment("rows_dropped")
            logger.error(f"❌ {type(e).__name__}: {e}")
        except Exception as e:
            self.stats.increment("rows_dropped")
            logger.exception(f"💥 Unexpected error while sending metric {line!r}: {e}")

    def handle_lines(self, lines: Iterable[str]) -> None:
        for line in lines:
            self.handle_line(line.rstrip("\r\n"))

    def define_schema(self, tokens: Sequence[str], line: Optional[str] = None) -> ColumnSchema:
        """Parse a header and make it the current schema.

        Raises:
            SchemaMissingError: If the header is not usable; the previous
                schema, if any, stays in place
        """
        schema = parse_header(tokens, line)
        self._schema = schema
        self.stats.increment("headers_parsed")
        logger.info(
            f"📋 Schema defined: {len(schema.metric_columns)} metrics out of "
            f"{len(schema)} columns"
        )
        return schema

    def reset(self) -> None:
        """Forget the schema; the next line is parsed as a header."""
        self._schema = None
        logger.info("🔄 Schema reset")

    def _route(self, line: str) -> None:
        tokens = split_line(line)

        if self._schema is None:
            self.define_schema(tokens, line)
            return

        if self._is_new_header(tokens):
            logger.info(f"🔄 Header changed: {len(tokens)} columns, was {len(self._schema)}")
            self.define_schema(tokens, line)
            return

        try:
            points = translate_row(tokens, self._schema, self.dimensions, line)
        except DuplicateHeaderRow:
            self.stats.increment("duplicate_headers")
            logger.debug("Skipping repeated header line")
            return

        self.stats.increment("rows_translated")
        self.submitter.submit(points, origin=line)

    def _is_new_header(self, tokens: Sequence[str]) -> bool:
        """Whether a line names a different set of columns than the current schema.

        A data row whose time cell reads "time" keeps numeric values in the
        metric columns; such a row is a stray header marker, not a new header.
        """
        schema = self._schema
        if tuple(tokens) == schema.header:
            return False
        if not any(is_timestamp_token(t) for t in tokens):
            return False
        if len(tokens) != len(schema) or tokens[schema.timestamp_index] != "time":
            return True
        return not all(is_numeric(tokens[i]) for i, _ in schema.metric_columns)
