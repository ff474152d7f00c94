from .batch_submitter import MAX_BATCH_SIZE, BatchSubmitter, partition
from .header_parser import parse_header, split_line
from .pipeline import MetricsPipeline, PipelineState
from .pipeline_stats import PipelineStats
from .row_translator import translate_row
from .unit_classifier import classify_unit, normalize_token

__all__ = [
    "MAX_BATCH_SIZE",
    "BatchSubmitter",
    "partition",
    "parse_header",
    "split_line",
    "MetricsPipeline",
    "PipelineState",
    "PipelineStats",
    "translate_row",
    "classify_unit",
    "normalize_token",
]
