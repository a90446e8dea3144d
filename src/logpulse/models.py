"""Pydantic models for the JSON analysis report"""

from pydantic import BaseModel, ConfigDict, Field


class SourceReport(BaseModel):
    """Source frequency section (FIND_COMMON_SOURCE)

    Attributes:
        sources: Source names, in counting order
        source_counts: Counts aligned with ``sources``
        most_common_source: Most frequent source, None if no source was counted
        most_common_source_count: Its count, 0 if none
        least_common_source: Least frequent source, None if no source was counted
        least_common_source_count: Its count, 0 if none
    """

    sources: list[str] = Field(default_factory=list, examples=[["Server1", "Database"]])
    source_counts: list[int] = Field(default_factory=list, examples=[[12, 3]])
    most_common_source: str | None = Field(None, examples=["Server1"])
    most_common_source_count: int = Field(0, examples=[12])
    least_common_source: str | None = Field(None, examples=["Database"])
    least_common_source_count: int = Field(0, examples=[3])


class FileAnomalies(BaseModel):
    """Bursts found in one file"""

    anomalies: list[str] = Field(
        default_factory=list,
        examples=[["2024-01-01 10:00:00", "2024-01-01 10:00:10"]],
        description="Start timestamp of each burst (yyyy-MM-dd HH:mm:ss)",
    )
    anomalies_count: int = Field(0, examples=[2])


class RunSummary(BaseModel):
    """Bookkeeping about the run that produced the report"""

    directory: str = Field(..., examples=["logs"])
    files_analyzed: int = Field(..., examples=[3])
    failed_files: dict[str, str] = Field(default_factory=dict, description="File path -> I/O error")
    skipped_files: list[str] = Field(default_factory=list, description="Files never started before the deadline")
    abandoned_files: list[str] = Field(
        default_factory=list, description="Files still being read when the run gave up on them"
    )
    lines_parsed: int = Field(0, examples=[1200])
    lines_skipped: int = Field(0, examples=[4])
    timed_out: bool = Field(False)
    time: float = Field(..., examples=[0.123], description="Run duration in seconds")


class AnalysisReport(BaseModel):
    """Full report written to the output file

    Sections for inactive analyzers are omitted, except DETECT_ANOMALIES which
    is always present: an empty list when nothing was found, otherwise a
    one-element list holding the per-file mapping.
    """

    model_config = ConfigDict(populate_by_name=True)

    count_levels: dict[str, int] | None = Field(None, alias="COUNT_LEVELS", examples=[{"info": 10, "error": 2}])
    find_common_source: SourceReport | None = Field(None, alias="FIND_COMMON_SOURCE")
    detect_anomalies: list[dict[str, FileAnomalies]] = Field(default_factory=list, alias="DETECT_ANOMALIES")
    run: RunSummary | None = Field(None, alias="RUN")
