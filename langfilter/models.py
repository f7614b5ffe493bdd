"""
Pydantic models for data validation and serialization
"""

from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import List, Optional
from pydantic import BaseModel, Field, validator


class Outcome(Enum):
    PROCESSED = "processed"
    SKIPPED = "skipped"
    ERROR = "error"
    INTERRUPTED = "interrupted"


# Reasons recorded for skipped and failed files
REASON_NO_WHITELISTED = "no whitelisted languages"
REASON_BACKUP_FAILED = "backup creation failed"
REASON_NO_TRACKS_TO_MAP = "no audio tracks to map"
REASON_PROCESSING_FAILED = "processing failed"
REASON_TIMED_OUT = "processing timed out"
REASON_REPLACE_FAILED = "failed to replace original"
REASON_INTERRUPTED = "interrupted"
REASON_DRY_RUN = "dry run"


class AudioTrack(BaseModel):
    """Audio stream as reported by ffprobe"""
    index: int
    language: Optional[str] = None

    @validator('index')
    def validate_index(cls, v):
        if v < 0:
            raise ValueError('Stream index must be non-negative')
        return v


class TrackSelection(BaseModel):
    """Audio stream chosen for the output file"""
    source_index: int
    output_position: int
    language: str
    default: bool = False


class FileAnalysis(BaseModel):
    """Probe result and track selection for a single file"""
    file_path: Path
    tracks: List[AudioTrack] = Field(default_factory=list)
    selections: List[TrackSelection] = Field(default_factory=list)

    @property
    def has_audio_metadata(self) -> bool:
        return len(self.tracks) > 0

    @property
    def eligible(self) -> bool:
        return len(self.selections) > 0

    @property
    def audio_languages(self) -> List[str]:
        return [track.language or 'unknown' for track in self.tracks]

    @property
    def default_selection(self) -> Optional[TrackSelection]:
        return next((s for s in self.selections if s.default), None)


class FilterConfig(BaseModel):
    """Configuration for a filtering run"""
    languages: List[str]
    default_language: Optional[str] = None
    target: Path
    timeout: Optional[float] = None
    probe_timeout: float = 60.0
    keep_backup: bool = False
    dry_run: bool = False
    debug: bool = False
    workers: int = Field(default=1, ge=1)
    run_token: Optional[str] = None

    @validator('languages')
    def validate_languages(cls, v):
        if not v:
            raise ValueError('At least one language is required')
        return v

    @validator('default_language')
    def validate_default_language(cls, v, values):
        if v is not None and v not in values.get('languages', []):
            raise ValueError('Default language must be one of the kept languages')
        return v

    @validator('timeout', 'probe_timeout')
    def validate_timeout(cls, v):
        if v is not None and v <= 0:
            raise ValueError('Timeouts must be positive')
        return v


class FileResult(BaseModel):
    """Result of processing a single file"""
    file_path: Path
    outcome: Outcome
    reason: Optional[str] = None
    selections: List[TrackSelection] = Field(default_factory=list)
    processing_time: Optional[float] = None

    @validator('processing_time')
    def validate_processing_time(cls, v):
        if v is not None and v < 0:
            raise ValueError('Processing time must be non-negative')
        return v

    @property
    def summary(self) -> str:
        if self.reason:
            return f"{self.file_path}: {self.reason}"
        return str(self.file_path)


class RunStats(BaseModel):
    """Statistics for one run, filled in as files finish"""
    total_files: int = 0
    processed: List[FileResult] = Field(default_factory=list)
    skipped: List[FileResult] = Field(default_factory=list)
    errored: List[FileResult] = Field(default_factory=list)
    interrupted: bool = False
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None

    @property
    def processed_count(self) -> int:
        return len(self.processed)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)

    @property
    def error_count(self) -> int:
        return len(self.errored)

    @property
    def finished_count(self) -> int:
        return self.processed_count + self.skipped_count + self.error_count

    @property
    def processing_duration(self) -> Optional[float]:
        if self.start_time and self.end_time:
            return (self.end_time - self.start_time).total_seconds()
        return None

    def add_result(self, result: FileResult):
        """Add a processing result to the statistics"""
        if result.outcome == Outcome.PROCESSED:
            self.processed.append(result)
        elif result.outcome == Outcome.SKIPPED:
            self.skipped.append(result)
        else:
            if result.outcome == Outcome.INTERRUPTED:
                self.interrupted = True
            self.errored.append(result)
