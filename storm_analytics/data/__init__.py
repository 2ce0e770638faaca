"""Data loading, cleaning pipeline, and in-memory event store."""
from .loader import SchemaError, discover_inputs, load_all_files
from .store import DataStore
from .schemas import EventCategory, EventFilter, GroupBy, RepairDiagnostics
from .normalize import normalize_label, classify_label, classify_labels
from .pipeline import PipelineResult, filter_by_support, run_pipeline
