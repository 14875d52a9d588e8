from .record_splitter import RecordSplitter, SplitRecords, validate_visit_keys

__all__ = ["RecordSplitter", "SplitRecords", "validate_visit_keys"]
