from .issues import DataQualityIssue, IssueKind
from .schema import (
    DomainCategory,
    SchemaDictionary,
    SchemaEntry,
    TemporalCategory,
    ValueType,
)

__all__ = [
    "DataQualityIssue",
    "DomainCategory",
    "IssueKind",
    "SchemaDictionary",
    "SchemaEntry",
    "TemporalCategory",
    "ValueType",
]
