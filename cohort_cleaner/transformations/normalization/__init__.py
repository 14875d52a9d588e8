from .column_normalizer import ColumnNormalizer

__all__ = ["ColumnNormalizer"]
