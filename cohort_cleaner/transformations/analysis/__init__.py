from .decoders import DECODERS, Decoded, decode_date, decode_factor, decode_numeric
from .projector import AnalysisProjector

__all__ = [
    "DECODERS",
    "AnalysisProjector",
    "Decoded",
    "decode_date",
    "decode_factor",
    "decode_numeric",
]
