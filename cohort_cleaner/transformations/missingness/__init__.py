from .invariant_propagator import InvariantPropagator
from .missingness_resolver import MissingnessResolver, patient_level_missing_mask

__all__ = ["InvariantPropagator", "MissingnessResolver", "patient_level_missing_mask"]
