"""Domain layer for Cohort Cleaner.

Entities (variable dictionary, data-quality issues), fatal error types and
pure services. Independent of I/O and presentation.
"""
