"""Domain classification rule table.

Rules are evaluated top to bottom and the first matching predicate decides
the category. Names matching no rule fall back to :data:`DEFAULT_DOMAIN`.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
import re

from ..entities.schema import DomainCategory

DomainRule = tuple[Callable[[str], bool], DomainCategory]


def prefix_rule(prefix: str, category: DomainCategory) -> DomainRule:
    pattern = re.compile(rf"^{re.escape(prefix)}_")
    return (lambda name: bool(pattern.match(name)), category)


def pattern_rule(pattern: str, category: DomainCategory) -> DomainRule:
    compiled = re.compile(pattern, re.IGNORECASE)
    return (lambda name: bool(compiled.search(name)), category)


# Event columns first so an "ae_" name never lands in a visit domain.
DOMAIN_RULES: tuple[DomainRule, ...] = (
    prefix_rule("ae", DomainCategory.EVENT),
    prefix_rule("id", DomainCategory.IDENTIFIER),
    prefix_rule("demo", DomainCategory.DEMOGRAPHIC),
    prefix_rule("adh", DomainCategory.ADHERENCE),
    prefix_rule("cog", DomainCategory.COGNITIVE),
    prefix_rule("med", DomainCategory.MEDICAL),
    prefix_rule("phys", DomainCategory.PHYSICAL),
    pattern_rule(r"drug_injection|week_\d|exercise_session", DomainCategory.ADHERENCE),
)

DEFAULT_DOMAIN = DomainCategory.MEDICAL


def classify_domain(
    name: str,
    rules: Sequence[DomainRule] = DOMAIN_RULES,
    default: DomainCategory = DEFAULT_DOMAIN,
) -> DomainCategory:
    for predicate, category in rules:
        if predicate(name):
            return category
    return default
