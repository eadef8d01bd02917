"""Style rules and the validator that runs them."""

from stylecheck.validation.categories import PROPERTY_CATEGORIES, Category, category_of
from stylecheck.validation.rules import ALL_RULES, RULES_BY_ID, Rule, RuleFunc
from stylecheck.validation.validator import validate

__all__ = [
    "ALL_RULES",
    "RULES_BY_ID",
    "Rule",
    "RuleFunc",
    "Category",
    "PROPERTY_CATEGORIES",
    "category_of",
    "validate",
]
