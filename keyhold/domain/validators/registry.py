"""Validation Rules Registry.

Catalog of every rule factory with its category and documentation.
Compliance tests use it to check every rule is documented and exercised.
"""

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from keyhold.domain.validators.functions import (
    Validator,
    email_address,
    jwt_shape,
    min_length,
    no_whitespace,
    one_of,
    phone_number,
    required,
    uuid_format,
)


class ValidationCategory(str, Enum):
    """Categories for validation rules."""

    PRESENCE = "presence"
    LENGTH = "length"
    PATTERN = "pattern"
    TOKEN = "token"
    CHOICE = "choice"


@dataclass(frozen=True, kw_only=True)
class ValidationRuleMetadata:
    """Metadata for a single validation rule.

    Attributes:
        rule_name: Unique identifier for the rule.
        factory: Callable building the validator from its message (and
            rule parameters).
        description: Human-readable description of the rule.
        examples: Values that pass the rule.
        category: Category for grouping.
    """

    rule_name: str
    factory: Callable[..., Validator]
    description: str
    examples: list[str]
    category: ValidationCategory


VALIDATION_RULES_REGISTRY: dict[str, ValidationRuleMetadata] = {
    "required": ValidationRuleMetadata(
        rule_name="required",
        factory=required,
        description="Value must be present and not blank",
        examples=["Jane Doe"],
        category=ValidationCategory.PRESENCE,
    ),
    "min_length": ValidationRuleMetadata(
        rule_name="min_length",
        factory=min_length,
        description="Value must have at least N characters",
        examples=["secret1"],
        category=ValidationCategory.LENGTH,
    ),
    "no_whitespace": ValidationRuleMetadata(
        rule_name="no_whitespace",
        factory=no_whitespace,
        description="Value must not contain whitespace",
        examples=["p@ssw0rd"],
        category=ValidationCategory.PATTERN,
    ),
    "email_address": ValidationRuleMetadata(
        rule_name="email_address",
        factory=email_address,
        description="Value must look like local@domain.tld",
        examples=["jane@example.com"],
        category=ValidationCategory.PATTERN,
    ),
    "phone_number": ValidationRuleMetadata(
        rule_name="phone_number",
        factory=phone_number,
        description="Value must be exactly 10 digits",
        examples=["0241234567"],
        category=ValidationCategory.PATTERN,
    ),
    "jwt_shape": ValidationRuleMetadata(
        rule_name="jwt_shape",
        factory=jwt_shape,
        description="Value must have 3 or 5 dot-separated segments",
        examples=["header.payload.signature"],
        category=ValidationCategory.TOKEN,
    ),
    "one_of": ValidationRuleMetadata(
        rule_name="one_of",
        factory=one_of,
        description="Value must be one of an allowed set",
        examples=["Admin", "User"],
        category=ValidationCategory.CHOICE,
    ),
    "uuid_format": ValidationRuleMetadata(
        rule_name="uuid_format",
        factory=uuid_format,
        description="Value must be a UUID string",
        examples=["0192f5c4-7d1e-7c4b-9a57-3f6f2a1b9c10"],
        category=ValidationCategory.PATTERN,
    ),
}


def get_validation_rule(rule_name: str) -> ValidationRuleMetadata | None:
    return VALIDATION_RULES_REGISTRY.get(rule_name)
