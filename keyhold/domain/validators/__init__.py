"""Validation rules and their registry."""

from keyhold.domain.validators.functions import (
    email_address,
    jwt_shape,
    min_length,
    no_whitespace,
    one_of,
    phone_number,
    required,
    uuid_format,
)
from keyhold.domain.validators.registry import (
    VALIDATION_RULES_REGISTRY,
    ValidationCategory,
    ValidationRuleMetadata,
    get_validation_rule,
)

__all__ = [
    "VALIDATION_RULES_REGISTRY",
    "ValidationCategory",
    "ValidationRuleMetadata",
    "email_address",
    "get_validation_rule",
    "jwt_shape",
    "min_length",
    "no_whitespace",
    "one_of",
    "phone_number",
    "required",
    "uuid_format",
]
