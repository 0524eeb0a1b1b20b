from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Collected outcome of a validator.

    Errors block the operation the caller is about to perform, warnings are
    informational only.
    """

    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @classmethod
    def from_messages(
        cls,
        errors: Iterable[str] = (),
        warnings: Iterable[str] = (),
    ) -> ValidationResult:
        error_list = list(errors)
        return cls(valid=not error_list, errors=error_list, warnings=list(warnings))

    def merge(self, *others: ValidationResult) -> ValidationResult:
        errors = list(self.errors)
        warnings = list(self.warnings)
        for other in others:
            errors.extend(other.errors)
            warnings.extend(other.warnings)
        return ValidationResult.from_messages(errors, warnings)

    def as_dict(self) -> dict[str, object]:
        return {
            "valid": self.valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
        }
