from .records import AssetInput, BeneficiaryInput, FamilyMember
from .validation import ValidationResult

__all__ = [
    "AssetInput",
    "BeneficiaryInput",
    "FamilyMember",
    "ValidationResult",
]
