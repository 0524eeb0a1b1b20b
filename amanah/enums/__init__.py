from .agreements import AgreementStatus, DistributionType, SignerType
from .relations import MemberType, Relation

__all__ = [
    "AgreementStatus",
    "DistributionType",
    "MemberType",
    "Relation",
    "SignerType",
]
