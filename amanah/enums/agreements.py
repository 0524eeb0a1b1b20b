from enum import Enum


class AgreementStatus(str, Enum):
    DRAFT = "DRAFT"
    PENDING_SIGNATURES = "PENDING_SIGNATURES"
    PENDING_WITNESS = "PENDING_WITNESS"
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    EXPIRED = "EXPIRED"


class DistributionType(str, Enum):
    FARAID = "FARAID"
    HIBAH = "HIBAH"
    WASIYYAH = "WASIYYAH"
    WAKAF = "WAKAF"


class SignerType(str, Enum):
    OWNER = "owner"
    BENEFICIARY = "beneficiary"
    WITNESS = "witness"
