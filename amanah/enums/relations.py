from enum import Enum


class Relation(str, Enum):
    FATHER = "FATHER"
    MOTHER = "MOTHER"
    HUSBAND = "HUSBAND"
    WIFE = "WIFE"
    # Generic family-record relation; gender decides HUSBAND or WIFE.
    SPOUSE = "SPOUSE"
    SON = "SON"
    DAUGHTER = "DAUGHTER"
    SIBLING = "SIBLING"
    GRANDFATHER = "GRANDFATHER"
    GRANDMOTHER = "GRANDMOTHER"
    GRANDSON = "GRANDSON"
    GRANDDAUGHTER = "GRANDDAUGHTER"
    UNCLE = "UNCLE"
    AUNT = "AUNT"
    NEPHEW = "NEPHEW"
    NIECE = "NIECE"
    COUSIN = "COUSIN"
    OTHER = "OTHER"


class MemberType(str, Enum):
    REGISTERED = "registered"
    NON_REGISTERED = "non-registered"
