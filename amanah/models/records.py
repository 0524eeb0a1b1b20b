from pydantic import BaseModel, ConfigDict, Field

from amanah.enums import MemberType, Relation


class FamilyMember(BaseModel):
    id: int = Field(..., description="Family member primary key")
    type: MemberType = Field(
        ..., description="Whether the member has a registered account"
    )
    name: str = Field(..., description="Display name of the family member")
    relation: Relation = Field(..., description="Relation to the estate owner")
    email: str | None = Field(None, description="Contact email address")
    ic_number: str | None = Field(
        None, alias="icNumber", description="National identity card number"
    )

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        extra="ignore",
        json_schema_extra={
            "example": {
                "id": 7,
                "type": "registered",
                "name": "Aisyah binti Ahmad",
                "relation": "DAUGHTER",
                "email": "aisyah@example.com",
                "icNumber": "900101-14-5678",
            }
        },
    )


class BeneficiaryInput(BaseModel):
    family_member_id: int | None = Field(
        None, alias="familyMemberId", description="Registered family member reference"
    )
    non_registered_family_member_id: int | None = Field(
        None,
        alias="nonRegisteredFamilyMemberId",
        description="Non-registered family member reference",
    )
    relation: Relation | None = Field(None, description="Relation to the owner")
    share_percentage: float | None = Field(
        None, alias="sharePercentage", description="Share of the estate, 0-100"
    )
    share_description: str | None = Field(None, alias="shareDescription")

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class AssetInput(BaseModel):
    asset_id: int | None = Field(None, alias="assetId")
    allocated_value: float | None = Field(None, alias="allocatedValue")
    allocated_percentage: float | None = Field(None, alias="allocatedPercentage")

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")
