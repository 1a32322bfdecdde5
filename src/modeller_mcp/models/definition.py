"""Domain model YAML document models.

These mirror the camelCase YAML keys through aliases. Unknown keys are
ignored and empty YAML lists (``behaviours:`` with no items) parse as [].
"""

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, Field, ValidationInfo, field_validator


class DefinitionModel(BaseModel):
    """Base for YAML-backed definitions."""

    model_config = {"populate_by_name": True, "extra": "ignore"}

    @field_validator("*", mode="before")
    @classmethod
    def _none_to_empty_list(cls, value: Any, info: ValidationInfo) -> Any:
        field = cls.model_fields.get(info.field_name)
        if value is None and field is not None and field.default_factory is list:
            return []
        return value


class AttributeConstraints(DefinitionModel):
    """Constraints on an attribute type or usage."""

    min_length: int | None = Field(default=None, alias="minLength")
    max_length: int | None = Field(default=None, alias="maxLength")
    minimum: Any = None
    maximum: Any = None
    pattern: str | None = None
    decimal_places: int | None = Field(default=None, alias="decimalPlaces")
    enum: list[Any] | None = None
    nullable: bool | None = None
    unit: str | None = None
    example: Any = None


class AttributeUsage(DefinitionModel):
    """An attribute used by a model."""

    name: str | None = None
    type: str | None = None
    required: bool = False
    unique: bool = False
    default: Any = None
    summary: str | None = None
    remarks: str | None = None
    constraints: AttributeConstraints | None = None


class Behaviour(DefinitionModel):
    """A named operation on one or more entities."""

    name: str | None = None
    summary: str | None = None
    remarks: str | None = None
    entities: list[str] = Field(default_factory=list)
    preconditions: list[Any] = Field(default_factory=list)
    effects: list[Any] = Field(default_factory=list)


class Scenario(DefinitionModel):
    """A Given-When-Then scenario."""

    name: str | None = None
    given: list[Any] = Field(default_factory=list)
    when: list[Any] = Field(default_factory=list)
    then: list[Any] = Field(default_factory=list)


class ModelDefinition(DefinitionModel):
    """A BDD model document (``*.Type.yaml`` or ``*.Behaviour.yaml``)."""

    model: str | None = None
    summary: str | None = None
    remarks: str | None = None
    owned_by: str | None = Field(default=None, alias="ownedBy")
    attribute_usages: list[AttributeUsage] = Field(default_factory=list, alias="attributeUsages")
    behaviours: list[Behaviour] = Field(default_factory=list)
    scenarios: list[Scenario] = Field(default_factory=list)


class AttributeTypeDefinition(DefinitionModel):
    """A reusable attribute type."""

    name: str | None = None
    type: str | None = None
    extends: str | None = None
    format: str | None = None
    constraints: AttributeConstraints | None = None
    summary: str | None = None
    remarks: str | None = None


class AttributeTypesDocument(DefinitionModel):
    """A document holding ``attributeTypes:``."""

    attribute_types: list[AttributeTypeDefinition] = Field(
        default_factory=list, alias="attributeTypes"
    )


class EnumItem(DefinitionModel):
    """A single enum member."""

    name: str | None = None
    display: str | None = None
    value: Any = None


class EnumDefinition(DefinitionModel):
    """An enum document."""

    enum: str | None = None
    summary: str | None = None
    remarks: str | None = None
    items: list[EnumItem] = Field(default_factory=list)


class Claim(DefinitionModel):
    """An action on a resource granted by a validation profile."""

    action: str | None = None
    resource: str | None = None


class ValidationProfile(DefinitionModel):
    """A named set of claims and rules."""

    name: str | None = None
    claims: list[Claim] = Field(default_factory=list)
    attribute_rules: dict[str, Any] = Field(default_factory=dict, alias="attributeRules")
    behaviour_rules: dict[str, Any] = Field(default_factory=dict, alias="behaviourRules")


class ValidationProfilesDocument(DefinitionModel):
    """A document holding ``validationProfiles:``."""

    validation_profiles: list[ValidationProfile] = Field(
        default_factory=list, alias="validationProfiles"
    )


class FolderMetadata(DefinitionModel):
    """Contents of a ``_meta.yaml`` file."""

    name: str | None = None
    summary: str | None = None
    remarks: str | None = None
    owners: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    dependencies: list[str] = Field(default_factory=list)
    version: Any = None
    status: str | None = None
    last_reviewed: date | datetime | str | None = Field(default=None, alias="lastReviewed")
