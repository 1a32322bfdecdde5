"""Code generation rules for Vertical Slice SDK prompts."""

from enum import Enum

from pydantic import BaseModel, Field


class RuleSeverity(str, Enum):
    """How strictly a generation rule must be followed."""

    CRITICAL = "critical"
    MANDATORY = "mandatory"
    GUIDELINE = "guideline"
    OPTIONAL = "optional"

    @property
    def label(self) -> str:
        return self.value.upper()


class RuleScope(str, Enum):
    """Part of the generated project a rule applies to."""

    GLOBAL = "global"
    DOMAIN = "domain"
    FILE = "file"


class CodeGenerationRule(BaseModel):
    """A single rule the generated SDK must comply with."""

    model_config = {"frozen": True}

    name: str = Field(description="Rule name")
    description: str = Field(description="What the rule requires")
    severity: RuleSeverity = Field(default=RuleSeverity.GUIDELINE, description="Rule severity")
    scope: RuleScope = Field(default=RuleScope.FILE, description="Rule scope")

    # Documentation
    format: str | None = Field(default=None, description="Expected file naming or layout")
    good_example: str | None = Field(default=None, description="Compliant example")
    bad_example: str | None = Field(default=None, description="Non-compliant example")


SDK_GENERATION_RULES = [
    CodeGenerationRule(
        name="GlobalUsings.cs File",
        description=(
            "A GlobalUsings.cs file must exist at the root of the SDK project with the "
            "System.* and Microsoft.* using statements."
        ),
        severity=RuleSeverity.MANDATORY,
        scope=RuleScope.GLOBAL,
        good_example="global using System;\nglobal using System.Collections.Generic;\n...",
        bad_example="using System; // in every file",
    ),
    CodeGenerationRule(
        name="Project Folder Structure",
        description=(
            "```text\n"
            "{Namespace}/\n"
            "├── GlobalUsings.cs              # MANDATORY - Create this first\n"
            "├── {FeatureName}/               # Feature folder (e.g., Cases/)\n"
            "└── Common/\n"
            "    ├── ApiResult.cs\n"
            "    └── ValidationExtensions.cs\n"
            "```"
        ),
        severity=RuleSeverity.CRITICAL,
        scope=RuleScope.GLOBAL,
        bad_example=(
            "- Models/ folder\n"
            "- Validators/ folder\n"
            "- Services/ folder\n"
            "- Any technical layer folders"
        ),
    ),
    CodeGenerationRule(
        name="Feature Folder Structure",
        description=(
            "All related components for a feature must be organized within a feature folder. "
            "Do not create technical layer folders like Models/, Validators/, or Services/."
        ),
        severity=RuleSeverity.MANDATORY,
        scope=RuleScope.DOMAIN,
        good_example="Customers/\n  CreateCustomerRequest.cs\n  CreateCustomerResponse.cs",
        bad_example="Models/\nValidators/\nServices/",
    ),
    CodeGenerationRule(
        name="Feature Folder Files",
        description=(
            "MUST include all relevant request and response files from the behaviours and the "
            "request validators.\n"
            "**NOTE** If the entity doesn't include behaviours assume Create, Read, Update, "
            "Delete is supported."
        ),
        format=(
            "- {CRUD}{EntityName}Request.cs            # If applicable, add Create, Read, Update and Delete requests\n"
            "- {CRUD}{EntityName}Response.cs           # MANDATORY - If request was added, add corresponding response\n"
            "- {CRUD}{EntityName}Validator.cs          # MANDATORY - If request was added, add corresponding validator\n"
            "or\n"
            "- {BehaviourName}{EntityName}Request.cs   # MANDATORY\n"
            "- {BehaviourName}{EntityName}Response.cs  # MANDATORY - If request was added, add corresponding response\n"
            "- {BehaviourName}{EntityName}Validator.cs # MANDATORY - If request was added, add corresponding validator"
        ),
        severity=RuleSeverity.MANDATORY,
        scope=RuleScope.FILE,
        good_example=(
            "Customers/\n  CreateCustomerRequest.cs\n  CreateCustomerResponse.cs\n"
            "  CreateCustomerValidator.cs"
        ),
        bad_example="Models/\nValidators/\nServices/",
    ),
    CodeGenerationRule(
        name="Property Declaration - Non-nullable String Fields",
        description="Required non-nullable string properties must use the 'required' keyword.",
        severity=RuleSeverity.MANDATORY,
        scope=RuleScope.FILE,
        good_example="public required string Name { get; init; }",
        bad_example="public string Name { get; init; } = string.Empty;",
    ),
    CodeGenerationRule(
        name="Property Declaration - Optional Fields",
        description="Optional properties must use nullable types (e.g., string? or int?).",
        severity=RuleSeverity.MANDATORY,
        scope=RuleScope.FILE,
        good_example="public string? Description { get; init; }",
        bad_example="public string Description { get; init; }",
    ),
    CodeGenerationRule(
        name="Guid Primary Key Validation",
        description=(
            "All Guid primary keys must be validated as Version 7 UUIDs using the provided "
            "BeVersion7Uuid method in FluentValidation rules."
        ),
        severity=RuleSeverity.CRITICAL,
        scope=RuleScope.FILE,
        good_example="RuleFor(x => x.Id).NotEmpty().Must(BeVersion7Uuid)",
        bad_example="RuleFor(x => x.Id).NotEmpty(); // Missing Version 7 check",
    ),
    CodeGenerationRule(
        name="Extension Methods - ToResponse/ToEntity",
        description="Each entity must have extension methods for ToResponse and ToEntity mapping.",
        severity=RuleSeverity.MANDATORY,
        scope=RuleScope.FILE,
        good_example="public static CustomerResponse ToResponse(this Customer entity) => new() { ... };",
        bad_example="// No extension methods implemented",
    ),
    CodeGenerationRule(
        name="Validator File Usings",
        description=(
            "Validator files must include 'using FluentValidation;' and "
            "'using FluentValidation.Results;' only in validator files, not in GlobalUsings."
        ),
        severity=RuleSeverity.GUIDELINE,
        scope=RuleScope.FILE,
        good_example="using FluentValidation;\nusing FluentValidation.Results;",
        bad_example="global using FluentValidation; // in GlobalUsings.cs",
    ),
    CodeGenerationRule(
        name="Result Pattern",
        description=(
            "Use a result pattern (e.g., ApiResult<T>) for operation outcomes, including "
            "validation errors and success/failure states."
        ),
        severity=RuleSeverity.GUIDELINE,
    ),
    CodeGenerationRule(
        name="Immutability with Records",
        description=(
            "Use C# record types for request and response models to ensure immutability "
            "and thread safety."
        ),
        severity=RuleSeverity.GUIDELINE,
    ),
    CodeGenerationRule(
        name="Input Validation with FluentValidation",
        description=(
            "All inputs must be validated using FluentValidation with comprehensive rules, "
            "including length, format, and required constraints."
        ),
        severity=RuleSeverity.MANDATORY,
    ),
    CodeGenerationRule(
        name="XML Documentation",
        description=(
            "All public types and members must include comprehensive XML documentation "
            "for API consumers."
        ),
        severity=RuleSeverity.GUIDELINE,
    ),
]


def render_rule(rule: CodeGenerationRule) -> str:
    """Render one rule as a markdown section."""
    lines = [
        f"### {rule.name}",
        f"**Severity**: {rule.severity.label} | **Scope**: {rule.scope.value}",
        "",
        rule.description,
    ]
    if rule.format:
        lines.extend(["", "**Format**:", rule.format])
    if rule.good_example:
        lines.extend(["", "**Good**:", "```csharp", rule.good_example, "```"])
    if rule.bad_example:
        lines.extend(["", "**Bad**:", "```text", rule.bad_example, "```"])
    return "\n".join(lines)


def render_rules(
    rules: list[CodeGenerationRule],
    namespace: str | None = None,
    feature_name: str | None = None,
) -> str:
    """Render a rule catalogue, ordered by severity.

    ``{Namespace}`` and ``{FeatureName}`` placeholders are substituted when
    values are given; other placeholders are left for the reader.
    """
    order = list(RuleSeverity)
    ordered = sorted(rules, key=lambda r: order.index(r.severity))
    text = "\n\n".join(render_rule(rule) for rule in ordered)
    if namespace is not None:
        text = text.replace("{Namespace}", namespace)
    if feature_name is not None:
        text = text.replace("{FeatureName}", feature_name)
    return text


def rules_by_severity(severity: RuleSeverity) -> list[CodeGenerationRule]:
    """Get the built-in rules of one severity."""
    return [rule for rule in SDK_GENERATION_RULES if rule.severity == severity]
