"""Vertical Slice Architecture prompt assembly."""

from __future__ import annotations

from pathlib import Path

from modeller_mcp.core.discovery import ModelDiscoveryEngine, is_yaml_file, walk_yaml_files
from modeller_mcp.models.discovery import TYPE_SUFFIX, DiscoveryResult, ModelFileInfo
from modeller_mcp.prompts.rules import SDK_GENERATION_RULES, CodeGenerationRule, render_rules
from modeller_mcp.utils.errors import GenerationError, ModelNotFoundError
from modeller_mcp.utils.logging import get_logger

logger = get_logger("prompts.vsa")

SDK_TEMPLATE = "GenerateSDKFromDomainModel"
API_TEMPLATE = "GenerateAPIFromSDK"
YAML_DOCUMENT_SEPARATOR = "\n\n---\n\n"
FALLBACK_ENTITY = ("Entity", "Entities")

SDK_CONTEXT_INTRO = """\
# Generate SDK from Domain Model

Generate a .NET SDK for the domain model below using Vertical Slice Architecture (VSA).
Every feature lives in its own folder next to the requests, responses, validators and
extension methods that belong to it. The SDK is consumed by API projects, so public
types need XML documentation and stable names.

## Target Layout
- Root namespace: `{Namespace}`
- Feature folder: `{Namespace}/{FeatureName}/`
- Shared building blocks: `{Namespace}/Common/`

## Key Conventions
- Mark required non-nullable properties with the `required` keyword.
- Check Guid primary keys as Version 7 UUIDs with the `BeVersion7Uuid` helper.
- Provide `ToResponse` and `ToEntity` extension methods for every entity.

## Rules"""

API_REQUIREMENTS = """\
## Requirements

### 1. Project Structure
Create a complete .NET Minimal API project with the following structure:
```
{project}/
├── {project}.csproj
├── Program.cs
├── GlobalUsings.cs
├── appsettings.json
├── appsettings.Development.json
├── Data/
│   ├── {context}DbContext.cs
│   └── SeedData.cs
├── Extensions/
│   └── ServiceCollectionExtensions.cs
├── Services/
│   ├── [Entity]Service.cs (for each domain entity)
│   └── BusinessServices.cs
├── Endpoints/
│   └── [Entity]Endpoints.cs (for each domain entity)
└── Middleware/
    ├── ErrorHandlingMiddleware.cs
    └── ValidationMiddleware.cs
```

### 2. Project File Requirements
- Target .NET 9.0
- Reference the generated SDK project
- Include Entity Framework Core In-Memory provider
- Include Swagger/OpenAPI
- Include health checks
- Include logging

### 3. Entity Framework Setup
- Create DbContext with DbSets for all domain entities
- Use in-memory database for development
- Include proper configuration for all entities
- Create seed data with realistic test data

### 4. Service Layer
- Create service classes for each domain entity
- Implement business logic methods from the behavior models
- Use the SDK validators and result patterns
- Handle validation and error scenarios

### 5. Minimal API Endpoints
For each domain entity, create endpoints for:
- GET /[entities] - List all with filtering
- GET /[entities]/{id} - Get by ID
- POST /[entities] - Create new
- PUT /[entities]/{id} - Update existing
- DELETE /[entities]/{id} - Delete
- Additional business action endpoints based on behavior models

### 6. Validation and Error Handling
- Use SDK validators for input validation
- Implement proper error responses
- Use the SDK result patterns consistently
- Include proper HTTP status codes

### 7. Configuration
- Configure services properly
- Set up dependency injection
- Configure Entity Framework
- Configure Swagger/OpenAPI
- Configure logging

### 8. Business Logic Integration
Follow the behavior models defined in the YAML files to implement:
- Entity creation and updates
- Business validation rules
- State transitions
- Relationship management

## Implementation Guidelines

### Use VSA Patterns
- Follow Vertical Slice Architecture principles
- Organize by feature, not by technical layer
- Keep related code together
- Use the SDK models and validators

### Follow Domain Models
- Implement all entities defined in the YAML files
- Respect the relationships and constraints
- Use the business behaviors as API operations
- Maintain data integrity

### Modern API Practices
- Use minimal APIs instead of controllers
- Implement proper HTTP status codes
- Use async/await throughout
- Include comprehensive error handling
- Add input validation
- Include API documentation

### Code Quality
- Use proper naming conventions
- Include XML documentation
- Handle exceptions gracefully
- Use dependency injection
- Follow SOLID principles

## Expected Output
Generate all the necessary files for a complete, production-ready Minimal API project that:
1. References and uses the generated SDK
2. Implements all domain entities and behaviors
3. Provides a complete REST API
4. Includes proper validation and error handling
5. Can be built and run immediately
6. Includes comprehensive API documentation

The generated project should be a perfect integration showcase for the SDK, demonstrating \
how to build APIs using the domain models and VSA patterns."""


def pluralize(name: str) -> str:
    """Naive English plural: ``y`` becomes ``ies``, anything else gains ``s``."""
    if name.endswith("y"):
        return name[:-1] + "ies"
    return name + "s"


def extract_entity_names(model_files: list[Path]) -> tuple[str, str]:
    """Guess the primary entity name and its plural from model file names.

    The first ``*.Type.yaml`` file wins; its stem up to the first dot is the
    entity name. Falls back to ``Entity``/``Entities`` when no Type file is
    present.

    Example:
        extract_entity_names([Path("Sales/Prospect.Type.yaml")])
        # ("Prospect", "Prospects")
    """
    for path in sorted(model_files):
        stem = Path(path).stem
        if stem.endswith(TYPE_SUFFIX):
            entity = stem.split(".", 1)[0]
            return entity, pluralize(entity)

    logger.warning("No Type model file found, using generic entity names")
    return FALLBACK_ENTITY


class VsaPromptAssembler:
    """Renders code generation prompts from domain model YAML.

    Prompt assembly is plain templating: YAML content is embedded verbatim
    and never parsed or checked here.

    Example:
        assembler = VsaPromptAssembler()
        prompt = assembler.build_sdk_prompt(yaml_text, "Prospects", "Sales.Sdk")
    """

    def __init__(
        self,
        rules: list[CodeGenerationRule] | None = None,
        discovery: ModelDiscoveryEngine | None = None,
    ):
        self.rules = rules if rules is not None else SDK_GENERATION_RULES
        self.discovery = discovery or ModelDiscoveryEngine()

    def available_templates(self) -> list[str]:
        """Names of the prompt templates this assembler can render."""
        return [SDK_TEMPLATE, API_TEMPLATE]

    def system_context(self, namespace: str, feature_name: str) -> str:
        """SDK instructions with the rule catalogue for one feature."""
        intro = SDK_CONTEXT_INTRO.replace("{Namespace}", namespace).replace(
            "{FeatureName}", feature_name
        )
        rules = render_rules(self.rules, namespace=namespace, feature_name=feature_name)
        return f"{intro}\n\n{rules}"

    def build_sdk_prompt(self, domain_yaml: str, feature_name: str, namespace: str) -> str:
        """Build the SDK generation prompt for one feature.

        Args:
            domain_yaml: Type and Behaviour YAML, embedded verbatim
            feature_name: Feature folder name, e.g. Prospects
            namespace: Target namespace, e.g. Sales.Sdk

        Returns:
            Prompt text
        """
        logger.debug(f"Building SDK prompt for feature {feature_name} in {namespace}")
        sections = [
            "# System Context",
            self.system_context(namespace, feature_name),
            "",
            "# Generation Request",
            f"**Target Namespace**: {namespace}",
            f"**Feature Name**: {feature_name}",
            "",
            "# Domain Model YAML",
            "```yaml",
            domain_yaml,
            "```",
            "",
            "# Instructions",
            f"Generate a complete SDK vertical slice for the {feature_name} feature "
            "using the provided domain model.",
            "Follow the VSA patterns and guidelines specified above.",
            "Provide complete, compilable C# files with proper namespaces and documentation.",
        ]
        return "\n".join(sections) + "\n"

    def build_domain_sdk_prompt(self, domain_folder: Path | str) -> str:
        """Build an SDK prompt covering every model of a domain folder.

        The namespace is derived from the path below the last ``models``
        segment, e.g. ``models/Business/CustomerManagement`` becomes
        ``Business.CustomerManagement.Sdk``.

        Raises:
            GenerationError: If the folder is missing, outside a models tree,
                or holds no YAML files
        """
        folder = Path(domain_folder)
        if not folder.is_dir():
            raise GenerationError(f"Domain folder not found: {folder}")

        parts = folder.resolve().parts
        models_index = max(
            (i for i, part in enumerate(parts) if part.lower() == "models"), default=-1
        )
        if models_index == -1 or models_index >= len(parts) - 1:
            raise GenerationError(
                f"Invalid domain path structure. Expected path containing 'models' folder: {folder}"
            )
        namespace = ".".join(parts[models_index + 1:]) + ".Sdk"

        yaml_files = sorted(p for p in folder.iterdir() if p.is_file() and is_yaml_file(p.name))
        if not yaml_files:
            raise GenerationError(f"No YAML model files found in domain folder: {folder}")

        features: list[str] = []
        definitions: list[str] = []
        for path in yaml_files:
            if path.stem.lower().endswith(TYPE_SUFFIX.lower()):
                feature = path.stem[: -len(TYPE_SUFFIX)]
                if feature not in features:
                    features.append(feature)
            content = path.read_text(encoding="utf-8")
            definitions.append(f"# {path.name}\n```yaml\n{content}\n```\n")

        primary = features[0] if len(features) == 1 else parts[-1]

        sections = [
            self.system_context(namespace, primary),
            "",
            "---",
            "",
            "# Project Configuration",
            f"**Target Namespace**: {namespace}",
            f"**Primary Feature**: {primary}",
            f"**All Features**: {', '.join(features)}",
            f"**Domain Path**: {folder}",
            "",
            "## Domain Model Definitions",
            "\n".join(definitions),
        ]
        return "\n".join(sections)

    def load_feature_yaml(self, discovery: DiscoveryResult, feature_name: str) -> str:
        """Read the Type YAML of a feature, joined with its Behaviour YAML.

        The feature name is singularized by stripping trailing ``s``
        characters, so ``Prospects`` looks for ``Prospect.Type.yaml``.

        Raises:
            ModelNotFoundError: If no Type file exists for the feature
        """
        entity = feature_name.rstrip("s")
        type_file = self._find_file(discovery, f"{entity}.Type.yaml")
        if type_file is None:
            raise ModelNotFoundError(feature_name)

        content = type_file.path.read_text(encoding="utf-8")
        behaviour_file = self._find_file(discovery, f"{entity}.Behaviour.yaml")
        if behaviour_file is not None:
            behaviour = behaviour_file.path.read_text(encoding="utf-8")
            if behaviour:
                content = f"{content}{YAML_DOCUMENT_SEPARATOR}{behaviour}"
        return content

    def build_api_prompt(
        self,
        sdk_path: Path | str,
        domain_path: Path | str,
        project_name: str,
        namespace: str,
        output_path: Path | str,
    ) -> str:
        """Build the Minimal API generation prompt.

        Lists the SDK source files and embeds every domain model file.

        Raises:
            GenerationError: If discovery of the domain path reports errors
        """
        sdk_path = Path(sdk_path)
        domain_path = Path(domain_path)

        discovery = self.discovery.discover(domain_path)
        if discovery.errors:
            raise GenerationError(f"Failed to discover models: {', '.join(discovery.errors)}")

        sdk_files = sorted(p for p in sdk_path.rglob("*.cs") if p.is_file())
        sdk_structure = "\n".join(f"- {p.relative_to(sdk_path).as_posix()}" for p in sdk_files)

        model_files = walk_yaml_files(domain_path, [])
        definitions = [
            f"## {p.name}\n```yaml\n{p.read_text(encoding='utf-8')}\n```" for p in model_files
        ]

        entity, entities = extract_entity_names(model_files)
        requirements = (
            API_REQUIREMENTS.replace("{project}", project_name)
            .replace("{context}", project_name.split(".")[-1])
            .replace("[Entity]", entity)
            .replace("[entities]", entities.lower())
        )

        sections = [
            "# Generate Minimal API Project from SDK",
            "",
            "## Project Requirements",
            f"- **Project Name:** {project_name}",
            f"- **Namespace:** {namespace}",
            f"- **SDK Reference:** {sdk_path}",
            f"- **Output Path:** {output_path}",
            "",
            "## SDK Structure Available",
            "The following SDK components are available for use:",
            "```",
            sdk_structure,
            "```",
            "",
            "## Domain Model Definitions",
            "\n\n".join(definitions),
            "",
            "## Domain Entities",
            f"- **Primary Entity:** {entity}",
            f"- **Collection Route:** /{entities.lower()}",
            "",
            requirements,
        ]
        return "\n".join(sections)

    @staticmethod
    def _find_file(discovery: DiscoveryResult, name: str) -> ModelFileInfo | None:
        target = name.lower()
        for info in discovery.all_files():
            if info.name.lower() == target:
                return info
        return None
