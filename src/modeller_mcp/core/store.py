"""In-process registry of validated model definitions."""

from __future__ import annotations

import threading
from typing import Any

from modeller_mcp.models.definition import ModelDefinition


class ValidatedModelStore:
    """Thread-safe map of validated BDD models keyed by domain and name.

    One store is created by the host process and handed to every consumer
    that needs it; there is no module-level instance.

    Example:
        store = ValidatedModelStore()
        store.register("Prospect", "Sales", definition)
        schema = store.schema("Sales", "Prospect")
    """

    def __init__(self) -> None:
        self._models: dict[str, ModelDefinition] = {}
        self._lock = threading.Lock()

    @staticmethod
    def key(domain_path: str, model_name: str) -> str:
        """Build the registry key for a model."""
        return f"{domain_path}:{model_name}"

    def register(self, model_name: str, domain_path: str, definition: ModelDefinition) -> None:
        """Add or replace a validated model."""
        with self._lock:
            self._models[self.key(domain_path, model_name)] = definition

    def get(self, domain_path: str, model_name: str) -> ModelDefinition | None:
        """Get a validated model, or None when it has not been validated."""
        with self._lock:
            return self._models.get(self.key(domain_path, model_name))

    def domain_models(self, domain_path: str) -> dict[str, ModelDefinition]:
        """Get all validated models of one domain keyed by model name."""
        prefix = f"{domain_path}:"
        with self._lock:
            return {
                key[len(prefix):]: definition
                for key, definition in self._models.items()
                if key.startswith(prefix)
            }

    def all(self) -> dict[str, ModelDefinition]:
        """Snapshot of every registered model keyed by ``domain:name``."""
        with self._lock:
            return dict(self._models)

    def schema(self, domain_path: str, model_name: str) -> dict[str, Any] | None:
        """Summarize a validated model's attributes and behaviours."""
        definition = self.get(domain_path, model_name)
        if definition is None:
            return None
        return {
            "name": definition.model,
            "summary": definition.summary,
            "attributes": [
                {
                    "name": usage.name,
                    "type": usage.type,
                    "required": usage.required,
                    "summary": usage.summary,
                }
                for usage in definition.attribute_usages
            ],
            "behaviours": [
                {
                    "name": behaviour.name,
                    "summary": behaviour.summary,
                    "entity_count": len(behaviour.entities),
                }
                for behaviour in definition.behaviours
            ],
            "domain": domain_path,
        }

    def clear(self) -> None:
        """Remove every registered model."""
        with self._lock:
            self._models.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._models)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._models
