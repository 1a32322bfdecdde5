"""Audit sinks for gateway events."""

from __future__ import annotations

import asyncio
import json
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

import pydantic

from modeller_mcp.models.audit import (
    AuditEvent,
    LlmAuditEntry,
    PromptAuditEntry,
    SecurityViolationEntry,
)
from modeller_mcp.utils.config import AuditConfig
from modeller_mcp.utils.logging import get_logger

logger = get_logger("security.audit")

REDACTED = "[REDACTED_FOR_SECURITY]"
FILE_PREFIXES = {
    "prompt_validation": "prompt-audit",
    "llm_interaction": "llm-audit",
    "security_violation": "security-audit",
}


@runtime_checkable
class AuditSink(Protocol):
    """Receives audit events emitted by the gateway.

    Implementations must be safe to call from concurrent gateway runs.
    """

    async def log_prompt_validation(self, entry: PromptAuditEntry) -> None:
        """Record validation of a raw prompt."""
        ...

    async def log_llm_interaction(self, entry: LlmAuditEntry) -> None:
        """Record a generation call or a failed run."""
        ...

    async def log_security_violation(self, entry: SecurityViolationEntry) -> None:
        """Record a rejected prompt."""
        ...


class InMemoryAuditSink:
    """Keeps audit events in a list, in emission order.

    Example:
        sink = InMemoryAuditSink()
        gateway = SecureLlmGateway(backend, audit_sink=sink)
        await gateway.generate(request)
        print([event.event_type for event in sink.events])
    """

    def __init__(self) -> None:
        self.events: list[AuditEvent] = []
        self._lock = asyncio.Lock()

    async def log_prompt_validation(self, entry: PromptAuditEntry) -> None:
        await self._append(entry)

    async def log_llm_interaction(self, entry: LlmAuditEntry) -> None:
        await self._append(entry)

    async def log_security_violation(self, entry: SecurityViolationEntry) -> None:
        await self._append(entry)

    def of_type(self, event_type: str) -> list[AuditEvent]:
        """Events of one kind, e.g. ``llm_interaction``."""
        return [event for event in self.events if event.event_type == event_type]

    def for_operation(self, operation_id: str) -> list[AuditEvent]:
        """Events of one pipeline run."""
        return [event for event in self.events if event.operation_id == operation_id]

    async def _append(self, entry: AuditEvent) -> None:
        async with self._lock:
            self.events.append(entry)


class PromptAuditLogger:
    """Writes audit events to the package logger and to JSON-lines files.

    File records go to one file per event kind and UTC day, e.g.
    ``prompt-audit-2024-05-01.jsonl``. Raw prompt and response text is
    left out of file records unless the configuration asks for it. Audit
    failures are logged and never raised to the caller.

    Example:
        sink = PromptAuditLogger(AuditConfig(enable_file_logging=True, directory="logs/audit"))
        entries = await sink.read_prompt_entries(date(2024, 5, 1), date(2024, 5, 31))
    """

    def __init__(self, config: AuditConfig | None = None):
        self.config = config or AuditConfig()
        self.directory = Path(self.config.directory)
        self._file_lock = asyncio.Lock()

        if self.config.enable_file_logging and not self.directory.exists():
            self.directory.mkdir(parents=True, exist_ok=True)
            logger.info(f"Created audit log directory: {self.directory}")

    async def log_prompt_validation(self, entry: PromptAuditEntry) -> None:
        try:
            if self.config.enable_structured_logging:
                logger.info(
                    f"Prompt validation completed for model {entry.model_id} "
                    f"with risk level {entry.injection_risk.level.label}",
                    extra={"extra_fields": self._context_fields(entry)},
                )
                if entry.validation_result.issues:
                    logger.warning(
                        f"Prompt validation issues detected: {', '.join(entry.validation_result.issues)}"
                    )
            await self._write(entry)
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to log audit entry {entry.id}: {e}")

    async def log_llm_interaction(self, entry: LlmAuditEntry) -> None:
        try:
            if self.config.enable_structured_logging:
                logger.info(
                    f"LLM interaction completed for model {entry.model_id} with "
                    f"{entry.tokens_used} tokens in {entry.generation_duration_ms:.0f}ms",
                    extra={"extra_fields": self._context_fields(entry)},
                )
                if not entry.post_validation_passed:
                    logger.warning(
                        f"LLM response failed post-generation validation: "
                        f"{', '.join(entry.validation_errors)}"
                    )
            await self._write(entry)
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to log LLM interaction audit entry {entry.id}: {e}")

    async def log_security_violation(self, entry: SecurityViolationEntry) -> None:
        try:
            if self.config.enable_structured_logging:
                logger.warning(
                    f"SECURITY VIOLATION: {entry.violation} for model {entry.model_id} "
                    f"- Risk Level: {entry.injection_risk.level.label}",
                    extra={"extra_fields": self._context_fields(entry)},
                )
            await self._write(entry)
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to log security violation audit entry {entry.id}: {e}")

    async def read_prompt_entries(
        self,
        from_date: date,
        to_date: date,
        model_id: str | None = None,
        user_id: str | None = None,
    ) -> list[PromptAuditEntry]:
        """Read prompt validation entries back from the audit files.

        Args:
            from_date: First UTC day to include
            to_date: Last UTC day to include
            model_id: Only entries for this model
            user_id: Only entries for this user

        Returns:
            Matching entries, oldest file first; prompt text is redacted
            when it was not stored
        """
        if not self.config.enable_file_logging:
            logger.warning("File audit logging is disabled, cannot retrieve historical entries")
            return []

        entries: list[PromptAuditEntry] = []
        prefix = FILE_PREFIXES["prompt_validation"]
        for path in sorted(self.directory.glob(f"{prefix}-*.jsonl")):
            file_date = _file_date(path, prefix)
            if file_date is None or not from_date <= file_date <= to_date:
                continue
            for entry in await asyncio.to_thread(self._read_prompt_file, path):
                if model_id is not None and entry.model_id != model_id:
                    continue
                if user_id is not None and entry.security_context.user_id != user_id:
                    continue
                entries.append(entry)
        return entries

    def file_path(self, event: AuditEvent, day: date | None = None) -> Path:
        """Audit file receiving ``event`` on ``day`` (default: today, UTC)."""
        day = day or datetime.now(timezone.utc).date()
        return self.directory / f"{FILE_PREFIXES[event.event_type]}-{day.isoformat()}.jsonl"

    def record(self, event: AuditEvent) -> dict[str, Any]:
        """File record of an event, without raw content unless configured."""
        exclude: set[str] = set()
        if not self.config.log_prompt_content:
            exclude.add("original_prompt")
        if not self.config.log_response_content:
            exclude.add("response_content")
        data = event.model_dump(mode="json", exclude=exclude)
        data["entry_type"] = event.event_type
        return data

    async def _write(self, event: AuditEvent) -> None:
        if not self.config.enable_file_logging:
            return
        line = json.dumps(self.record(event), ensure_ascii=False)
        path = self.file_path(event)
        async with self._file_lock:
            await asyncio.to_thread(_append_line, path, line)

    def _read_prompt_file(self, path: Path) -> list[PromptAuditEntry]:
        entries = []
        try:
            lines = path.read_text(encoding="utf-8").splitlines()
        except OSError as e:
            logger.error(f"Failed to read audit entries from file {path}: {e}")
            return entries

        for line in lines:
            if not line.strip():
                continue
            try:
                data = json.loads(line)
                if data.pop("entry_type", None) != "prompt_validation":
                    continue
                data.setdefault("original_prompt", REDACTED)
                entries.append(PromptAuditEntry.model_validate(data))
            except (json.JSONDecodeError, pydantic.ValidationError) as e:
                logger.warning(f"Failed to parse audit entry from line in file {path}: {e}")
        return entries

    @staticmethod
    def _context_fields(entry: AuditEvent) -> dict[str, Any]:
        return {
            "audit_entry_id": entry.id,
            "operation_id": entry.operation_id,
            "user_id": entry.security_context.user_id or "Unknown",
            "session_id": entry.security_context.session_id or "Unknown",
        }


def _append_line(path: Path, line: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "a", encoding="utf-8") as f:
        f.write(line + "\n")


def _file_date(path: Path, prefix: str) -> date | None:
    try:
        return date.fromisoformat(path.stem[len(prefix) + 1:])
    except ValueError:
        return None
