"""Unit tests for audit sinks."""

import json
import logging
from datetime import date, datetime, timedelta, timezone

import pytest

from modeller_mcp.models.audit import LlmAuditEntry, PromptAuditEntry, SecurityViolationEntry
from modeller_mcp.models.security import InjectionRiskAssessment, PromptValidationResult, RiskLevel
from modeller_mcp.security.audit import REDACTED, AuditSink, InMemoryAuditSink, PromptAuditLogger
from modeller_mcp.utils.config import AuditConfig


def _prompt_entry(context, prompt="Describe the Prospect model", model_id="gpt-4", operation_id="op-1"):
    return PromptAuditEntry(
        operation_id=operation_id,
        model_id=model_id,
        security_context=context,
        original_prompt=prompt,
        validation_result=PromptValidationResult(is_valid=True),
        injection_risk=InjectionRiskAssessment(level=RiskLevel.LOW),
    )


def _llm_entry(context, operation_id="op-1"):
    return LlmAuditEntry(
        operation_id=operation_id,
        model_id="gpt-4",
        security_context=context,
        response_content="public class Prospect {}",
        response_length=24,
        tokens_used=15,
        post_validation_passed=True,
    )


def _violation_entry(context):
    return SecurityViolationEntry(
        operation_id="op-2",
        model_id="gpt-4",
        security_context=context,
        violation="Prompt rejected due to security risk: High",
        injection_risk=InjectionRiskAssessment(level=RiskLevel.HIGH),
    )


def _today() -> date:
    return datetime.now(timezone.utc).date()


class TestInMemoryAuditSink:
    """Tests for InMemoryAuditSink."""

    def test_is_audit_sink(self):
        """Test protocol conformance."""
        assert isinstance(InMemoryAuditSink(), AuditSink)
        assert isinstance(PromptAuditLogger(), AuditSink)

    @pytest.mark.asyncio
    async def test_records_in_order(self, security_context):
        """Test that events keep emission order and can be filtered."""
        sink = InMemoryAuditSink()
        await sink.log_prompt_validation(_prompt_entry(security_context))
        await sink.log_security_violation(_violation_entry(security_context))
        await sink.log_llm_interaction(_llm_entry(security_context))

        assert [e.event_type for e in sink.events] == [
            "prompt_validation",
            "security_violation",
            "llm_interaction",
        ]
        assert len(sink.of_type("llm_interaction")) == 1
        assert len(sink.for_operation("op-1")) == 2


class TestPromptAuditLogger:
    """Tests for PromptAuditLogger."""

    @pytest.fixture
    def audit_dir(self, tmp_path):
        return tmp_path / "audit"

    @pytest.fixture
    def audit_logger(self, audit_dir):
        return PromptAuditLogger(AuditConfig(enable_file_logging=True, directory=str(audit_dir)))

    def test_creates_directory(self, audit_logger, audit_dir):
        """Test that file logging creates the audit directory."""
        assert audit_dir.is_dir()

    def test_disabled_does_not_create_directory(self, audit_dir):
        """Test that nothing touches disk when file logging is off."""
        PromptAuditLogger(AuditConfig(directory=str(audit_dir)))
        assert not audit_dir.exists()

    def test_file_path(self, audit_logger, audit_dir, security_context):
        """Test per-kind, per-day file names."""
        entry = _violation_entry(security_context)
        assert audit_logger.file_path(entry, date(2024, 5, 1)) == audit_dir / "security-audit-2024-05-01.jsonl"

    def test_record_excludes_content(self, audit_logger, security_context):
        """Test that raw text is left out by default."""
        record = audit_logger.record(_prompt_entry(security_context))
        assert "original_prompt" not in record
        assert record["entry_type"] == "prompt_validation"
        assert record["security_context"]["user_id"] == "alice"

        llm_record = audit_logger.record(_llm_entry(security_context))
        assert "response_content" not in llm_record
        assert llm_record["tokens_used"] == 15

    def test_record_includes_content_when_configured(self, audit_dir, security_context):
        """Test opting in to prompt and response text."""
        audit_logger = PromptAuditLogger(
            AuditConfig(directory=str(audit_dir), log_prompt_content=True, log_response_content=True)
        )
        assert audit_logger.record(_prompt_entry(security_context))["original_prompt"] == "Describe the Prospect model"
        assert audit_logger.record(_llm_entry(security_context))["response_content"] == "public class Prospect {}"

    @pytest.mark.asyncio
    async def test_writes_jsonl(self, audit_logger, audit_dir, security_context):
        """Test that each event kind goes to its own file."""
        await audit_logger.log_prompt_validation(_prompt_entry(security_context))
        await audit_logger.log_llm_interaction(_llm_entry(security_context))
        await audit_logger.log_security_violation(_violation_entry(security_context))

        day = _today().isoformat()
        for prefix in ("prompt-audit", "llm-audit", "security-audit"):
            path = audit_dir / f"{prefix}-{day}.jsonl"
            lines = path.read_text().splitlines()
            assert len(lines) == 1
            json.loads(lines[0])

    @pytest.mark.asyncio
    async def test_read_prompt_entries_redacted(self, audit_logger, security_context):
        """Test reading back entries without stored prompt text."""
        entry = _prompt_entry(security_context)
        await audit_logger.log_prompt_validation(entry)

        today = _today()
        entries = await audit_logger.read_prompt_entries(today, today)
        assert len(entries) == 1
        assert entries[0].id == entry.id
        assert entries[0].original_prompt == REDACTED
        assert entries[0].security_context == security_context

    @pytest.mark.asyncio
    async def test_read_prompt_entries_with_content(self, audit_dir, security_context):
        """Test that stored prompt text is returned."""
        audit_logger = PromptAuditLogger(
            AuditConfig(enable_file_logging=True, directory=str(audit_dir), log_prompt_content=True)
        )
        await audit_logger.log_prompt_validation(_prompt_entry(security_context, prompt="Review Sales"))
        today = _today()
        entries = await audit_logger.read_prompt_entries(today, today)
        assert entries[0].original_prompt == "Review Sales"

    @pytest.mark.asyncio
    async def test_read_prompt_entries_filters(self, audit_logger, security_context):
        """Test model, user and date filters."""
        other_user = security_context.model_copy(update={"user_id": "bob"})
        await audit_logger.log_prompt_validation(_prompt_entry(security_context, model_id="gpt-4"))
        await audit_logger.log_prompt_validation(_prompt_entry(security_context, model_id="mock"))
        await audit_logger.log_prompt_validation(_prompt_entry(other_user, model_id="gpt-4"))

        today = _today()
        assert len(await audit_logger.read_prompt_entries(today, today)) == 3
        assert len(await audit_logger.read_prompt_entries(today, today, model_id="gpt-4")) == 2
        assert len(await audit_logger.read_prompt_entries(today, today, user_id="bob")) == 1
        assert len(await audit_logger.read_prompt_entries(today, today, model_id="mock", user_id="bob")) == 0

        yesterday = today - timedelta(days=1)
        assert await audit_logger.read_prompt_entries(yesterday, yesterday) == []

    @pytest.mark.asyncio
    async def test_read_skips_bad_lines(self, audit_logger, audit_dir, security_context):
        """Test that unparsable lines are skipped."""
        await audit_logger.log_prompt_validation(_prompt_entry(security_context))
        path = audit_dir / f"prompt-audit-{_today().isoformat()}.jsonl"
        with open(path, "a", encoding="utf-8") as f:
            f.write("not json\n\n")
        today = _today()
        assert len(await audit_logger.read_prompt_entries(today, today)) == 1

    @pytest.mark.asyncio
    async def test_read_disabled(self, audit_dir):
        """Test that reading without file logging returns nothing."""
        audit_logger = PromptAuditLogger(AuditConfig(directory=str(audit_dir)))
        today = _today()
        assert await audit_logger.read_prompt_entries(today, today) == []

    @pytest.mark.asyncio
    async def test_write_failure_logged(self, audit_logger, audit_dir, security_context, caplog):
        """Test that an unwritable directory is logged, not raised."""
        audit_dir.rmdir()
        audit_dir.write_text("a file, not a directory")
        with caplog.at_level(logging.ERROR, logger="modeller_mcp"):
            await audit_logger.log_llm_interaction(_llm_entry(security_context))
        assert "Failed to log LLM interaction audit entry" in caplog.text
