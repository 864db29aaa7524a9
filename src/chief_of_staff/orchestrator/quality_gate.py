"""Quality gate: validates capability agent output before it reaches the user.

Key principles:
- Deterministic checks only (structure, safety, platform limits, time)
- Only high-severity issues block
- The gate never edits approved data; it approves or rejects
"""

import logging
import re
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple

from chief_of_staff.orchestrator.envelope import (
    AgentType,
    Envelope,
    EnvelopeMetadata,
    Priority,
    Response,
    ResponseStatus,
    Severity,
    ValidationIssue,
    ValidationResult,
    new_response_id,
)

logger = logging.getLogger(__name__)

VALIDATION_FAILED_MESSAGE = "Validation failed"
VALIDATE_TASK = "validate_output"

SENSITIVE_PATTERNS = [
    re.compile(r"\b(password|confidential|secret|private key)\b", re.IGNORECASE),
    re.compile(r"\b\d{3}-\d{2}-\d{4}\b"),  # SSN
    re.compile(r"\b\d{16}\b"),  # card number
]

# capability -> (fields to measure, max characters)
PLATFORM_LIMITS: Dict[str, Tuple[Tuple[str, ...], int]] = {
    AgentType.LINKEDIN.value: (("post", "content"), 3000),
}

SCHEDULED_TIME_FIELDS = ("datetime", "scheduled_for")


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class QualityGate:
    """The `qa` capability.

    Can be called directly with `validate_output` or through the agent
    contract with an envelope whose context holds `data` and `source_agent`.
    """

    agent_type = AgentType.QA.value

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    async def process(self, envelope: Envelope) -> Response:
        try:
            data = envelope.context.get("data")
            source_agent = envelope.context.get("source_agent", "unknown")
            logger.info(f"Validating output from {source_agent}")

            validation = self.validate_output(data, source_agent)

            return Response(
                id=new_response_id(self.agent_type),
                status=ResponseStatus.SUCCESS,
                data={
                    "validation_passed": validation.passed,
                    "validation_result": validation,
                    "approved_data": data if validation.passed else None,
                },
                source_agent=self.agent_type,
            )
        except Exception as e:
            logger.exception("Validation crashed")
            return Response(
                id=new_response_id(self.agent_type),
                status=ResponseStatus.ERROR,
                error=str(e),
                source_agent=self.agent_type,
            )

    def validate_output(self, data: Any, source_agent: str) -> ValidationResult:
        issues: List[ValidationIssue] = []
        recommendations: List[str] = []

        self._check_structure(data, issues)
        if isinstance(data, dict):
            self._check_content_safety(data, issues)
            self._check_platform_limits(data, source_agent, issues, recommendations)
            self._check_temporal(data, issues)

        passed = not any(issue.severity == Severity.HIGH for issue in issues)
        return ValidationResult(passed=passed, issues=issues, recommendations=recommendations)

    def _check_structure(self, data: Any, issues: List[ValidationIssue]) -> None:
        if data is None or not isinstance(data, dict):
            issues.append(ValidationIssue("structure", "Invalid data structure received", Severity.HIGH))

    def _check_content_safety(self, data: Dict[str, Any], issues: List[ValidationIssue]) -> None:
        content = data.get("content")
        if not content:
            return
        reason = self.check_content_safety(str(content))
        if reason:
            issues.append(ValidationIssue("safety", f"Content safety issue: {reason}", Severity.HIGH))

    @staticmethod
    def check_content_safety(content: str) -> Optional[str]:
        """Return a reason when the content looks sensitive, else None."""
        for pattern in SENSITIVE_PATTERNS:
            if pattern.search(content):
                return "Potentially sensitive information detected"
        return None

    def _check_platform_limits(
        self,
        data: Dict[str, Any],
        source_agent: str,
        issues: List[ValidationIssue],
        recommendations: List[str],
    ) -> None:
        limit = PLATFORM_LIMITS.get(source_agent)
        if limit is None:
            return
        fields, max_chars = limit
        for name in fields:
            value = data.get(name)
            if isinstance(value, str) and len(value) > max_chars:
                issues.append(
                    ValidationIssue(
                        "platform_limit",
                        f"{source_agent} {name} exceeds {max_chars} character limit",
                        Severity.MEDIUM,
                    )
                )
                recommendations.append(f"Trim content to under {max_chars} characters")
                return

    def _check_temporal(self, data: Dict[str, Any], issues: List[ValidationIssue]) -> None:
        now = self._clock()
        for name in SCHEDULED_TIME_FIELDS:
            if name not in data or data[name] is None:
                continue
            scheduled = _parse_timestamp(data[name])
            if scheduled is None:
                issues.append(ValidationIssue("temporal", f"Unreadable {name} value", Severity.HIGH))
            elif scheduled < now:
                issues.append(ValidationIssue("temporal", "Scheduled time is in the past", Severity.HIGH))


def build_validation_envelope(response: Response, metadata: EnvelopeMetadata) -> Envelope:
    """Validation request tagged with the capability that produced the data."""
    return Envelope(
        sender=AgentType.CHIEF.value,
        recipient=AgentType.QA.value,
        task=VALIDATE_TASK,
        context={"data": response.data, "source_agent": response.source_agent or "unknown"},
        priority=Priority.MEDIUM,
        validation_required=True,
        metadata=metadata,
    )


async def validate_results(
    gate: QualityGate,
    results: List[Response],
    metadata: EnvelopeMetadata,
) -> List[Response]:
    """Pass every eligible response through the gate, keeping order.

    Approved responses get validation_passed=True and the approved data.
    Rejected ones are rewritten to status=error. Everything else is
    returned unchanged.
    """
    validated: List[Response] = []

    for result in results:
        if not result.eligible_for_validation():
            validated.append(result)
            continue

        verdict = await gate.process(build_validation_envelope(result, metadata))
        report = verdict.data or {}

        if verdict.succeeded and report.get("validation_passed"):
            validated.append(replace(result, validation_passed=True, data=report.get("approved_data")))
            continue

        validation = report.get("validation_result")
        if validation is not None:
            for issue in validation.issues:
                logger.warning(
                    f"Validation issue for {result.source_agent}: "
                    f"[{issue.severity.value}] {issue.type}: {issue.message}"
                )
        validated.append(
            replace(
                result,
                status=ResponseStatus.ERROR,
                error=VALIDATION_FAILED_MESSAGE,
                validation_passed=False,
            )
        )

    return validated
