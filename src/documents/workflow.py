"""Review workflow state machine for extracted documents.

Provides declarative status transitions for a document under review, with
submission gated on data quality.
"""

from __future__ import annotations

import structlog
from statemachine import State, StateMachine
from statemachine.exceptions import TransitionNotAllowed

from src.core.errors import SubmissionBlockedError
from src.core.logging import review_context
from src.documents.models import ExtractedData, ReviewStatus
from src.documents.review import submission_readiness
from src.fields.quality import SeverityPolicy

logger = structlog.get_logger()


class ReviewWorkflow(StateMachine):
    """State machine for the document review lifecycle.

    States match the ReviewStatus enum:
    - pending_review: Extraction finished, reviewer is checking fields
    - reviewed: Submitted for approval
    - approved: Approved by a supervisor (final)
    - rejected: Sent back by a supervisor

    Transitions:
    - submit: pending_review -> reviewed (blocked while required fields are
      missing or error-severity issues remain)
    - approve: reviewed -> approved
    - reject: reviewed -> rejected
    - reopen: rejected -> pending_review
    """

    pending_review = State(initial=True, value=ReviewStatus.PENDING_REVIEW)
    reviewed = State(value=ReviewStatus.REVIEWED)
    approved = State(final=True, value=ReviewStatus.APPROVED)
    rejected = State(value=ReviewStatus.REJECTED)

    submit = pending_review.to(reviewed, validators="ensure_submittable")
    approve = reviewed.to(approved)
    reject = reviewed.to(rejected)
    reopen = rejected.to(pending_review)

    def __init__(
        self,
        document: ExtractedData,
        policy: SeverityPolicy | None = None,
    ) -> None:
        """Initialize the workflow from the document's current status.

        Args:
            document: Document under review.
            policy: Severity mapping used by the submission gate.
        """
        self.document = document
        self.policy = policy
        super().__init__(start_value=document.status)

    @property
    def status(self) -> ReviewStatus:
        """Current state as a ReviewStatus."""
        return self.current_state.value

    def ensure_submittable(self) -> None:
        """Refuse submission while the document has blocking issues."""
        check = submission_readiness(self.document, self.policy)
        if not check.can_submit:
            logger.warning(
                "submission_blocked",
                document_id=self.document.document_id,
                missing_fields=check.missing_fields,
                blocking_issues=len(check.blocking_issues),
            )
            raise SubmissionBlockedError(self.document.document_id, check.messages)

    def _set_status(self, status: ReviewStatus) -> None:
        self.document = self.document.model_copy(update={"status": status})

    def on_submit(self, reviewer: str | None = None) -> None:
        """Called when the reviewer submits the document for approval."""
        self._set_status(ReviewStatus.REVIEWED)
        with review_context(self.document.document_id, reviewer):
            logger.info("document_submitted")

    def on_approve(self, approver: str | None = None) -> None:
        """Called when a supervisor approves the document."""
        self._set_status(ReviewStatus.APPROVED)
        logger.info(
            "document_approved",
            document_id=self.document.document_id,
            approver=approver,
        )

    def on_reject(self, reason: str = "") -> None:
        """Called when a supervisor sends the document back."""
        self._set_status(ReviewStatus.REJECTED)
        logger.warning(
            "document_rejected",
            document_id=self.document.document_id,
            reason=reason,
        )

    def on_reopen(self) -> None:
        """Called when a rejected document goes back to review."""
        self._set_status(ReviewStatus.PENDING_REVIEW)
        logger.info("document_reopened", document_id=self.document.document_id)


__all__ = [
    "ReviewWorkflow",
    "SubmissionBlockedError",
    "TransitionNotAllowed",
]
