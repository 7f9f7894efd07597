"""
Status transition tables for every entity with a lifecycle.

Each table maps a status to the set of statuses it may move to next. A status
missing from the right-hand side of every row can only be reached at
creation; a status with an empty row is terminal.
"""

from typing import Dict, FrozenSet, Iterable, Mapping

from hiretrack.models.application import ApplicationStatus
from hiretrack.models.document import DocumentStatus
from hiretrack.models.interview import InterviewStatus
from hiretrack.models.job import JobStatus
from hiretrack.utils.errors import InvalidTransitionError
from hiretrack.utils.values import enum_value


def _value(status) -> str:
    return str(enum_value(status))


class StateMachine:
    def __init__(self, entity: str, transitions: Mapping[object, Iterable[object]]):
        self.entity = entity
        self._table: Dict[str, FrozenSet[str]] = {
            _value(src): frozenset(_value(dst) for dst in targets)
            for src, targets in transitions.items()
        }

    @property
    def states(self) -> FrozenSet[str]:
        return frozenset(self._table)

    def allowed(self, current) -> FrozenSet[str]:
        return self._table.get(_value(current), frozenset())

    def can_transition(self, current, target) -> bool:
        return _value(target) in self.allowed(current)

    def is_terminal(self, status) -> bool:
        return not self.allowed(status)

    def ensure(self, current, target) -> str:
        """Return the target status as a plain string, or raise InvalidTransitionError."""
        if not self.can_transition(current, target):
            raise InvalidTransitionError(self.entity, _value(current), _value(target))
        return _value(target)


JOB_LIFECYCLE = StateMachine("job", {
    JobStatus.DRAFT: {JobStatus.PUBLISHED, JobStatus.CANCELLED, JobStatus.ARCHIVED},
    JobStatus.PUBLISHED: {JobStatus.ACTIVE, JobStatus.CLOSED, JobStatus.CANCELLED},
    JobStatus.ACTIVE: {JobStatus.CLOSED, JobStatus.CANCELLED},
    JobStatus.CLOSED: {JobStatus.PUBLISHED, JobStatus.ARCHIVED},
    JobStatus.ARCHIVED: set(),
    JobStatus.CANCELLED: set(),
})

# "reviewed" and "under_review" are separate stages that may follow each other
APPLICATION_LIFECYCLE = StateMachine("application", {
    ApplicationStatus.SUBMITTED: {
        ApplicationStatus.REVIEWED,
        ApplicationStatus.UNDER_REVIEW,
        ApplicationStatus.SHORTLISTED,
        ApplicationStatus.REJECTED,
        ApplicationStatus.WITHDRAWN,
    },
    ApplicationStatus.REVIEWED: {
        ApplicationStatus.UNDER_REVIEW,
        ApplicationStatus.SHORTLISTED,
        ApplicationStatus.REJECTED,
        ApplicationStatus.WITHDRAWN,
    },
    ApplicationStatus.UNDER_REVIEW: {
        ApplicationStatus.REVIEWED,
        ApplicationStatus.SHORTLISTED,
        ApplicationStatus.REJECTED,
        ApplicationStatus.WITHDRAWN,
    },
    ApplicationStatus.SHORTLISTED: {
        ApplicationStatus.INTERVIEWING,
        ApplicationStatus.OFFERED,
        ApplicationStatus.REJECTED,
        ApplicationStatus.WITHDRAWN,
    },
    ApplicationStatus.INTERVIEWING: {
        ApplicationStatus.OFFERED,
        ApplicationStatus.REJECTED,
        ApplicationStatus.WITHDRAWN,
    },
    ApplicationStatus.OFFERED: {
        ApplicationStatus.ACCEPTED,
        ApplicationStatus.REJECTED,
        ApplicationStatus.WITHDRAWN,
    },
    ApplicationStatus.ACCEPTED: {ApplicationStatus.HIRED, ApplicationStatus.WITHDRAWN},
    ApplicationStatus.HIRED: set(),
    ApplicationStatus.REJECTED: set(),
    ApplicationStatus.WITHDRAWN: set(),
})

DOCUMENT_LIFECYCLE = StateMachine("document", {
    DocumentStatus.PENDING: {
        DocumentStatus.APPROVED,
        DocumentStatus.REJECTED,
        DocumentStatus.REQUIRES_UPDATE,
    },
    DocumentStatus.REQUIRES_UPDATE: {DocumentStatus.APPROVED, DocumentStatus.REJECTED},
    DocumentStatus.APPROVED: set(),
    DocumentStatus.REJECTED: set(),
})

INTERVIEW_LIFECYCLE = StateMachine("interview", {
    InterviewStatus.SCHEDULED: {
        InterviewStatus.COMPLETED,
        InterviewStatus.CANCELLED,
        InterviewStatus.RESCHEDULED,
        InterviewStatus.NO_SHOW,
    },
    InterviewStatus.RESCHEDULED: {
        InterviewStatus.COMPLETED,
        InterviewStatus.CANCELLED,
        InterviewStatus.NO_SHOW,
    },
    InterviewStatus.COMPLETED: set(),
    InterviewStatus.CANCELLED: set(),
    InterviewStatus.NO_SHOW: set(),
})
