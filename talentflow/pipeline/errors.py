"""
Pipeline error taxonomy.

Store failures are caught at each operation boundary (load, transition,
edit submit, intake, job writes) and re-raised as one of these kinds.
"""

from typing import Any, Dict, Optional

from talentflow.repositories.record_store import StoreError, StoreErrorKind


_STATUS_BY_STORE_KIND = {
    StoreErrorKind.NOT_FOUND: 404,
    StoreErrorKind.CONSTRAINT_VIOLATION: 409,
    StoreErrorKind.UNREACHABLE: 503,
}


class PipelineError(Exception):
    """Base class for user-facing pipeline failures."""

    code = "PIPELINE_ERROR"
    status_code = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class _StoreBackedError(PipelineError):
    def __init__(self, message: str, store_error: Optional[StoreError] = None, details: Optional[Dict[str, Any]] = None):
        self.store_error = store_error
        if store_error is not None:
            details = dict(details or {})
            details.setdefault("store_error", store_error.kind.value)
            self.status_code = _STATUS_BY_STORE_KIND.get(store_error.kind, 500)
        super().__init__(message, details)


class LoadFailure(_StoreBackedError):
    """The working set could not be fetched. Rendered as a persistent error state."""

    code = "LOAD_FAILED"
    status_code = 503

    def __init__(self, store_error: StoreError):
        super().__init__("Could not load candidates. Please retry.", store_error)
        # Whatever the store said, the view has nothing valid to show.
        self.status_code = 503


class TransitionFailure(_StoreBackedError):
    """A stage write failed. The candidate stays in its previous stage."""

    code = "TRANSITION_FAILED"

    def __init__(self, transition, store_error: StoreError):
        self.transition = transition
        super().__init__(
            "Failed to update stage",
            store_error,
            {
                "candidate_id": str(transition.candidate_id),
                "from_stage": transition.from_stage.value,
                "to_stage": transition.to_stage.value,
            },
        )


class WriteFailure(_StoreBackedError):
    """A non-stage write (edit, intake, job form) failed. Nothing was committed."""

    code = "WRITE_FAILED"


class ValidationFailure(PipelineError):
    """Required fields are missing or malformed. No write was attempted."""

    code = "VALIDATION_FAILED"
    status_code = 422

    def __init__(self, field_errors: Dict[str, str]):
        self.field_errors = dict(field_errors)
        super().__init__("Please correct the highlighted fields", {"fields": self.field_errors})


class NotFound(PipelineError):
    code = "NOT_FOUND"
    status_code = 404

    def __init__(self, entity: str, identifier: Any):
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity.capitalize()} not found", {"entity": entity, "id": str(identifier)})


class InvalidStage(PipelineError):
    code = "INVALID_STAGE"
    status_code = 422

    def __init__(self, value: Any):
        self.value = value
        super().__init__(f"Unknown stage: {value!r}", {"stage": str(value)})
