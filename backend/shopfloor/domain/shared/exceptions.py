"""
Domain Exceptions

Defines custom exceptions for scheduling errors with discriminated error types.
Configuration and missing-reference errors are raised before any operation is
placed, so callers can reject a "generate schedule" action without side effects.
"""

from enum import Enum


class ErrorType(str, Enum):
    """Error type enumeration for discriminated unions."""

    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_CONFLICT = "resource_conflict"
    NOT_FOUND = "not_found"
    REPOSITORY = "repository"


ErrorDetails = dict[str, str | int | float | bool | None]


class DomainError(Exception):
    """Base class for all domain errors with type discrimination."""

    def __init__(
        self,
        message: str,
        error_type: ErrorType,
        details: ErrorDetails | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.details = details or {}

    def to_dict(self) -> dict[str, str | ErrorDetails]:
        """Convert error to dictionary for API responses."""
        return {
            "type": self.error_type.value,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(DomainError):
    """Raised when domain validation rules are violated."""

    def __init__(
        self,
        field_name: str,
        value: str | int | float | bool | None,
        message: str,
        error_code: str | None = None,
        details: ErrorDetails | None = None,
    ) -> None:
        self.field_name = field_name
        self.value = value
        self.error_code = error_code or "VALIDATION_ERROR"

        full_message = f"Validation failed for field '{field_name}': {message}"
        details = details or {}
        details.update(
            {
                "field": field_name,
                "value": str(value) if value is not None else None,
                "error_code": self.error_code,
            }
        )

        super().__init__(full_message, ErrorType.VALIDATION, details)


class MultipleValidationError(ValidationError):
    """Raised when multiple validation errors occur."""

    def __init__(self, validation_errors: list[ValidationError]) -> None:
        self.validation_errors = validation_errors
        messages = [error.message for error in validation_errors]
        combined_message = "Multiple validation errors: " + "; ".join(messages)

        details: ErrorDetails = {"error_count": len(validation_errors)}

        super().__init__(
            "multiple_fields",
            None,
            combined_message,
            "MULTIPLE_VALIDATION_ERRORS",
            details,
        )

    @property
    def error_count(self) -> int:
        """Get the number of validation errors."""
        return len(self.validation_errors)

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["errors"] = [error.to_dict() for error in self.validation_errors]
        return data


class ScheduleConfigurationError(ValidationError):
    """
    Raised when an operation or window configuration can never be scheduled.

    Carries the operation index and machine id so the caller can point the
    operator at the offending row.
    """

    def __init__(
        self,
        field_name: str,
        value: str | int | float | bool | None,
        message: str,
        operation_index: int | None = None,
        machine_id: str | None = None,
        sequence: int | None = None,
    ) -> None:
        self.operation_index = operation_index
        self.machine_id = machine_id
        self.sequence = sequence
        details: ErrorDetails = {
            "operation_index": operation_index,
            "machine_id": machine_id,
            "sequence": sequence,
        }
        super().__init__(
            field_name, value, message, "SCHEDULE_CONFIGURATION_ERROR", details
        )


class RoutingParseError(ValidationError):
    """Raised when a plan's stored routing document cannot be parsed."""

    def __init__(self, plan_id: str, message: str) -> None:
        self.plan_id = plan_id
        super().__init__(
            "machine_schedule",
            plan_id,
            message,
            "ROUTING_PARSE_ERROR",
            {"plan_id": plan_id},
        )


class ResourceConflictError(DomainError):
    """Raised when resource conflicts occur (double booking, over-committed day)."""

    def __init__(self, message: str, details: ErrorDetails | None = None) -> None:
        super().__init__(message, ErrorType.RESOURCE_CONFLICT, details)


class ScheduleAlreadyExistsError(DomainError):
    """Raised when a plan already has stored schedule rows and regeneration was not requested."""

    def __init__(self, plan_id: str, existing_count: int) -> None:
        self.plan_id = plan_id
        self.existing_count = existing_count
        super().__init__(
            f"Schedules already exist for plan {plan_id} ({existing_count} rows)",
            ErrorType.BUSINESS_RULE,
            {"plan_id": plan_id, "existing_count": existing_count},
        )


class EntityNotFoundError(DomainError):
    """Base class for missing-reference errors."""

    def __init__(self, message: str, details: ErrorDetails | None = None) -> None:
        super().__init__(message, ErrorType.NOT_FOUND, details)


class PlanNotFoundError(EntityNotFoundError):
    """Raised when a production plan is not found."""

    def __init__(self, plan_id: str) -> None:
        self.plan_id = plan_id
        super().__init__(
            f"Plan not found: {plan_id}", {"plan_id": plan_id, "entity_type": "plan"}
        )


class MachineNotFoundError(EntityNotFoundError):
    """Raised when an operation references a machine outside the machine registry."""

    def __init__(self, machine_id: str, operation_index: int | None = None) -> None:
        self.machine_id = machine_id
        self.operation_index = operation_index
        super().__init__(
            f"Machine not found: {machine_id} (operation #{operation_index})",
            {
                "machine_id": machine_id,
                "operation_index": operation_index,
                "entity_type": "machine",
            },
        )
