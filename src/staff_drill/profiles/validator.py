"""
Profile Validator - checks that a profile can drive a session.

Validates:
- The domain is not empty
- Every declared clef and octave band has pitches
- Every answer label fits in the input
- The layout knows how to place every clef used
- Fixed sets do not reuse one label for different notes
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from staff_drill.models.profile import FixedSetProfile, RangeProfile, RegisterProfile


class ValidationSeverity(str, Enum):
    """Severity level for validation issues."""

    ERROR = "error"  # Session cannot start
    WARNING = "warning"  # Drill works but may confuse the student
    INFO = "info"  # Informational only


@dataclass
class ValidationIssue:
    """A single validation issue."""

    severity: ValidationSeverity
    code: str
    message: str
    location: str | None = None

    def __str__(self) -> str:
        prefix = f"[{self.severity.value.upper()}]"
        location = f" at {self.location}" if self.location else ""
        return f"{prefix} {self.code}: {self.message}{location}"


class ValidationResult:
    """Result of validating a profile."""

    def __init__(self) -> None:
        self.issues: list[ValidationIssue] = []

    def add_error(self, code: str, message: str, location: str | None = None) -> None:
        """Add an error issue."""
        self.issues.append(ValidationIssue(ValidationSeverity.ERROR, code, message, location))

    def add_warning(self, code: str, message: str, location: str | None = None) -> None:
        """Add a warning issue."""
        self.issues.append(ValidationIssue(ValidationSeverity.WARNING, code, message, location))

    def add_info(self, code: str, message: str, location: str | None = None) -> None:
        """Add an info issue."""
        self.issues.append(ValidationIssue(ValidationSeverity.INFO, code, message, location))

    @property
    def is_valid(self) -> bool:
        """Return True if no errors (warnings/info are OK)."""
        return not any(i.severity == ValidationSeverity.ERROR for i in self.issues)

    @property
    def errors(self) -> list[ValidationIssue]:
        """Get all error issues."""
        return [i for i in self.issues if i.severity == ValidationSeverity.ERROR]

    @property
    def warnings(self) -> list[ValidationIssue]:
        """Get all warning issues."""
        return [i for i in self.issues if i.severity == ValidationSeverity.WARNING]

    def __bool__(self) -> bool:
        """Boolean conversion returns is_valid."""
        return self.is_valid

    def __str__(self) -> str:
        if not self.issues:
            return "Validation passed: no issues found"
        return "\n".join(str(issue) for issue in self.issues)


class ProfileValidator:
    """Validates profile domains and answer rules."""

    def validate(self, profile: RangeProfile) -> ValidationResult:
        """
        Validate a profile.

        Args:
            profile: The profile to validate

        Returns:
            ValidationResult with any issues found
        """
        result = ValidationResult()

        if isinstance(profile, RegisterProfile):
            self._validate_registers(profile, result)
        elif isinstance(profile, FixedSetProfile):
            self._validate_entries(profile, result)

        if not profile.domain():
            result.add_error("EMPTY_DOMAIN", f"Profile '{profile.name}' has no pitches", "domain")
            return result

        self._validate_labels(profile, result)
        self._validate_layout(profile, result)

        return result

    def _validate_registers(self, profile: RegisterProfile, result: ValidationResult) -> None:
        """Every declared clef and octave must contribute pitches."""
        for clef, bands in profile.registers.items():
            if not bands:
                result.add_error(
                    "EMPTY_REGISTER",
                    f"Clef '{clef.value}' declares no octaves",
                    f"registers/{clef.value}",
                )
                continue
            for octave, letters in bands.items():
                if not letters:
                    result.add_error(
                        "EMPTY_OCTAVE",
                        f"Octave {octave} of clef '{clef.value}' has no letters",
                        f"registers/{clef.value}/{octave}",
                    )

    def _validate_entries(self, profile: FixedSetProfile, result: ValidationResult) -> None:
        """Fixed sets should not repeat entries or overload labels."""
        seen: set[tuple[str, str]] = set()
        label_owner: dict[str, str] = {}

        for index, pitch in enumerate(profile.entries):
            key = (pitch.name, pitch.display_label)
            if key in seen:
                result.add_warning(
                    "DUPLICATE_ENTRY",
                    f"{pitch.name} labelled '{pitch.display_label}' is listed more than once",
                    f"entries/{index}",
                )
            seen.add(key)

            owner = label_owner.setdefault(pitch.display_label, pitch.name)
            if owner != pitch.name:
                result.add_warning(
                    "AMBIGUOUS_LABEL",
                    f"Label '{pitch.display_label}' is used for both {owner} and {pitch.name}",
                    f"entries/{index}",
                )

    def _validate_labels(self, profile: RangeProfile, result: ValidationResult) -> None:
        """Every label must be typeable within the input limit."""
        for label in profile.labels():
            if len(label) > profile.max_input_length:
                result.add_error(
                    "LABEL_TOO_LONG",
                    f"Label '{label}' is longer than max_input_length "
                    f"({profile.max_input_length})",
                    "max_input_length",
                )

        longest = max(len(label) for label in profile.labels())
        if longest < profile.max_input_length:
            result.add_info(
                "INPUT_LONGER_THAN_LABELS",
                f"max_input_length {profile.max_input_length} exceeds the longest label ({longest})",
                "max_input_length",
            )

    def _validate_layout(self, profile: RangeProfile, result: ValidationResult) -> None:
        """The layout must have a reference line for every clef."""
        for clef in profile.clefs:
            if clef not in profile.layout.bottom_reference:
                result.add_error(
                    "UNKNOWN_CLEF_LAYOUT",
                    f"Layout has no bottom reference for clef '{clef.value}'",
                    "layout",
                )
            if clef not in profile.layout.stem_down_octave:
                result.add_info(
                    "NO_STEM_FLIP",
                    f"Stems on clef '{clef.value}' always point up",
                    "layout",
                )


def validate_profile(profile: RangeProfile) -> ValidationResult:
    """
    Convenience function to validate a profile.

    Args:
        profile: The profile to validate

    Returns:
        ValidationResult with any issues found
    """
    validator = ProfileValidator()
    return validator.validate(profile)
