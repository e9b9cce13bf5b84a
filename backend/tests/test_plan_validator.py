"""
Tests for rampup plan validation.
"""
import pytest

from imagemgmt.core.exceptions import (
    DuplicateRampupVersionError,
    EmptyRampupPlanError,
    InvalidRampupTotalError,
    RampupValidationError,
    UnstableRampupPercentageError,
    ValidationError,
)
from imagemgmt.services.plan_validator import validate_rampup_plan


class TestValidateRampupPlan:
    """Tests for validate_rampup_plan."""

    def test_accepts_plan_summing_to_100(self, entry_factory):
        """Test a plan whose percentages add up to 100 is accepted."""
        entries = [entry_factory("1.1.1", 10), entry_factory("1.1.2", 30), entry_factory("1.1.3", 60)]

        assert validate_rampup_plan(entries) is None

    def test_accepts_single_full_entry(self, entry_factory):
        """Test a single entry at 100 percent is accepted."""
        validate_rampup_plan([entry_factory("2.0", 100)])

    def test_accepts_unstable_entry_at_zero(self, entry_factory):
        """Test an UNSTABLE entry is allowed when its percentage is 0."""
        validate_rampup_plan([entry_factory("1.0", 0, "unstable"), entry_factory("2.0", 100)])

    def test_rejects_empty_plan(self):
        """Test a plan without entries is rejected."""
        with pytest.raises(EmptyRampupPlanError):
            validate_rampup_plan([])

    def test_rejects_none(self):
        """Test a missing entry list is rejected as empty."""
        with pytest.raises(EmptyRampupPlanError):
            validate_rampup_plan(None)

    @pytest.mark.parametrize("last", [59, 61])
    def test_rejects_total_off_by_one(self, entry_factory, last):
        """Test plans summing to 99 or 101 are rejected."""
        entries = [entry_factory("1.1.1", 10), entry_factory("1.1.2", 30), entry_factory("1.1.3", last)]

        with pytest.raises(InvalidRampupTotalError) as exc_info:
            validate_rampup_plan(entries)

        assert exc_info.value.details["total"] == 40 + last

    def test_rejects_duplicate_version(self, entry_factory):
        """Test the same version listed twice is rejected."""
        entries = [entry_factory("1.0", 50), entry_factory("1.0", 50)]

        with pytest.raises(DuplicateRampupVersionError) as exc_info:
            validate_rampup_plan(entries)

        assert exc_info.value.details["version"] == "1.0"

    def test_rejects_unstable_with_percentage(self, entry_factory):
        """Test an UNSTABLE entry with a non-zero percentage is rejected."""
        entries = [entry_factory("1.0", 20, "unstable"), entry_factory("2.0", 80)]

        with pytest.raises(UnstableRampupPercentageError) as exc_info:
            validate_rampup_plan(entries)

        assert exc_info.value.details["version"] == "1.0"
        assert exc_info.value.details["rampup_percentage"] == 20

    def test_total_checked_before_duplicates(self, entry_factory):
        """Test only the first violation is reported."""
        entries = [entry_factory("1.0", 50), entry_factory("1.0", 40)]

        with pytest.raises(InvalidRampupTotalError):
            validate_rampup_plan(entries)

    def test_duplicates_checked_before_stability(self, entry_factory):
        """Test a duplicate is reported before an unstable percentage."""
        entries = [entry_factory("1.0", 50, "unstable"), entry_factory("1.0", 50)]

        with pytest.raises(DuplicateRampupVersionError):
            validate_rampup_plan(entries)

    def test_errors_are_validation_errors(self, entry_factory):
        """Test every rampup violation belongs to the validation error family."""
        with pytest.raises(RampupValidationError) as exc_info:
            validate_rampup_plan([entry_factory("1.0", 99)])

        assert isinstance(exc_info.value, ValidationError)
