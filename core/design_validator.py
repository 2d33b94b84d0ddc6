"""
Design Validation Service
Handles validation for factors, treatments and allocation parameters
"""

from typing import List, Sequence, Tuple, Any
from config.layout_config import (
    ERROR_MESSAGES, MAX_PLATE_ROWS, MAX_TOTAL_INSTANCES, RESERVED_FACTOR_NAMES,
)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class DesignValidator:
    """Validator for layout inputs"""

    @staticmethod
    def validate_factor(name: str, levels: Sequence[str]) -> Tuple[bool, str]:
        """
        Validate a factor definition.

        Args:
            name: Factor name
            levels: Level values

        Returns:
            Tuple of (is_valid, error_message)

        Examples:
            >>> DesignValidator.validate_factor("Dose", ["10mg", "20mg"])
            (True, '')
            >>> DesignValidator.validate_factor("  ", ["a"])
            (False, 'Factor name cannot be empty')
            >>> DesignValidator.validate_factor("Label", ["a"])[0]
            False
        """
        if not name or not str(name).strip():
            return False, ERROR_MESSAGES["empty_factor_name"]
        if str(name).strip() in RESERVED_FACTOR_NAMES:
            return False, ERROR_MESSAGES["reserved_factor_name"].format(name=str(name).strip())
        if not levels:
            return False, ERROR_MESSAGES["no_levels"].format(name=name)
        return True, ""

    @staticmethod
    def validate_factor_names_unique(names: Sequence[str]) -> Tuple[bool, str]:
        """Validate that no factor name appears twice"""
        seen = set()
        for name in names:
            if name in seen:
                return False, ERROR_MESSAGES["duplicate_factor"].format(name=name)
            seen.add(name)
        return True, ""

    @staticmethod
    def validate_replicates(reps: Any) -> Tuple[bool, str]:
        """
        Validate replicate count.

        Examples:
            >>> DesignValidator.validate_replicates(3)
            (True, '')
            >>> DesignValidator.validate_replicates(0)[0]
            False
        """
        if not _is_int(reps) or reps < 1:
            return False, ERROR_MESSAGES["invalid_reps"].format(value=reps)
        return True, ""

    @staticmethod
    def validate_plate_capacity(capacity: Any) -> Tuple[bool, str]:
        """
        Validate requested plate capacity.

        Any positive integer is accepted; unknown sizes fall back to 96 wells
        when the layout is resolved.
        """
        if not _is_int(capacity) or capacity <= 0:
            return False, ERROR_MESSAGES["invalid_capacity"].format(value=capacity)
        return True, ""

    @staticmethod
    def validate_seed(seed: Any) -> Tuple[bool, str]:
        """Validate that the seed is an integer (it is reduced modulo 2^32)"""
        if not _is_int(seed):
            return False, ERROR_MESSAGES["invalid_seed"].format(value=seed)
        return True, ""

    @staticmethod
    def validate_treatments(treatments: Sequence) -> Tuple[bool, str]:
        """Validate that there is at least one treatment and ids are unique"""
        if not treatments:
            return False, ERROR_MESSAGES["no_treatments"]
        seen = set()
        for t in treatments:
            if t.id in seen:
                return False, ERROR_MESSAGES["duplicate_treatment"].format(tid=t.id)
            seen.add(t.id)
        return True, ""

    @staticmethod
    def validate_row_count(rows: int) -> Tuple[bool, str]:
        """Validate that every row of the layout has a letter label"""
        if rows > MAX_PLATE_ROWS:
            return False, ERROR_MESSAGES["too_many_rows"]
        return True, ""

    @staticmethod
    def validate_instance_count(count: int, limit: int = MAX_TOTAL_INSTANCES) -> Tuple[bool, str]:
        """Validate that a layout stays within the replicate limit served by the API"""
        if count > limit:
            return False, ERROR_MESSAGES["too_many_instances"].format(count=count, limit=limit)
        return True, ""

    @staticmethod
    def validate_allocation_inputs(treatments: Sequence, reps: Any, plate_capacity: Any,
                                   seed: Any) -> List[str]:
        """
        Run every allocation check.

        Returns:
            List of error messages (empty if all inputs are valid)
        """
        errors = []
        for is_valid, msg in (
            DesignValidator.validate_treatments(treatments),
            DesignValidator.validate_replicates(reps),
            DesignValidator.validate_plate_capacity(plate_capacity),
            DesignValidator.validate_seed(seed),
        ):
            if not is_valid:
                errors.append(msg)
        return errors
