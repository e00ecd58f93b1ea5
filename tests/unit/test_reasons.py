"""
Test suite for requant Reason Codes

Tests reason code uniqueness, naming, and category coverage.
"""
import pytest

class TestReasonCodes:
    """Test reason code constants and properties."""

    def test_reason_codes_unique(self):
        """All reason codes have unique string values."""
        from requant.reasons import ALL_REASON_CODES

        codes = list(ALL_REASON_CODES)
        assert len(codes) == len(set(codes))

    def test_codes_are_screaming_snake_case(self):
        from requant.reasons import ALL_REASON_CODES

        for code in ALL_REASON_CODES:
            assert code == code.upper()
            assert " " not in code

    def test_every_category_used(self):
        """Each category groups at least one code."""
        from requant.reasons import ALL_REASON_CODES, ReasonCategory

        assert set(ALL_REASON_CODES.values()) == set(ReasonCategory)

    def test_module_constants_registered(self):
        """Every module-level code constant is in ALL_REASON_CODES."""
        import requant.reasons as reasons

        constants = {
            value
            for name, value in vars(reasons).items()
            if name.isupper() and isinstance(value, str)
        }
        assert constants == set(reasons.ALL_REASON_CODES)

    @pytest.mark.parametrize(
        ("code", "category"),
        [
            ("EFFECTIVE_MULTIPLIER_OUT_OF_RANGE", "SCALE"),
            ("BUFFER_DTYPE_UNSUPPORTED", "BUFFER"),
            ("BUFFER_TOO_SMALL", "BUFFER"),
            ("MULTIPLIER_NOT_SUB_UNITY", "MULTIPLIER"),
        ],
    )
    def test_code_category(self, code, category):
        """Codes are registered under their category."""
        import requant.reasons as reasons

        assert getattr(reasons, code) == code
        assert reasons.ALL_REASON_CODES[code] is reasons.ReasonCategory[category]
