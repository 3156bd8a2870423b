"""
Structured error codes for placement and run failures.
Use these keys in return values; map to user-facing messages in the CLI / reports.
"""

# Known error keys (returned e.g. in PlacementResult.error_key)
SHAPE_TOO_SMALL = "shape_too_small"
NO_FEASIBLE_CORNER = "no_feasible_corner"
INVALID_BADGE_SPEC = "invalid_badge_spec"
INVALID_TUNING = "invalid_tuning"
RUN_FAILED = "run_failed"

# User-facing messages (short, actionable)
USER_MESSAGES: dict[str, str] = {
    SHAPE_TOO_SMALL: "Shape bounds are smaller than the badge plus padding. Try a smaller badge or padding.",
    NO_FEASIBLE_CORNER: "No corner region of the shape can hold the badge. Try a smaller badge or padding.",
    INVALID_BADGE_SPEC: "Badge size must be positive and padding must not be negative.",
    INVALID_TUNING: "Placement tuning values are out of range.",
    RUN_FAILED: "Run failed. Check geometry and inputs.",
}


def user_message(error_key: str | None, fallback: str = "Something went wrong.") -> str:
    """Return a user-facing message for the given error key."""
    if not error_key:
        return fallback
    return USER_MESSAGES.get(error_key, fallback)
