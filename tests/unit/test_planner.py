"""Plan text and screen name suggestion."""

from protoplan.services.planner import generate_screen_plan, suggest_screen_name


def test_plan_uses_screen_name_heading():
    plan = generate_screen_plan("Login Screen", "Email and password form", delay_seconds=0)
    assert plan.startswith("# Login Screen Implementation Plan")


def test_plan_without_name_is_untitled():
    plan = generate_screen_plan(None, "Some docs", delay_seconds=0)
    assert plan.startswith("# Untitled Screen Implementation Plan")


def test_plan_overview_quotes_first_fifty_characters():
    documentation = "x" * 50 + "TAIL"
    plan = generate_screen_plan("S", documentation, delay_seconds=0)
    assert f"This screen represents {'x' * 50}..." in plan
    assert "TAIL" not in plan


def test_plan_has_fixed_sections():
    plan = generate_screen_plan("S", "docs", delay_seconds=0)
    for heading in (
        "## 1. Overview",
        "## 2. Component Breakdown",
        "## 4. Implementation Steps",
        "## 8. Success Criteria",
    ):
        assert heading in plan


def test_plan_is_deterministic():
    assert generate_screen_plan("A", "b", delay_seconds=0) == generate_screen_plan("A", "b", delay_seconds=0)


def test_documentation_with_braces_is_kept_verbatim():
    plan = generate_screen_plan("S", "uses {props} and {{state}}", delay_seconds=0)
    assert "uses {props} and {{state}}" in plan


def test_suggest_name_from_first_line():
    assert suggest_screen_name("User Dashboard\nShows stats") == "User Dashboard"


def test_suggest_name_truncates_long_first_line():
    name = suggest_screen_name("A" * 40)
    assert name == "A" * 30 + "..."


def test_suggest_name_falls_back_for_short_first_line():
    assert suggest_screen_name("abc\nmore text", position=2) == "Screen 2"
    assert suggest_screen_name("", position=5) == "Screen 5"
    assert suggest_screen_name(None) == "Untitled Screen"
