"""
Implementation plan generation.

This is the single boundary where a language model would be called. The
current implementation is simulated: output depends only on the screen name
and documentation, with an optional sleep to mimic request latency.
"""

import logging
import time
from typing import Optional

from protoplan.core.config import settings

logger = logging.getLogger(__name__)

UNTITLED_SCREEN = "Untitled Screen"
OVERVIEW_EXCERPT_LENGTH = 50
SUGGESTED_NAME_MAX_LENGTH = 30

PLAN_TEMPLATE = """# {screen_name} Implementation Plan

## 1. Overview
This screen represents {excerpt}...

## 2. Component Breakdown
- Header Section
- Main Content Area
- Navigation Elements
- User Interaction Points

## 3. UI Components Needed
- Container Layout
- Typography Elements
- Button Components
- Input Fields
- Card Elements

## 4. Implementation Steps
1. Create the base component structure
2. Implement the layout grid
3. Add typography and static elements
4. Implement interactive elements
5. Connect data sources
6. Add state management
7. Implement event handlers
8. Add animations and transitions
9. Ensure responsive behavior

## 5. Technical Considerations
- Use Flexbox/Grid for responsive layout
- Implement proper accessibility features
- Ensure mobile responsiveness
- Optimize for performance

## 6. Estimated Development Time
- Frontend Implementation: 4-6 hours
- Integration with Backend: 2-3 hours
- Testing and Refinement: 2-3 hours

## 7. Dependencies
- React component library
- State management solution
- API integration for data

## 8. Success Criteria
- Screen matches design specifications
- All interactive elements function correctly
- Screen is fully responsive
- Passes accessibility requirements
"""


def generate_screen_plan(
    screen_name: Optional[str],
    documentation: Optional[str],
    delay_seconds: Optional[float] = None,
) -> str:
    """Return the markdown implementation plan for one screen."""
    if delay_seconds is None:
        delay_seconds = settings.PLAN_GENERATION_DELAY_SECONDS
    if delay_seconds > 0:
        time.sleep(delay_seconds)

    name = screen_name or UNTITLED_SCREEN
    excerpt = (documentation or "")[:OVERVIEW_EXCERPT_LENGTH]
    logger.debug(f"Generated plan for {name!r}")
    return PLAN_TEMPLATE.format(screen_name=name, excerpt=excerpt)


def suggest_screen_name(documentation: Optional[str], position: Optional[int] = None) -> str:
    """
    Derive a display name from documentation text.

    The first line is used when it has more than 3 characters, truncated to
    30 characters with a trailing ellipsis. Otherwise the name falls back to
    ``Screen <position>`` (or ``Untitled Screen`` without a position).
    """
    first_line = (documentation or "").split("\n", 1)[0].strip()

    if len(first_line) > 3:
        if len(first_line) > SUGGESTED_NAME_MAX_LENGTH:
            return first_line[:SUGGESTED_NAME_MAX_LENGTH] + "..."
        return first_line

    if position is None:
        return UNTITLED_SCREEN
    return f"Screen {position}"
