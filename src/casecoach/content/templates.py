"""
Coach reply templates, suggestions and feedback text for each conversation stage.
"""

from __future__ import annotations

# =============================================================================
# COACH REPLIES — three per stage, one is picked at random each turn
# =============================================================================

RESPONSE_TEMPLATES = {
    "opening": [
        "Great! Let's dive into this case. Can you start by clarifying what you understand about the problem?",
        "Excellent. Before we begin our analysis, what initial questions do you have about the situation?",
        "Perfect. Let's structure our approach. What framework would you use to tackle this problem?",
    ],
    "problem_clarification": [
        "That's a good start. Can you be more specific about the key drivers you'd want to investigate?",
        "Interesting perspective. What assumptions are you making here, and how would you validate them?",
        "Good thinking. How would you prioritize these factors in your analysis?",
    ],
    "framework_development": [
        "I like your structured approach. Can you walk me through each component of your framework?",
        "That's a solid framework. How would you adapt it specifically for this industry context?",
        "Good structure. What data would you need to test each part of your hypothesis?",
    ],
    "analysis": [
        "Excellent analysis. What are the implications of these findings for our recommendation?",
        "That's insightful. How would you quantify the impact of this factor?",
        "Good point. What potential risks or challenges do you see with this approach?",
    ],
    "conclusion": [
        "Great work! Can you summarize your key findings and recommendation?",
        "Excellent analysis throughout. What would be your next steps if you were presenting to the client?",
        "Well done. How confident are you in your recommendation, and what would make you more certain?",
    ],
}

# Unknown stages fall back to this pool
DEFAULT_RESPONSE_STAGE = "analysis"

# =============================================================================
# SUGGESTIONS — shown next to each coach reply
# =============================================================================

STAGE_SUGGESTIONS = {
    "opening": [
        "Start with a structured framework",
        "Clarify the problem statement",
        "Ask about key constraints",
    ],
    "problem_clarification": [
        "Define success metrics",
        "Identify key stakeholders",
        "Understand the timeline",
    ],
    "framework_development": [
        "Consider market dynamics",
        "Analyze competitive landscape",
        "Evaluate internal capabilities",
    ],
    "analysis": [
        "Quantify the impact",
        "Consider implementation challenges",
        "Think about risks and mitigation",
    ],
    "conclusion": [
        "Summarize key insights",
        "Make a clear recommendation",
        "Outline next steps",
    ],
}

# =============================================================================
# STRUCTURE VOCABULARY — case-interview structuring language
# =============================================================================

STRUCTURE_KEYWORDS = (
    "first", "second", "third", "finally",
    "hypothesis", "assumption", "framework",
    "revenue", "cost", "profit", "market",
    "customer", "competition", "strategy",
)

# =============================================================================
# THINKING TRACE
# =============================================================================

THINKING_STRUCTURE = "The user is showing {level} structured thinking at the {stage} stage."
THINKING_ENGAGEMENT = (
    "Their engagement level is {level} with an average message length of {words} words."
)
THINKING_NEXT_MOVE = "I should {move}."

NEXT_MOVES = {
    "opening": "encourage framework development",
    "analysis": "push for deeper insights",
}
DEFAULT_NEXT_MOVE = "guide toward conclusions"

# =============================================================================
# SESSION FEEDBACK
# =============================================================================

STRENGTH_STRUCTURE = "Strong structured thinking and framework usage"
IMPROVE_STRUCTURE = "Work on developing more structured frameworks"
STRENGTH_ENGAGEMENT = "Good engagement and detailed responses"
IMPROVE_ENGAGEMENT = "Try to provide more detailed analysis"
STRENGTH_EXPLORATION = "Thorough exploration of the case"
IMPROVE_EXPLORATION = "Consider asking more clarifying questions"

NEXT_STEPS = (
    "Continue practicing with similar cases and focus on developing "
    "structured problem-solving approaches."
)

FEEDBACK_REPORT = """\
**Session Feedback**

**Strengths:**
{strengths}

**Areas for Improvement:**
{improvements}

**Overall Performance:** {rating}

**Next Steps:** {next_steps}"""

BULLET = "•"
