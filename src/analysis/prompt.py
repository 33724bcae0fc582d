"""
src/analysis/prompt.py
=======================
Interview Prompt — TripTone

Responsibility:
    - Hold the fixed interview question list
    - Build the deterministic instruction sent with every audio upload

The prompt embeds the user's contact details and the six questions and
asks Gemini for exactly one JSON document (see _RESPONSE_SCHEMA).
"""

from typing import Any


# ---------------------------------------------------------------------------
# Interview questions, identical for every record
# ---------------------------------------------------------------------------

QUESTIONS: tuple[str, ...] = (
    "Introduce yourself",
    "Party vs Relaxing",
    "Beach vs Mountains",
    "How much do you spend on a cafe",
    "Weirdest experience in goa",
    "Best and Worst thing about goa",
)


# ---------------------------------------------------------------------------
# Response schema example shown to the model
# ---------------------------------------------------------------------------

_RESPONSE_SCHEMA: str = """{
  "transcription": "Complete transcript of what the user said in the audio",
  "analysis": {
    "overallScore": 85,
    "confidenceLevel": "High",
    "travelPersonality": [
      {
        "trait": "Adventure Seeker",
        "percentage": 90,
        "reason": "Demonstrated clear preference for exciting experiences and new adventures"
      },
      {
        "trait": "Social Butterfly",
        "percentage": 85,
        "reason": "Showed strong preference for party atmosphere and social interactions"
      }
    ],
    "preferences": [
      {
        "preference": "Beach vs Mountains",
        "choice": "Beach",
        "percentage": 80,
        "reason": "Expressed strong preference for beach activities and coastal experiences"
      },
      {
        "preference": "Party vs Relaxing",
        "choice": "Party",
        "percentage": 75,
        "reason": "Mentioned enjoying vibrant nightlife and social gatherings",
        "priority": "High"
      }
    ],
    "spendingHabits": {
      "cafeBudget": "Moderate",
      "percentage": 70,
      "reason": "Showed balanced approach to spending on food and beverages"
    },
    "goaExperience": {
      "score": 80,
      "level": "Experienced",
      "reason": "Demonstrated good knowledge of Goa's attractions and culture"
    }
  },
  "insights": {
    "whyUseful": "This analysis provides a data-driven assessment of your travel personality and Goa preferences with specific percentages and personalized recommendations based on your actual responses.",
    "benefits": [
      "Identified 90% adventure-seeking trait with specific examples from your responses",
      "Highlighted 80% beach preference with clear activity recommendations"
    ],
    "opportunities": [
      "Focus on beach activities and water sports (80% preference)",
      "Leverage social traits (85%) for group travel and networking"
    ],
    "recommendations": [
      {
        "category": "Immediate Actions",
        "items": [
          "Book beachfront accommodation for maximum coastal experience",
          "Join group tours and social events for networking"
        ]
      },
      {
        "category": "Long-term Goals",
        "items": [
          "Plan regular Goa visits based on your preferences",
          "Develop deeper connections with local culture"
        ]
      }
    ]
  }
}"""


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def build_analysis_prompt(user_data: dict[str, Any]) -> str:
    """
    Build the instruction text for one audio interview.

    Args:
        user_data: Dict with keys name, email, phone (values may be None).

    Returns:
        Prompt string. Identical inputs always produce identical output.
    """
    numbered = "\n".join(
        f"{index}. {question}" for index, question in enumerate(QUESTIONS, start=1)
    )

    return (
        "You are an AI travel personality analyzer analyzing an audio interview "
        "about Goa travel preferences. Please listen to the audio file and "
        "analyze the user's responses to provide comprehensive travel "
        "personality insights with percentages and detailed reasoning.\n\n"
        "User Information:\n"
        f"- Name: {user_data.get('name')}\n"
        f"- Email: {user_data.get('email')}\n"
        f"- Phone: {user_data.get('phone')}\n\n"
        f"The user was asked these {len(QUESTIONS)} questions in the audio:\n"
        f"{numbered}\n\n"
        "Please listen to the audio and provide your analysis in the following "
        "JSON format. Return ONLY valid JSON without any markdown formatting "
        "or code blocks:\n"
        f"{_RESPONSE_SCHEMA}\n\n"
        "IMPORTANT: Return ONLY the JSON object above, no markdown formatting, "
        "no code blocks, no additional text. Make sure to provide specific "
        "percentages, detailed reasons, and actionable recommendations based "
        "on their actual responses. Avoid generic advice."
    )
