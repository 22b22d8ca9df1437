from typing import Dict, Any, List
import json
from .safety_rules import SAFETY_RULES, SYSTEM_ROLE_DEFINITION, JSON_OUTPUT_FORMAT_INSTRUCTION

def build_system_prompt() -> str:
    """Constructs the static system prompt."""
    rules_str = "\n".join([f"- {rule}" for rule in SAFETY_RULES])

    return f"""{SYSTEM_ROLE_DEFINITION}

SAFETY RULES (NON-NEGOTIABLE):
{rules_str}

OUTPUT FORMAT:
{JSON_OUTPUT_FORMAT_INSTRUCTION}
"""

def build_user_prompt(subject: Dict[str, Any], page: Dict[str, Any], limit: int = 5) -> str:
    """
    Constructs the user prompt from the subject snapshot and a serialized page.
    Only the top `limit` recommendations are sent to save tokens.
    """
    subject_type = page.get("subjectType")

    if subject_type == "student":
        subject_summary = {
            "skills": subject.get("skills"),
            "weekly_hours": subject.get("weekly_hours"),
            "academic_level": subject.get("academic_level"),
            "institution": subject.get("institution"),
            "past_categories": subject.get("category_history"),
        }
    else:
        subject_summary = {
            "title": subject.get("title"),
            "category": subject.get("category"),
            "required_skills": subject.get("required_skills"),
            "hours_per_week": subject.get("hours_per_week"),
            "remote_allowed": subject.get("remote_allowed"),
        }

    recommendations = page.get("recommendations", [])[:limit]

    user_content = f"""
SUBJECT ({subject_type}):
{json.dumps(subject_summary, indent=2, default=str)}

ENGINE OUTPUT SUMMARY:
- Scoring Profile: {page.get("scoringProfile")}
- Total Candidates: {page.get("total")}
- Partial Results: {page.get("partial")}

TOP RECOMMENDATIONS (Ranked):
{json.dumps(_minimize_recommendations(recommendations), indent=2)}

TASK:
Explain these matches. Adhere strictly to the safety rules.
"""
    return user_content

def _minimize_recommendations(recommendations: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Helper to reduce recommendation size for the prompt."""
    minimized = []
    for rec in recommendations:
        minimized.append({
            "id": rec.get("candidateId"),
            "score": rec.get("compositeScore"),
            "matched_skills": rec.get("matchedSkills"),
            "missing_skills": rec.get("missingSkills"),
            "signals": {b["signal"]: b["score"] for b in rec.get("breakdown", [])},
        })
    return minimized
