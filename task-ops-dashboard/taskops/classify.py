"""Keyword hints for the BOH/FOH classification toggles.

Suggestions are advisory: they only decide whether the table shows a
"Suggested" badge next to a toggle and never touch stored data.
"""
from __future__ import annotations

from typing import Dict, Iterable, Optional

from taskops.models import Task

# Trades, bookings and chasing people. Checked first.
FOH_KEYWORDS = (
    "plumber", "electrician", "tradesman", "handyman", "cleaner", "gardener",
    "book", "booking", "reserve", "reservation",
    "appointment", "availability",
    "confirm", "chase", "follow up", "follow-up",
)

BOH_KEYWORDS = (
    "research", "investigate", "explore", "compare", "review", "enquiry", "inquiry", "quote", "quotes",
    "itinerary", "accommodation", "hotel", "flight", "flights", "trip", "travel",
    "birthday planning", "wedding planning", "party planning", "gift ideas", "present ideas",
    "insurance", "application", "registration", "contract", "renewal",
    "property", "house", "renovation",
)


def suggest_category(task_name: Optional[str], task_description: Optional[str]) -> Optional[str]:
    """Return "foh", "boh" or None for a task's text.

    Plain substring matching, so "booked" hits "book" and "household" hits
    "house". FOH wins when both keyword sets match.
    """
    text = f"{task_name or ''} {task_description or ''}".lower()
    if any(k in text for k in FOH_KEYWORDS):
        return "foh"
    if any(k in text for k in BOH_KEYWORDS):
        return "boh"
    return None


def category_suggestions(tasks: Iterable[Task]) -> Dict[str, str]:
    suggestions: Dict[str, str] = {}
    for t in tasks:
        suggestion = suggest_category(t.task_name, t.task_description)
        # Only hint at a flag the task does not carry yet.
        if suggestion == "boh" and not t.boh:
            suggestions[t.id] = "boh"
        elif suggestion == "foh" and not t.foh:
            suggestions[t.id] = "foh"
    return suggestions
