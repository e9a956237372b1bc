"""Shopping list operations: append, categorize-replace, flatten, render, clear.

All functions return a new Session and leave their argument untouched, so a
failed categorization can never leak a half-updated session into the store.
"""

from __future__ import annotations

from aisle.sessions.store import Section, Session


def append_entry(session: Session, text: str) -> Session:
    """Add a raw entry to the end of the list. No dedup, no normalization."""
    return Session(food_list=[*session.food_list, text], sections=_copy_sections(session.sections))


def replace_sections(session: Session, sections: list[Section]) -> Session:
    return Session(food_list=list(session.food_list), sections=_copy_sections(sections))


def clear(session: Session) -> Session:
    return Session()


def flatten(session: Session) -> str:
    """Join the raw entries into the single string sent to the model."""
    return " ".join(session.food_list)


def render(sections: list[Section]) -> str:
    """Render sections as text: name line, ``- item`` lines, blank separator."""
    out = ""
    for section in sections:
        out += f"{section.name}\n"
        for item in section.items:
            out += f"- {item}\n"
        out += "\n"
    return out


def _copy_sections(sections: list[Section]) -> list[Section]:
    return [Section(name=s.name, items=list(s.items)) for s in sections]
