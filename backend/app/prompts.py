# backend/app/prompts.py

from .models import AdventureRequest

BRIEF_TEMPLATE = """
Create a complete, professionally formatted TTRPG adventure module.
The final output should be in Markdown format.

**Adventure Parameters:**
- **Game System:** {system}
- **Number of Players:** {players}
- **Player Experience Level:** {experience}
- **Genre:** {genre}
- **Tone:** {tone}
- **Core Concept:** {concept}
"""

DETAILED_TEMPLATE = BRIEF_TEMPLATE + """- **Minimum Length:** 5 A4 pages

**Required Structure:**
1.  **# Title:** Come up with a creative title for the adventure.
2.  **## Adventure Synopsis:** A short summary for the Game Master.
3.  **## Player Hooks:** Provide three distinct plot hooks to get the players involved.
4.  **## Key Scenes & Encounters:** Detail the main sequence of events. Include balanced combat, social, and exploration challenges.
5.  **## Key NPCs and Monsters:** List important characters and creatures with brief descriptions. If the system is D&D 5e or Pathfinder, include mechanically appropriate stat blocks.
6.  **## Maps & Artwork Ideas:** Describe key map locations (e.g., "A two-story tavern with a secret basement") and character art concepts.
7.  **## Conclusion:** Describe how the adventure might conclude and potential rewards for the players.
"""

TEMPLATES = {
    "brief": BRIEF_TEMPLATE,
    "detailed": DETAILED_TEMPLATE,
}


def build_prompt(request: AdventureRequest, style: str = "detailed") -> str:
    """
    Interpolate the caller's parameters into the adventure template.

    Values are inserted verbatim, braces and all, so user text is never
    re-interpreted as a format field.
    """
    try:
        template = TEMPLATES[style]
    except KeyError:
        raise ValueError(f"Unknown prompt style: {style!r}") from None

    return template.format(
        system=request.system,
        players=request.players,
        experience=request.experience,
        genre=request.genre,
        tone=request.tone,
        concept=request.concept,
    )
