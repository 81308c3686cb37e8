"""
Crisis keyword detection and the static crisis resources shown to users.
"""

from pydantic import BaseModel

CRISIS_KEYWORDS = (
    "suicide",
    "kill myself",
    "end my life",
    "want to die",
    "harm myself",
    "self harm",
    "emergency",
    "crisis",
    # Hindi
    "आत्महत्या",
    "खुदकुशी",
    "मरना चाहता हूं",
    "जीना नहीं चाहता",
    "खुद को नुकसान",
)


class Resource(BaseModel):
    name: str
    contact: str


class CrisisResources(BaseModel):
    title: str
    description: str
    hotlines: list[Resource]
    online: list[Resource]
    reminder: str


CRISIS_RESOURCES = CrisisResources(
    title="Crisis Support",
    description=(
        "If you're experiencing a mental health emergency, "
        "please reach out for immediate help."
    ),
    hotlines=[
        Resource(
            name="National Suicide Prevention Lifeline",
            contact="988 or 1-800-273-8255",
        ),
        Resource(name="Crisis Text Line", contact="Text HOME to 741741"),
        Resource(name="Veterans Crisis Line", contact="988, then press 1"),
    ],
    online=[
        Resource(name="SAMHSA Treatment Locator", contact="findtreatment.samhsa.gov"),
        Resource(name="National Alliance on Mental Illness", contact="nami.org/help"),
        Resource(
            name="International Association for Suicide Prevention",
            contact="iasp.info/resources",
        ),
    ],
    reminder=(
        "Remember: If you or someone else is in immediate danger, please call "
        "emergency services (911 in the US) right away."
    ),
)


def is_crisis(text: str) -> bool:
    lower_text = text.lower()
    return any(keyword in lower_text for keyword in CRISIS_KEYWORDS)
