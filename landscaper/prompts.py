"""
prompts.py — Every prompt the studio sends to Gemini.

The architectural boundaries and landscaping principles below are injected
verbatim into every generation request, whatever the user typed. User text
only ever fills the instruction slot; it never replaces the rules.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from .models import DesignComplexity, GardenStyle

# ── Object detection ──────────────────────────────────────────────────────────

DETECTION_PROMPT = (
    "Identify only the unique, specific vegetation or functional features in this yard photo "
    "that a homeowner might want to explicitly choose to keep, hide, or replace "
    "(e.g., 'Japanese Maple Tree', 'Stone Statue', 'Ornamental Fountain', 'Utility Box', "
    "'AC Unit', 'Electrical Box', 'Specific Large Rose Bush', 'Old Oak Tree'). "
    "IGNORE permanent architectural elements like 'House', 'Main Building', 'Driveway', "
    "'Sidewalk', 'Garage', and 'Fence' as these are considered permanent. "
    "Return a JSON array of short, descriptive strings."
)

# ── Generation rubric ─────────────────────────────────────────────────────────

COMPLEXITY_INSTRUCTIONS = {
    DesignComplexity.SIMPLE: (
        "TRANSFORMATION LEVEL: MINIMAL (LEAST DESTRUCTIVE). Keep existing layout and beds. "
        "Only refresh plants and clean edges. Do not remove major existing trees or "
        "non-architectural structures unless strictly necessary."
    ),
    DesignComplexity.BALANCED: (
        "TRANSFORMATION LEVEL: MODERATE (BALANCED). Upgrade plant palette, refine bed shapes, "
        "and introduce high-quality materials while respecting the general flow of the existing space."
    ),
    DesignComplexity.PREMIUM: (
        "TRANSFORMATION LEVEL: MAXIMUM (TRANSFORMATIVE). Full creative freedom to overhaul layout, "
        "add hardscapes (stone patios, fire pits, water features), and create multi-layered "
        "high-end planting zones."
    ),
}

ARCHITECTURAL_BOUNDARIES = """\
STRICT ARCHITECTURAL BOUNDARIES:
- MANDATORY: The House, Main Building, Garage, Driveway, Sidewalks, and Fencing MUST be preserved exactly as they are. DO NOT MODIFY, REPLACE, OR OVERLAP THEM.
- NO ENCROACHMENT: Under no circumstances should plants, mulch, grass, or soil appear on top of the driveway, garage floor, or sidewalks. These functional surfaces must remain 100% clear.
- CLEAN EDGING: All planting beds must have sharp, professional edging separating them from lawn or hardscape."""

LANDSCAPING_PRINCIPLES = """\
EXPERT LANDSCAPING PRINCIPLES:
1. LAYERED PLANTING: Use the 'Short-Medium-Tall' principle. Place low groundcovers at the front, medium perennials/shrubs in the middle, and taller specimens/privacy screens at the back or against the house.
2. SCREENING: If utility boxes, AC units, or trash areas are visible and NOT in the 'keep' list, screen them elegantly with evergreen shrubs or ornamental grasses.
3. SCALE & PROPORTION: Select plants that complement the house's height. Do not block windows with trees unless they are specifically 'airy' species.
4. MATERIAL REALISM: Use realistic textures for mulch (bark/dark), stone (river rock/slate), and paving. Ensure lighting and shadows on new elements match the time of day in the original photo.
5. FOUNDATION PLANTING: Ensure plants near the house foundation look anchored and natural, not floating."""

TECHNICAL_INSTRUCTIONS = """\
TECHNICAL INSTRUCTIONS:
- PRESERVE PERSPECTIVE: Maintain the exact camera angle, zoom, and framing.
- NO CROPPING: Do not change the image aspect ratio or dimensions."""


def complexity_instruction(complexity: DesignComplexity) -> str:
    return COMPLEXITY_INSTRUCTIONS.get(complexity, COMPLEXITY_INSTRUCTIONS[DesignComplexity.BALANCED])


def keep_instruction(features: Iterable[str]) -> str:
    keep = [f.strip() for f in features if f and f.strip()]
    if not keep:
        return ""
    return (
        "Additionally, you MUST preserve the following specific unique features exactly "
        f"as they appear: {', '.join(keep)}."
    )


def build_generation_prompt(
    instruction: str,
    style: Optional[str] = None,
    kept_features: Sequence[str] = (),
    complexity: DesignComplexity = DesignComplexity.BALANCED,
    has_reference: bool = False,
) -> str:
    """Assemble the full text part of a generation request."""
    sections: List[str] = [
        "You are a world-class senior landscape architect with decades of experience. "
        f"Redesign the yard in the provided base image based on these instructions: {instruction}."
        + (f" The style must be {style}." if style else ""),
    ]
    if has_reference:
        sections.append(
            "The second image is a style reference. Borrow its aesthetic, planting palette and "
            "materials, but apply them to the yard in the first image."
        )
    sections += [
        complexity_instruction(complexity),
        ARCHITECTURAL_BOUNDARIES,
        LANDSCAPING_PRINCIPLES,
    ]
    keep = keep_instruction(kept_features)
    if keep:
        sections.append(keep)
    sections += [
        TECHNICAL_INSTRUCTIONS,
        "Return ONLY the modified image that matches the input's framing perfectly.",
    ]
    return "\n\n".join(sections)


# ── Instructions built from user input ────────────────────────────────────────

def style_phrase(style: Optional[GardenStyle], has_reference: bool) -> str:
    if style is not None:
        return f"in the {style.value} style"
    if has_reference:
        return "matching the aesthetic and layout of the provided reference design"
    return "in whichever style best suits the home and its surroundings"


def build_start_instruction(
    style: Optional[GardenStyle],
    has_reference: bool,
    requirements: str = "",
) -> str:
    requirement_phrase = (
        f". Additionally, satisfy these specific requirements: {requirements.strip()}"
        if requirements.strip() else ""
    )
    return (
        f"Generate a professional landscape design {style_phrase(style, has_reference)}"
        f"{requirement_phrase}. Include beautiful vegetation and high-end materials."
    )


def build_refine_instruction(user_message: str) -> str:
    return (
        f"Modify the previous design by following these specific instructions: {user_message}. "
        "Build upon the existing concept while maintaining strict architectural boundaries."
    )


# ── Assistant messages ────────────────────────────────────────────────────────

def project_name(style: Optional[GardenStyle], has_reference: bool) -> str:
    if style is not None:
        return f"My {style.value} Garden"
    return "My Reference-based Garden" if has_reference else "My Custom Garden"


def welcome_message(
    style: Optional[GardenStyle],
    complexity: DesignComplexity,
    has_reference: bool,
    requirements: str = "",
) -> str:
    if style is not None:
        basis = f"using the {style.value} style"
    elif has_reference:
        basis = "and the reference design you provided"
    else:
        basis = "with a style chosen to suit your home"

    message = (
        f"Welcome to your new garden design! I've created a {complexity.value.lower()} concept "
        f"based on your photo {basis}. I've applied senior-level landscaping principles: ensuring "
        "structural layering, proper scale relative to your house, and strict clear-zone rules "
        "for your driveway and walkways."
    )
    if requirements.strip():
        message += f' I\'ve also incorporated your special requests: "{requirements.strip()}".'
    return message


REFINEMENT_REPLY = (
    "I've updated the design reflecting your request. I made sure to maintain professional "
    "planting depths and kept all architectural hardscapes clear as per professional standards."
)

# ── Advisory chat ─────────────────────────────────────────────────────────────

ADVISORY_FALLBACK = (
    "I'm here to refine your vision with professional architectural standards. "
    "How can we improve this space?"
)

ADVISORY_PROMPT_TEMPLATE = """\
System: You are a Senior Landscape Architecture Consultant. You analyze designs based on horticultural standards, spatial flow, and curb appeal.
When the user asks for changes, provide expert insights (e.g., 'By adding these evergreens here, we create year-round structure').
Current Design context: {context}
User Input: {message}

Provide a professional, knowledgeable, and encouraging response. If the user asks for something that violates architectural safety or standard design logic, gently advise them on a better alternative."""


def format_transcript(history: Iterable[dict]) -> str:
    """Render role-tagged history as a Client/Architect transcript."""
    return "\n".join(
        f"{'Client' if turn['role'] == 'user' else 'Architect'}: {turn['content']}"
        for turn in history
    )


def build_advisory_prompt(history: Iterable[dict], message: str) -> str:
    return ADVISORY_PROMPT_TEMPLATE.format(context=format_transcript(history), message=message)
