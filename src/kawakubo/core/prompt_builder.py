"""Prompt compilation for clothing design requests.

The prompt is assembled from a fixed template around the user's description.
There is no randomness and no external state: the same description and
reference flag always produce the same prompt string.

Template Structure (with reference image)::

    Create a new clothing item based on this description: [Description].

    [Fixed: reference image guidance]

    [Fixed: product photography specification]

Template Structure (without reference image)::

    Create a new clothing item based on this description: [Description].

    [Fixed: product photography specification]

Sections are separated by double newlines.

Only the *presence* of a reference image changes the prompt.  The image
content itself is never forwarded to the provider.

Usage
-----
::

    prompt = build_prompt(
        "A deconstructed black wool coat with asymmetric lapels",
        has_reference_image=True,
    )
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Fixed template sections.
# ---------------------------------------------------------------------------

_REFERENCE_GUIDANCE = (
    "Use the reference image as inspiration for:\n"
    "- Overall style and aesthetic\n"
    "- Similar silhouette and proportions\n"
    "- Comparable fabric texture and draping\n"
    "- Related design elements and details\n"
    "- Similar photography style\n"
    "\n"
    "However, create a unique piece that combines these elements with the "
    "specific requirements from the description."
)

_PHOTOGRAPHY_SPEC = (
    "Present the final design as a professional product photograph:\n"
    "- Clean white or light gray background\n"
    "- Studio-quality lighting to highlight fabric texture and details\n"
    "- Sharp, clear, high-resolution image\n"
    "- Professional fashion photography style\n"
    "- Multiple angles if possible\n"
    "- Photorealistic rendering\n"
    "- HD quality\n"
    "The final image should look like a high-end fashion e-commerce product photo."
)


def build_prompt(description: str, has_reference_image: bool) -> str:
    """Compile the provider prompt for a clothing design.

    The caller is responsible for rejecting empty descriptions; the
    description is embedded verbatim and is not re-validated here.

    Args:
        description: The user's design description.
        has_reference_image: ``True`` when the user attached a reference
            image.  Adds the reference guidance section.

    Returns:
        The compiled prompt with sections separated by double newlines.
    """
    parts: list[str] = [
        f"Create a new clothing item based on this description: {description}."
    ]

    if has_reference_image:
        parts.append(_REFERENCE_GUIDANCE)

    parts.append(_PHOTOGRAPHY_SPEC)

    return "\n\n".join(parts)
