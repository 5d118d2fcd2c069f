"""Shared constants for README prompting."""

from __future__ import annotations

README_SECTIONS: tuple[str, ...] = (
    "Project Title and Description",
    "Key Features (bullet points)",
    "Installation Instructions",
    "Usage Examples",
    "Project Structure",
    "Technologies Used",
    "Contributing Guidelines",
    "License Information",
)

ATTRIBUTION_LINE = "Generated with GitMe – https://readme-generator-phi.vercel.app"


__all__ = ["ATTRIBUTION_LINE", "README_SECTIONS"]
