"""Section chunker for profile documents."""

import hashlib

from resume_rag.models.chunk import Chunk
from resume_rag.models.enums import Section
from resume_rag.models.profile import ProfileDocument

BULLET = "• "

# Chunk order is fixed, independent of the field order in the source JSON.
SECTION_ORDER = [
    Section.ABOUT,
    Section.EDUCATION,
    Section.EXPERIENCE,
    Section.PROJECTS,
    Section.SKILLS,
    Section.ORGANIZATIONS,
]

SECTION_TITLES = {
    Section.ABOUT: "About",
    Section.EDUCATION: "Education",
    Section.EXPERIENCE: "Work Experience",
    Section.PROJECTS: "Projects",
    Section.SKILLS: "Skills",
    Section.ORGANIZATIONS: "Organizations & Leadership",
}

SECTION_TAGS = {
    Section.ABOUT: ("contact", "personal"),
    Section.EDUCATION: ("academic", "degree"),
    Section.EXPERIENCE: ("professional", "career"),
    Section.PROJECTS: ("development", "portfolio"),
    Section.SKILLS: ("technical", "competencies"),
    Section.ORGANIZATIONS: ("leadership", "community"),
}


def hash_content(content: str) -> str:
    """Content-addressed document id (SHA-256 hex of the UTF-8 text)."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def _bullets(label: str, items: list[str]) -> str:
    return f"{label}:\n" + "\n".join(f"{BULLET}{item}" for item in items)


def _render_about(profile: ProfileDocument) -> str:
    lines = [f"Name: {profile.name}"]
    lines.extend(f"{key[:1].upper()}{key[1:]}: {value}" for key, value in profile.contact.items())
    return "\n".join(lines)


def _render_education(profile: ProfileDocument) -> str:
    blocks = []
    for edu in profile.education:
        parts = [
            f"Institution: {edu.institution}",
            f"Location: {edu.location}",
            f"Degree: {edu.degree}",
            f"Dates: {edu.dates}",
        ]
        if edu.gpa:
            parts.append(f"GPA: {edu.gpa}")
        if edu.honors:
            parts.append(f"Honors: {', '.join(edu.honors)}")
        if edu.coursework:
            parts.append(f"Coursework: {', '.join(edu.coursework)}")
        blocks.append("\n".join(parts))
    return "\n\n".join(blocks)


def _render_experience(profile: ProfileDocument) -> str:
    blocks = []
    for exp in profile.experience:
        parts = [
            f"Company: {exp.company}",
            f"Role: {exp.role}",
            f"Location: {exp.location}",
            f"Dates: {exp.dates}",
            f"Description: {exp.description}",
        ]
        if exp.highlights:
            parts.append(_bullets("Highlights", exp.highlights))
        blocks.append("\n".join(parts))
    return "\n\n".join(blocks)


def _render_projects(profile: ProfileDocument) -> str:
    blocks = []
    for proj in profile.projects:
        parts = [f"Project: {proj.name}", f"Description: {proj.description}"]
        if proj.technologies:
            parts.append(f"Technologies: {', '.join(proj.technologies)}")
        if proj.highlights:
            parts.append(_bullets("Highlights", proj.highlights))
        blocks.append("\n".join(parts))
    return "\n\n".join(blocks)


def _render_skills(profile: ProfileDocument) -> str:
    return f"Skills: {', '.join(profile.skills)}"


def _render_organizations(profile: ProfileDocument) -> str:
    blocks = []
    for org in profile.organizations:
        parts = [f"Organization: {org.name}"]
        if org.roles:
            roles = []
            for role in org.roles:
                role_parts = [
                    f"Title: {role.title}",
                    f"Dates: {role.dates}",
                    f"Location: {role.location}",
                ]
                if role.highlights:
                    role_parts.append(_bullets("Highlights", role.highlights))
                roles.append("\n".join(role_parts))
            parts.append("Roles:\n" + "\n\n".join(roles))
        blocks.append("\n".join(parts))
    return "\n\n".join(blocks)


_RENDERERS = {
    Section.ABOUT: _render_about,
    Section.EDUCATION: _render_education,
    Section.EXPERIENCE: _render_experience,
    Section.PROJECTS: _render_projects,
    Section.SKILLS: _render_skills,
    Section.ORGANIZATIONS: _render_organizations,
}


def _is_populated(profile: ProfileDocument, section: Section) -> bool:
    if section == Section.ABOUT:
        return True
    return bool(getattr(profile, section.value))


def chunk_profile(profile: ProfileDocument) -> list[Chunk]:
    """Split a validated profile into one chunk per populated section.

    Sections come out in SECTION_ORDER; absent optional sections produce
    no chunk.
    """
    chunks = []
    for section in SECTION_ORDER:
        if not _is_populated(profile, section):
            continue
        chunks.append(
            Chunk(
                section=section,
                content=_RENDERERS[section](profile),
                title=SECTION_TITLES[section],
                tags=SECTION_TAGS[section],
            )
        )
    return chunks
