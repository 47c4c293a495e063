"""Profile (résumé) document data model."""

from dataclasses import dataclass, field

from resume_rag.errors import ValidationError


@dataclass(frozen=True)
class Education:
    institution: str
    location: str = ""
    degree: str = ""
    dates: str = ""
    gpa: str | None = None
    honors: list[str] = field(default_factory=list)
    coursework: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class Experience:
    company: str
    role: str = ""
    location: str = ""
    dates: str = ""
    description: str = ""
    highlights: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class Project:
    name: str
    description: str = ""
    technologies: list[str] = field(default_factory=list)
    highlights: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class OrganizationRole:
    title: str
    dates: str = ""
    location: str = ""
    highlights: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class Organization:
    name: str
    roles: list[OrganizationRole] = field(default_factory=list)


@dataclass(frozen=True)
class ProfileDocument:
    """A validated résumé: name, contact, education and experience are required."""

    name: str
    contact: dict[str, str]
    education: list[Education]
    experience: list[Experience]
    projects: list[Project] = field(default_factory=list)
    skills: list[str] = field(default_factory=list)
    organizations: list[Organization] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "ProfileDocument":
        """Build a profile from raw JSON data.

        Raises:
            ValidationError: listing every problem found, before anything
                is built.
        """
        errors = validate_profile(data)
        if errors:
            raise ValidationError("Profile data validation failed", errors)

        return cls(
            name=data["name"],
            contact={str(k): str(v) for k, v in data["contact"].items()},
            education=[_build(Education, e) for e in data["education"]],
            experience=[_build(Experience, e) for e in data["experience"]],
            projects=[_build(Project, p) for p in data.get("projects") or []],
            skills=[str(s) for s in data.get("skills") or []],
            organizations=[
                Organization(
                    name=org["name"],
                    roles=[_build(OrganizationRole, r) for r in org.get("roles") or []],
                )
                for org in data.get("organizations") or []
            ],
        )


def _build(model, raw: dict):
    known = model.__dataclass_fields__
    return model(**{k: v for k, v in raw.items() if k in known and v is not None})


_REQUIRED_KEYS = {
    "education": ("institution",),
    "experience": ("company",),
    "projects": ("name",),
    "organizations": ("name",),
}

_LIST_KEYS = {
    "education": ("honors", "coursework"),
    "experience": ("highlights",),
    "projects": ("technologies", "highlights"),
    "organizations": (),
}


def _check_lists(entry: dict, keys, where: str) -> list[str]:
    return [
        f"{where}.{key} must be a list"
        for key in keys
        if entry.get(key) is not None and not isinstance(entry[key], list)
    ]


def validate_profile(data) -> list[str]:
    """Return every validation problem in raw profile data (empty if valid)."""
    if not isinstance(data, dict):
        return ["Profile data must be a JSON object"]

    errors = []
    if not data.get("name") or not isinstance(data["name"], str):
        errors.append("Missing name")

    contact = data.get("contact")
    if not isinstance(contact, dict) or not contact:
        errors.append("Missing contact information")

    for section in ("education", "experience"):
        entries = data.get(section)
        if not isinstance(entries, list) or not entries:
            errors.append(f"Missing {section} information")

    for section in ("projects", "skills", "organizations"):
        entries = data.get(section)
        if entries is not None and not isinstance(entries, list):
            errors.append(f"{section} must be a list")

    for section, keys in _REQUIRED_KEYS.items():
        entries = data.get(section)
        if not isinstance(entries, list):
            continue
        for i, entry in enumerate(entries):
            if not isinstance(entry, dict):
                errors.append(f"{section}[{i}] must be an object")
                continue
            for key in keys:
                if not entry.get(key):
                    errors.append(f"{section}[{i}] is missing {key}")
            errors.extend(_check_lists(entry, _LIST_KEYS[section], f"{section}[{i}]"))
            if section == "organizations":
                roles = entry.get("roles") or []
                if not isinstance(roles, list) or not all(
                    isinstance(r, dict) and r.get("title") for r in roles
                ):
                    errors.append(f"organizations[{i}] has an invalid role entry")
                    continue
                for j, role in enumerate(roles):
                    errors.extend(_check_lists(role, ("highlights",), f"organizations[{i}].roles[{j}]"))

    return errors
