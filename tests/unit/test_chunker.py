"""Unit tests for section chunking of profile documents."""

import pytest

from resume_rag.ingestion.chunker import (
    BULLET,
    SECTION_TAGS,
    SECTION_TITLES,
    chunk_profile,
    hash_content,
)
from resume_rag.models.chunk import Chunk
from resume_rag.models.enums import Section
from resume_rag.models.profile import ProfileDocument


@pytest.fixture
def profile(profile_data):
    return ProfileDocument.from_dict(profile_data)


class TestChunkProfile:
    """One chunk per populated section, in a fixed order."""

    def test_one_chunk_per_populated_section(self, profile):
        chunks = chunk_profile(profile)
        sections = [c.section for c in chunks]
        assert sections == [
            Section.ABOUT,
            Section.EDUCATION,
            Section.EXPERIENCE,
            Section.PROJECTS,
            Section.SKILLS,
        ]

    def test_absent_optional_sections_produce_no_chunk(self, profile_data):
        del profile_data["projects"]
        profile_data["skills"] = []
        chunks = chunk_profile(ProfileDocument.from_dict(profile_data))
        sections = {c.section for c in chunks}
        assert Section.PROJECTS not in sections
        assert Section.SKILLS not in sections
        assert Section.ORGANIZATIONS not in sections
        assert all(c.content for c in chunks)

    def test_titles_and_tags(self, profile):
        for chunk in chunk_profile(profile):
            assert chunk.title == SECTION_TITLES[chunk.section]
            assert chunk.tags == SECTION_TAGS[chunk.section]

    def test_order_is_independent_of_source_key_order(self, profile_data):
        reordered = dict(reversed(list(profile_data.items())))
        a = chunk_profile(ProfileDocument.from_dict(profile_data))
        b = chunk_profile(ProfileDocument.from_dict(reordered))
        assert [c.content for c in a] == [c.content for c in b]

    def test_rendering_is_deterministic(self, profile):
        assert chunk_profile(profile) == chunk_profile(profile)


class TestSectionRendering:
    def test_about_lists_name_and_contact(self, profile):
        about = chunk_profile(profile)[0]
        assert about.content == (
            "Name: Ilan Klimberg\n"
            "Email: ilan@example.com\n"
            "Location: New York, NY"
        )

    def test_about_keeps_contact_key_order(self, profile_data):
        profile_data["contact"] = {"GitHub": "ilank", "email": "ilan@example.com"}
        about = chunk_profile(ProfileDocument.from_dict(profile_data))[0]
        assert about.content.splitlines()[1:] == ["GitHub: ilank", "Email: ilan@example.com"]

    def test_education_includes_optional_fields_when_present(self, profile):
        education = chunk_profile(profile)[1]
        assert "Institution: Cornell University" in education.content
        assert "GPA: 3.8" in education.content
        assert "Honors: Dean's List" in education.content
        assert "Coursework: Algorithms, Machine Learning" in education.content

    def test_education_omits_missing_gpa(self, profile_data):
        del profile_data["education"][0]["gpa"]
        education = chunk_profile(ProfileDocument.from_dict(profile_data))[1]
        assert "GPA" not in education.content

    def test_experience_highlights_are_bulleted(self, profile):
        experience = chunk_profile(profile)[2]
        assert "Company: Coinbase" in experience.content
        assert f"Highlights:\n{BULLET}Cut report generation from hours to minutes" in experience.content

    def test_multiple_entries_are_separated_by_blank_line(self, profile_data):
        profile_data["experience"].append({"company": "Acme", "role": "Tutor"})
        experience = chunk_profile(ProfileDocument.from_dict(profile_data))[2]
        assert "\n\nCompany: Acme" in experience.content

    def test_skills_are_comma_separated(self, profile):
        skills = chunk_profile(profile)[4]
        assert skills.content == "Skills: Python, TypeScript, SQL"

    def test_organizations_render_roles(self, profile_data):
        profile_data["organizations"] = [
            {
                "name": "ACM",
                "roles": [{"title": "President", "dates": "2023", "highlights": ["Ran hackathon"]}],
            }
        ]
        chunks = chunk_profile(ProfileDocument.from_dict(profile_data))
        org = chunks[-1]
        assert org.section == Section.ORGANIZATIONS
        assert org.title == "Organizations & Leadership"
        assert "Organization: ACM" in org.content
        assert "Roles:\nTitle: President" in org.content
        assert f"{BULLET}Ran hackathon" in org.content


class TestChunkModel:
    def test_empty_content_rejected(self):
        with pytest.raises(ValueError):
            Chunk(section=Section.ABOUT, content="", title="About")

    def test_section_coerced_from_string(self):
        chunk = Chunk(section="skills", content="Skills: Go", title="Skills")
        assert chunk.section is Section.SKILLS


class TestHashContent:
    def test_sha256_hex(self):
        digest = hash_content("hello")
        assert digest == "2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824"

    def test_stable_and_content_addressed(self):
        assert hash_content("Skills: Python") == hash_content("Skills: Python")
        assert hash_content("Skills: Python") != hash_content("Skills: Python ")
        assert len(hash_content("é")) == 64
