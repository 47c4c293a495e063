"""Enumeration types for résumé RAG data models."""

from enum import Enum


class Section(str, Enum):
    ABOUT = "about"
    EDUCATION = "education"
    EXPERIENCE = "experience"
    PROJECTS = "projects"
    SKILLS = "skills"
    ORGANIZATIONS = "organizations"


class QueryStage(str, Enum):
    RECEIVED = "received"
    VALIDATED = "validated"
    AUTHENTICATED = "authenticated"
    QUOTA_CHECKED = "quota_checked"
    EMBEDDED = "embedded"
    RETRIEVED = "retrieved"
    ASSEMBLED = "assembled"
    GENERATING = "generating"
    RESPONDED = "responded"
    ERRORED = "errored"


class ErrorCode(str, Enum):
    BAD_REQUEST = "BAD_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"
    RATE_LIMIT = "RATE_LIMIT"
    INTERNAL_ERROR = "INTERNAL_ERROR"
