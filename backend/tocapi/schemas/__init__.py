"""Pydantic schemas for request validation and stored projects."""
from tocapi.schemas.project import Beneficiaries, Project, TocContent

__all__ = ["Beneficiaries", "Project", "TocContent"]
