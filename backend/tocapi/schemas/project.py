"""Schemas for Theory of Change projects."""
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Union
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, StrictFloat, StrictInt, StrictStr, field_validator

from tocapi.constants import PROJECT_TYPE, TocSection
from tocapi.utils.merge import merge_color_config, merge_content


class Beneficiaries(BaseModel):
    """Who the project serves."""
    model_config = ConfigDict(extra="allow")

    description: Optional[StrictStr] = None
    estimatedReach: Optional[Union[StrictInt, StrictFloat]] = None


class TocContent(BaseModel):
    """
    Theory of Change content sections as supplied by a caller.

    Every section is optional and nullable. Which sections the caller actually
    sent is tracked by ``model_fields_set``; ``model_dump(exclude_unset=True)``
    returns only those.
    """
    bigPictureGoal: Optional[StrictStr] = None
    projectAim: Optional[StrictStr] = None
    objectives: Optional[List[Any]] = None
    beneficiaries: Optional[Beneficiaries] = None
    activities: Optional[List[Any]] = None
    outcomes: Optional[List[Any]] = None
    externalFactors: Optional[List[Any]] = None
    evidenceLinks: Optional[List[Any]] = None

    @field_validator("evidenceLinks")
    @classmethod
    def check_evidence_links(cls, links: Optional[List[Any]]) -> Optional[List[Any]]:
        for index, link in enumerate(links or []):
            if isinstance(link, str):
                parsed = urlparse(link)
                if not parsed.scheme or not parsed.netloc:
                    raise ValueError(f"evidenceLinks[{index}] must be a valid URL")
        return links


class Project(BaseModel):
    """A stored project, independent of the MongoDB document layout."""
    owner_id: str
    project_id: str
    title: str
    status: str
    type: str = PROJECT_TYPE
    created_at: datetime
    updated_at: datetime
    content: Dict[str, Any]
    color_config: Dict[str, Dict[str, Any]]

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "Project":
        """Convert a MongoDB document to a project, filling missing sections."""
        toc_data = doc.get("tocData") or {}
        return cls(
            owner_id=doc["userId"],
            project_id=doc["projectId"],
            title=toc_data.get("projectTitle") or doc.get("projectTitle") or "",
            status=doc["status"],
            type=doc.get("type", PROJECT_TYPE),
            created_at=doc["createdAt"],
            updated_at=doc["updatedAt"],
            content=merge_content(toc_data, None),
            color_config=merge_color_config(doc.get("tocColor"), None),
        )

    def to_document(self) -> Dict[str, Any]:
        """Convert to the stored MongoDB document layout."""
        toc_data: Dict[str, Any] = {"projectTitle": self.title}
        for section in TocSection:
            toc_data[section.value] = self.content.get(section.value)
        return {
            "userId": self.owner_id,
            "projectId": self.project_id,
            "projectTitle": self.title,
            "status": self.status,
            "type": self.type,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "tocData": toc_data,
            "tocColor": {
                section: dict(pair) for section, pair in self.color_config.items()
            },
        }
