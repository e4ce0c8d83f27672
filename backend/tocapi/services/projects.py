"""Theory of Change project service.

Projects are stored as whole documents. Updates are partial on the way in:
ToC content sections are replaced only when the caller sends them (an explicit
``None`` clears a section), and color configuration is merged field by field
over the stored colors, so sending only a shape color keeps the text color.
"""
from datetime import datetime
from typing import Any, Callable, List, Mapping, Optional, Union

from tocapi.constants import ProjectStatus
from tocapi.schemas.project import Project
from tocapi.stores.base import ProjectStore
from tocapi.utils.clock import utc_now
from tocapi.utils.exceptions import (
    ConflictError,
    RenameConfirmationRequired,
    ValidationError,
    not_found_error,
)
from tocapi.utils.logger import logger
from tocapi.utils.merge import merge_color_config, merge_content
from tocapi.utils.validation import parse_content, validate_project_fields


def _require(value: Optional[str], field: str) -> None:
    if not value or not isinstance(value, str):
        raise ValidationError(f"{field} is required and must be a string")


class ProjectService:
    """Create, update, read and delete projects for a single owner at a time."""

    def __init__(self, store: ProjectStore, clock: Callable[[], datetime] = utc_now):
        self.store = store
        self.clock = clock

    def generate_project_id(self, owner_id: str) -> str:
        """
        Generate the next sequential project ID for an owner.

        Args:
            owner_id: Owner to generate the ID for

        Returns:
            Highest existing numeric ID plus one, or "1" for a first project
        """
        numeric_ids = []
        for project_id in self.store.project_ids(owner_id):
            try:
                numeric_ids.append(int(project_id))
            except (TypeError, ValueError):
                continue
        return str(max(numeric_ids) + 1) if numeric_ids else "1"

    def create_project(
        self,
        owner_id: str,
        title: str,
        content: Optional[Mapping[str, Any]] = None,
        color_config: Optional[Mapping[str, Any]] = None,
        status: Optional[str] = None,
    ) -> Project:
        """
        Create a new project.

        Args:
            owner_id: Owner of the project
            title: Project title, unique per owner ignoring case
            content: ToC sections to start with; missing sections are stored as None
            color_config: Per-section colors; missing sections/fields default to ""
            status: Initial status (defaults to draft)

        Returns:
            Created project

        Raises:
            ValidationError: If any field is missing or malformed
            ConflictError: If the owner already has a project with this title
        """
        _require(owner_id, "userId")
        validate_project_fields(title, status, color_config)
        sections = parse_content(content)

        logger.info(f'Creating project "{title}" for user {owner_id}')

        if self.store.title_exists(owner_id, title):
            raise ConflictError(
                f'Project title "{title}" already exists. Please choose a different name.'
            )

        now = self.clock()
        project = Project(
            owner_id=owner_id,
            project_id=self.generate_project_id(owner_id),
            title=title,
            status=status or ProjectStatus.DRAFT,
            created_at=now,
            updated_at=now,
            content=merge_content(None, sections),
            color_config=merge_color_config(None, color_config),
        )
        self.store.insert(project.to_document())

        logger.info(f"Project created with ID {project.project_id} for user {owner_id}")
        return project

    def update_project(
        self,
        owner_id: str,
        project_id: str,
        title: str,
        confirm_rename: bool = False,
        content: Optional[Mapping[str, Any]] = None,
        color_config: Optional[Mapping[str, Any]] = None,
        status: Optional[str] = None,
    ) -> Project:
        """
        Merge a partial update into an existing project and store the result.

        A title that differs from the stored one (after trimming) is a rename
        and needs ``confirm_rename=True`` plus a title no other project of the
        owner uses. Content sections present in ``content`` replace the stored
        ones; colors are merged per section and field.

        Raises:
            ValidationError: If any field is missing or malformed
            NotFoundError: If the project does not exist
            RenameConfirmationRequired: If the title changes without confirmation
            ConflictError: If the new title is already taken
        """
        _require(owner_id, "userId")
        _require(project_id, "projectId")
        validate_project_fields(title, status, color_config, partial_colors=True)
        sections = parse_content(content)

        logger.info(f"Updating project {project_id} for user {owner_id}")
        existing = self.get_project(owner_id, project_id)

        if existing.title.strip() != title.strip():
            if confirm_rename is not True:
                raise RenameConfirmationRequired(
                    "Project name change detected. Set confirm_rename to confirm."
                )
            if self.store.title_exists(owner_id, title, exclude_project_id=project_id):
                raise ConflictError(f'Project title "{title}" already exists.')
            logger.info(f'Project title changing from "{existing.title}" to "{title}"')

        updated = Project(
            owner_id=owner_id,
            project_id=project_id,
            title=title,
            status=status or existing.status,
            type=existing.type,
            created_at=existing.created_at,
            updated_at=self.clock(),
            content=merge_content(existing.content, sections),
            color_config=merge_color_config(existing.color_config, color_config),
        )
        self.store.replace(owner_id, project_id, updated.to_document())

        logger.info(f"Project updated: {project_id}")
        return updated

    def get_project(self, owner_id: str, project_id: str) -> Project:
        """Fetch one project, raising NotFoundError if the owner has no such project."""
        doc = self.store.find(owner_id, project_id)
        if doc is None:
            raise not_found_error("Project", f"{project_id} for user {owner_id}")
        return Project.from_document(doc)

    def list_projects(self, owner_id: str) -> List[Project]:
        """List an owner's projects, newest first."""
        _require(owner_id, "userId")
        docs = self.store.list_by_owner(owner_id)
        logger.info(f"Found {len(docs)} projects for user {owner_id}")
        return [Project.from_document(doc) for doc in docs]

    def get_projects(
        self, owner_id: str, project_id: Optional[str] = None
    ) -> Union[Project, List[Project]]:
        """Return a single project when ``project_id`` is given, else all of the owner's projects."""
        if project_id:
            return self.get_project(owner_id, project_id)
        return self.list_projects(owner_id)

    def delete_project(self, owner_id: str, project_id: str) -> None:
        """
        Delete a project.

        Raises:
            NotFoundError: If there was nothing to delete
        """
        _require(owner_id, "userId")
        _require(project_id, "projectId")
        if not self.store.delete(owner_id, project_id):
            raise not_found_error("Project", f"{project_id} for user {owner_id}")
        logger.info(f"Deleted project {project_id} for user {owner_id}")
