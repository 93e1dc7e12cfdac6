"""Pydantic schemas for cleaner policies, reports and secrets."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


SECRET_KIND = "Secret"
SECRET_API_VERSION = "v1"
REPORT_KIND = "Report"
REPORT_API_VERSION = "apps.projectsveltos.io/v1alpha1"


class CleanerAction(str, Enum):
    DELETE = "Delete"
    TRANSFORM = "Transform"
    SCAN = "Scan"


class NotificationType(str, Enum):
    """Destinations a cleaner can notify."""

    REPORT = "CleanerReport"
    SLACK = "Slack"
    WEBEX = "Webex"
    DISCORD = "Discord"
    TEAMS = "Teams"
    SMTP = "SMTP"


class ObjectReference(BaseModel):
    namespace: str | None = None
    name: str | None = None
    kind: str | None = None
    api_version: str | None = Field(default=None, alias="apiVersion")

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class ResourceResult(BaseModel):
    """Outcome of the cleanup engine for a single resource."""

    resource: ObjectReference
    message: str = ""

    model_config = ConfigDict(frozen=True)


class ResourceInfo(BaseModel):
    resource: ObjectReference
    message: str = ""


class ReportSpec(BaseModel):
    action: str = ""
    resource_info: list[ResourceInfo] = Field(default_factory=list, alias="resourceInfo")

    model_config = ConfigDict(populate_by_name=True)


class Notification(BaseModel):
    name: str = Field(min_length=1)
    type: NotificationType
    notification_ref: ObjectReference | None = Field(default=None, alias="notificationRef")

    model_config = ConfigDict(populate_by_name=True)

    @property
    def label(self) -> str:
        notification_type = self.type.value if isinstance(self.type, NotificationType) else self.type
        return f"{notification_type}:{self.name}"


class CleanerSpec(BaseModel):
    action: CleanerAction = CleanerAction.DELETE
    notifications: list[Notification] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore")


class Cleaner(BaseModel):
    """Cleanup policy instance; only the fields notifications need are modelled."""

    name: str = Field(min_length=1)
    spec: CleanerSpec = Field(default_factory=CleanerSpec)

    model_config = ConfigDict(extra="ignore")


class Secret(BaseModel):
    name: str
    namespace: str = ""
    data: dict[str, str] | None = None
