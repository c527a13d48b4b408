from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field


class RepositoryRef(BaseModel):
    owner: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)


class RepositoryMetadata(BaseModel):
    owner: str
    name: str
    full_name: Optional[str] = None
    description: Optional[str] = None
    html_url: Optional[str] = None
    default_branch: Optional[str] = None
    private: bool = False
    fork: bool = False
    archived: bool = False
    language: Optional[str] = None
    topics: List[str] = Field(default_factory=list)

    stargazers_count: int = 0
    forks_count: int = 0
    open_issues_count: int = 0
    watchers_count: int = 0

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    pushed_at: Optional[datetime] = None

    @classmethod
    def from_github(cls, payload: Dict[str, Any]) -> "RepositoryMetadata":
        owner = payload.get("owner") or {}
        fields = {k: v for k, v in payload.items() if k in cls.model_fields and v is not None}
        fields["owner"] = owner.get("login", "") if isinstance(owner, dict) else str(owner)
        return cls(**fields)


class FileNode(BaseModel):
    type: Literal["file"] = "file"
    name: str


class DirectoryNode(BaseModel):
    type: Literal["directory"] = "directory"
    name: str
    children: List["TreeNode"] = Field(default_factory=list)


TreeNode = Annotated[Union[FileNode, DirectoryNode], Field(discriminator="type")]

DirectoryNode.model_rebuild()


class FlatTreeEntry(BaseModel):
    path: str
    type: str  # "blob" | "tree" | "commit"
    mode: Optional[str] = None
    sha: Optional[str] = None
    size: Optional[int] = None
    url: Optional[str] = None


class FlatTree(BaseModel):
    tree: List[FlatTreeEntry]
    truncated: bool = False


class ErrorEnvelope(BaseModel):
    error: str
