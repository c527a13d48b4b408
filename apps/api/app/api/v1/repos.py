from typing import List, Literal, Optional, Union

from fastapi import APIRouter, Depends, Path, Request

from app.schemas.repo import (
    ErrorEnvelope,
    FlatTree,
    RepositoryMetadata,
    RepositoryRef,
    TreeNode,
)
from app.services.github.client import GitHubClient
from app.services.github.errors import translate_upstream_error
from app.services.github.tree import build_nested_tree, fetch_flat_tree

router = APIRouter(tags=["repos"])

ERROR_RESPONSES = {
    404: {"model": ErrorEnvelope, "description": "Repository not found"},
    429: {"model": ErrorEnvelope, "description": "Rate limited by GitHub"},
    500: {"model": ErrorEnvelope, "description": "Internal server error"},
    502: {"model": ErrorEnvelope, "description": "GitHub API error"},
}


def get_github(request: Request) -> GitHubClient:
    return request.app.state.github


def get_repo_ref(
    owner: str = Path(..., min_length=1),
    repo: str = Path(..., min_length=1),
) -> RepositoryRef:
    return RepositoryRef(owner=owner, name=repo)


@router.get("/repo/{owner}/{repo}", response_model=RepositoryMetadata, responses=ERROR_RESPONSES)
async def get_repo_info(
    ref: RepositoryRef = Depends(get_repo_ref),
    gh: GitHubClient = Depends(get_github),
):
    try:
        payload = await gh.get_repo(ref.owner, ref.name)
        return RepositoryMetadata.from_github(payload)
    except Exception as e:
        raise translate_upstream_error(e) from e


@router.get(
    "/repo/{owner}/{repo}/structure",
    response_model=Union[List[TreeNode], FlatTree],
    responses=ERROR_RESPONSES,
)
async def get_repo_structure(
    request: Request,
    strategy: Optional[Literal["nested", "flat"]] = None,
    ref: RepositoryRef = Depends(get_repo_ref),
    gh: GitHubClient = Depends(get_github),
):
    settings = request.app.state.settings
    strategy = strategy or settings.TREE_STRATEGY
    try:
        if strategy == "flat":
            return await fetch_flat_tree(gh, ref.owner, ref.name)
        return await build_nested_tree(
            gh, ref.owner, ref.name, max_depth=settings.TREE_MAX_DEPTH
        )
    except Exception as e:
        raise translate_upstream_error(e) from e
