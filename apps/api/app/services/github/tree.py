from __future__ import annotations

from typing import List

from loguru import logger

from app.schemas.repo import DirectoryNode, FileNode, FlatTree, TreeNode
from app.services.github.client import GitHubAPIError, GitHubClient

DEFAULT_MAX_DEPTH = 32

# contents API: 404 "This repository is empty.", git trees API: 409 "Git Repository is empty."
EMPTY_REPO_STATUSES = (404, 409)


class TreeDepthExceeded(Exception):
    def __init__(self, path: str, max_depth: int) -> None:
        self.path = path
        self.max_depth = max_depth
        super().__init__(f"Directory {path!r} is deeper than {max_depth} levels")


async def fetch_flat_tree(gh: GitHubClient, owner: str, repo: str, ref: str = "HEAD") -> FlatTree:
    """
    One recursive git-tree call. GitHub caps the listing and sets
    `truncated` when the repository is too large to list in one go.
    """
    try:
        data = await gh.get_git_tree(owner, repo, ref=ref)
    except GitHubAPIError as e:
        if _is_empty_repo(e):
            logger.info("{}/{} is empty", owner, repo)
            return FlatTree(tree=[], truncated=False)
        raise
    tree = FlatTree(tree=data.get("tree", []), truncated=bool(data.get("truncated", False)))
    if tree.truncated:
        logger.warning("Git tree for {}/{} truncated at {} entries", owner, repo, len(tree.tree))
    return tree


async def build_nested_tree(
    gh: GitHubClient,
    owner: str,
    repo: str,
    path: str = "",
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> List[TreeNode]:
    """
    Walk the contents API one directory at a time and assemble a nested tree.

    - children keep the order GitHub lists them in
    - directories are listed one after another, so the first failing call
      stops the walk and propagates; nothing partial is returned
    - only "dir" entries are descended into; files, symlinks and submodules
      become leaves
    """
    return await _list_level(gh, owner, repo, path, depth=1, max_depth=max_depth)


async def _list_level(
    gh: GitHubClient, owner: str, repo: str, path: str, depth: int, max_depth: int
) -> List[TreeNode]:
    if depth > max_depth:
        raise TreeDepthExceeded(path, max_depth)

    try:
        entries = await gh.get_contents(owner, repo, path)
    except GitHubAPIError as e:
        # only the root listing can hit an empty repository
        if depth == 1 and not path and _is_empty_repo(e):
            logger.info("{}/{} is empty", owner, repo)
            return []
        raise
    nodes: List[TreeNode] = []
    for entry in entries:
        name = entry.get("name", "")
        if entry.get("type") == "dir":
            child_path = entry.get("path") or (f"{path}/{name}" if path else name)
            children = await _list_level(gh, owner, repo, child_path, depth + 1, max_depth)
            nodes.append(DirectoryNode(name=name, children=children))
        else:
            nodes.append(FileNode(name=name))
    return nodes


def _is_empty_repo(err: GitHubAPIError) -> bool:
    return err.status_code in EMPTY_REPO_STATUSES and "repository is empty" in err.message.lower()
