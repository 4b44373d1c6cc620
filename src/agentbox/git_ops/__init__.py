"""Host Git metadata helpers."""

from agentbox.git_ops.repo import is_inside_work_tree, read_repository_reference, run_git

__all__ = ["is_inside_work_tree", "read_repository_reference", "run_git"]
