"""
Display helpers for host issues shown on a board.

Both functions only read attributes, so any host issue object (ORM row,
API payload wrapper, test double) that exposes the names below works.
"""
from typing import Any, Optional


def display_id(issue: Any) -> str:
    """
    Short identifier shown on issue cards.

    An `issue_id` attribute (rows coming from aggregated queries) wins,
    then "<project abbreviation>-<id>", then "#<id>".
    """
    if hasattr(issue, "issue_id"):
        return str(issue.issue_id)

    project = getattr(issue, "project", None)
    abbreviation = getattr(project, "rdb_abbreviation", None) if project is not None else None
    if abbreviation:
        return f"{abbreviation}-{issue.id}"

    return f"#{issue.id}"


def css_classes(issue: Any, user: Optional[Any] = None) -> str:
    """
    CSS classes for an issue card, each prefixed with a space.

    `user` is the viewing user; None means anonymous and skips the
    personal classes.
    """
    classes = []
    if issue.closed:
        classes.append("closed")
    if issue.overdue:
        classes.append("overdue")
    if issue.child:
        classes.append("child")
    if not issue.leaf:
        classes.append("parent")
    if issue.is_private:
        classes.append("private")

    if user is not None:
        if issue.author_id == user.id:
            classes.append("created-by-me")
        if issue.assigned_to_id == user.id:
            classes.append("assigned-to-me")
        if any(group.id == issue.assigned_to_id for group in user.groups):
            classes.append("assigned-to-my-group")

    return "".join(f" {name}" for name in classes)
