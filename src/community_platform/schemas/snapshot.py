"""Edit history schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class PostSnapshotResponse(BaseModel):
    """State of a post before one of its edits."""

    id: str
    post_id: str
    editor_user_id: str | None
    title: str
    body: str
    author_display_name: str | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CommentSnapshotResponse(BaseModel):
    """State of a comment before one of its edits."""

    id: str
    comment_id: str
    editor_user_id: str | None
    content: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
