"""View models produced by the feed service."""

from pydantic import BaseModel, ConfigDict, Field


class CategoryOut(BaseModel):
    """Category as listed in forms and on posts."""

    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)


class VoteState(BaseModel):
    """Aggregated votes on a target plus the viewer's own vote."""

    likes: int = 0
    dislikes: int = 0
    user_liked: bool = False
    user_disliked: bool = False


class FeedComment(VoteState):
    """Comment as shown under a post."""

    id: int
    author: str
    author_id: int
    content: str
    created_at: str


class FeedPost(VoteState):
    """Post as shown in the feed."""

    id: int
    title: str
    content: str
    author: str
    author_id: int
    created_at: str
    image_path: str | None = None
    comments: list[FeedComment] = Field(default_factory=list)
    categories: list[CategoryOut] = Field(default_factory=list)


class FeedPage(BaseModel):
    """Everything the feed page needs to render."""

    is_logged_in: bool = False
    current_user: str = ""
    current_user_id: int | None = None
    posts: list[FeedPost] = Field(default_factory=list)
    categories: list[CategoryOut] = Field(default_factory=list)
    filter: str = ""
    category_filter: str = ""
    error: str = ""
