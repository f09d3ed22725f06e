from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class PostSummary(BaseModel):
    id: str
    title: str
    date: str
    author: str
    excerpt: str
    readTime: str
    tags: List[str] = Field(default_factory=list)
    category: str


class PostDetail(PostSummary):
    content: str


class PostCreate(BaseModel):
    # Required fields are checked by the router so a missing one is a 400
    title: Optional[str] = None
    date: Optional[str] = None
    author: Optional[str] = None
    excerpt: Optional[str] = None
    readTime: Optional[str] = None
    tags: Optional[List[str]] = None
    category: Optional[str] = None
    content: Optional[str] = None

    def missing_fields(self) -> List[str]:
        return [name for name in REQUIRED_POST_FIELDS if not getattr(self, name)]


class PostUpdate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: Optional[str] = None
    date: Optional[str] = None
    author: Optional[str] = None
    excerpt: Optional[str] = None
    readTime: Optional[str] = None
    tags: Optional[List[str]] = None
    category: Optional[str] = None
    content: Optional[str] = None


REQUIRED_POST_FIELDS = ("title", "date", "author", "excerpt", "content")


class PostListResponse(BaseModel):
    success: bool = True
    posts: List[PostSummary]


class PostResponse(BaseModel):
    success: bool = True
    post: PostDetail


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
