"""
Blog post Pydantic models
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


def author_display(first_name: str, last_name: str) -> str:
    """Display string for an author: first and last name joined by a space"""
    return f"{first_name} {last_name}"


def _reject_nul(v: Optional[str]) -> Optional[str]:
    # PostgreSQL TEXT cannot store NUL characters
    if v is not None and "\x00" in v:
        raise ValueError('text cannot contain NUL characters')
    return v


class AuthorName(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    first_name: str = Field(..., alias="firstName", min_length=1)
    last_name: str = Field(..., alias="lastName", min_length=1)

    @field_validator('first_name', 'last_name')
    @classmethod
    def validate_name(cls, v):
        return _reject_nul(v)


class AuthorNameUpdate(BaseModel):
    """Author fields for an update; omitted parts keep their stored value"""
    model_config = ConfigDict(populate_by_name=True)

    first_name: Optional[str] = Field(None, alias="firstName", min_length=1)
    last_name: Optional[str] = Field(None, alias="lastName", min_length=1)

    @field_validator('first_name', 'last_name')
    @classmethod
    def validate_name(cls, v):
        return _reject_nul(v)


class BlogPostCreateRequest(BaseModel):
    title: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    author: AuthorName

    @field_validator('title', 'content')
    @classmethod
    def validate_text(cls, v):
        return _reject_nul(v)


class BlogPostUpdateRequest(BaseModel):
    id: Optional[str] = Field(None, description="Must match the post id in the path when supplied")
    title: Optional[str] = Field(None, min_length=1)
    content: Optional[str] = Field(None, min_length=1)
    author: Optional[AuthorNameUpdate] = None

    @field_validator('title', 'content')
    @classmethod
    def validate_text(cls, v):
        return _reject_nul(v)

    def to_updates(self) -> dict:
        """Flatten supplied fields into storage column names"""
        updates = {}
        if self.title is not None:
            updates["title"] = self.title
        if self.content is not None:
            updates["content"] = self.content
        if self.author is not None:
            if self.author.first_name is not None:
                updates["author_first_name"] = self.author.first_name
            if self.author.last_name is not None:
                updates["author_last_name"] = self.author.last_name
        return updates


class BlogPostResponse(BaseModel):
    id: str
    title: str
    author: str
    content: str
    created: str

    @classmethod
    def from_record(cls, record: dict) -> "BlogPostResponse":
        """Serialize a stored record, projecting the author display string"""
        return cls(
            id=str(record["id"]),
            title=record["title"],
            author=author_display(record["author_first_name"], record["author_last_name"]),
            content=record["content"],
            created=record["created"] if isinstance(record["created"], str) else record["created"].isoformat()
        )
