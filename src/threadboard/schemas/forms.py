"""Request payloads accepted by the write endpoints."""

from __future__ import annotations

from pydantic import BaseModel, Field


class RegisterForm(BaseModel):
    """Fields submitted by the registration form."""

    username: str = ""
    email: str = ""
    password: str = ""


class LoginForm(BaseModel):
    """Fields submitted by the login form."""

    email: str = ""
    password: str = ""


class PostForm(BaseModel):
    """Title, body and category selection of the create/edit post form.

    ``category_ids`` holds the raw submitted values; the posts service parses
    and checks them so the form can be re-rendered with what the user typed.
    """

    title: str = ""
    content: str = ""
    category_ids: list[str] = Field(default_factory=list)
    redirect_category: str = ""


class DeletePostRequest(BaseModel):
    """JSON body of ``DELETE /post/delete``."""

    post_id: int


class DeleteCommentRequest(BaseModel):
    """JSON body of ``DELETE /comment/delete``."""

    comment_id: int
