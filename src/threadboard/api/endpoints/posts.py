# src/threadboard/api/endpoints/posts.py
"""Post authoring pages and the delete endpoint."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, File, Form, Query, Request, UploadFile, status
from fastapi.responses import Response
from sqlalchemy.orm import Session

from threadboard.api.deps import CurrentUserDep, SessionDep, parse_int, read_json_body
from threadboard.api.rendering import feed_url, render, see_other
from threadboard.core.errors import InvalidInputError
from threadboard.schemas.forms import DeletePostRequest, PostForm
from threadboard.services import catalog, posts, uploads

router = APIRouter(tags=["posts"])

TitleField = Annotated[str, Form()]
ContentField = Annotated[str, Form()]
CategoriesField = Annotated[list[str] | None, Form()]
ImageField = Annotated[UploadFile | None, File()]
RedirectCategoryField = Annotated[str, Form()]


def _render_form(
    request: Request,
    db: Session,
    *,
    form: PostForm,
    post_id: int | None = None,
    error: str = "",
    status_code: int = status.HTTP_200_OK,
) -> Response:
    selected = {value.strip() for value in form.category_ids}
    return render(
        request,
        "post_form.html",
        {
            "form": form,
            "post_id": post_id,
            "categories": catalog.list_categories(db),
            "selected": selected,
            "error": error,
        },
        status_code=status_code,
    )


def _build_form(
    title: str,
    content: str,
    categories: list[str] | None,
    redirect_category: str,
) -> PostForm:
    return PostForm(
        title=title,
        content=content,
        category_ids=categories or [],
        redirect_category=redirect_category,
    )


@router.get("/post/create")
async def create_post_page(
    request: Request,
    db: SessionDep,
    current_user: CurrentUserDep,
    category: str = "",
) -> Response:
    """Show an empty post form."""
    return _render_form(request, db, form=PostForm(redirect_category=category))


@router.post("/post/create")
async def create_post(
    request: Request,
    db: SessionDep,
    current_user: CurrentUserDep,
    title: TitleField = "",
    content: ContentField = "",
    categories: CategoriesField = None,
    image: ImageField = None,
    redirect_category: RedirectCategoryField = "",
) -> Response:
    """Create a post and return to the feed."""
    form = _build_form(title, content, categories, redirect_category)
    try:
        upload = await uploads.read_upload(image)
        posts.create_post(db, author=current_user, form=form, image=upload)
    except InvalidInputError as exc:
        return _render_form(
            request, db, form=form, error=exc.message, status_code=exc.status_code
        )
    return see_other(feed_url(redirect_category))


@router.get("/edit-post")
async def edit_post_page(
    request: Request,
    db: SessionDep,
    current_user: CurrentUserDep,
    post_id: Annotated[str | None, Query(alias="id")] = None,
    category: str = "",
) -> Response:
    """Show the post form filled with the current values of an owned post."""
    post = posts.get_owned_post(db, current_user, parse_int(post_id, "post ID"))
    form = PostForm(
        title=post.title,
        content=post.content,
        category_ids=[str(cid) for cid in posts.post_category_ids(db, post.id)],
        redirect_category=category,
    )
    return _render_form(request, db, form=form, post_id=post.id)


@router.post("/edit-post")
async def edit_post(
    request: Request,
    db: SessionDep,
    current_user: CurrentUserDep,
    post_id: Annotated[str | None, Query(alias="id")] = None,
    title: TitleField = "",
    content: ContentField = "",
    categories: CategoriesField = None,
    image: ImageField = None,
    redirect_category: RedirectCategoryField = "",
) -> Response:
    """Apply an edit to an owned post and return to the feed."""
    target_id = parse_int(post_id, "post ID")
    form = _build_form(title, content, categories, redirect_category)
    # Forbidden and NotFound surface before any upload handling.
    posts.get_owned_post(db, current_user, target_id)
    try:
        upload = await uploads.read_upload(image)
        posts.edit_post(db, editor=current_user, post_id=target_id, form=form, image=upload)
    except InvalidInputError as exc:
        return _render_form(
            request,
            db,
            form=form,
            post_id=target_id,
            error=exc.message,
            status_code=exc.status_code,
        )
    return see_other(feed_url(redirect_category))


@router.delete("/post/delete")
async def delete_post(
    request: Request,
    db: SessionDep,
    current_user: CurrentUserDep,
    redirect_category: str = "",
) -> Response:
    """Delete an owned post with everything that hangs off it."""
    payload = await read_json_body(request, DeletePostRequest)
    posts.delete_post(db, deleter=current_user, post_id=payload.post_id)
    return see_other(feed_url(redirect_category))
