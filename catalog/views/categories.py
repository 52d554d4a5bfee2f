from typing import Any, List, Optional

from flask import (
    Blueprint,
    abort,
    current_app,
    flash,
    jsonify,
    redirect,
    render_template,
    request,
    send_file,
    url_for,
)

from ..constants import CATEGORY_PLACEHOLDER_IMAGE
from ..errors import CategoryError
from ..services.category_listing import build_listing, listing_signature
from ..services.category_service import CategoryService
from ..utils.category_export import export_filename, export_stream
from ..utils.category_rules import eligible_parent_options
from ..utils.category_search import clean_search_term
from ..utils.category_sort import parse_sort_args, toggle_sort
from ..utils.category_tree import CategoryRecord, direct_children, index_categories
from ..utils.pagination import get_page_arg
from ..utils.text import category_key


bp = Blueprint("categories", __name__, url_prefix="/categories")


@bp.app_template_filter("category_image")
def category_image_url(url: Optional[str]) -> str:
    if not url or not url.strip():
        return CATEGORY_PLACEHOLDER_IMAGE
    return url


def notify(title: str, description: str, category: str = "success") -> None:
    flash({"title": title, "description": description}, category)


def notify_error(exc: CategoryError) -> None:
    notify(exc.title, exc.description, "danger")


def _service() -> CategoryService:
    return CategoryService()


def _load_records() -> List[CategoryRecord]:
    try:
        return _service().load()
    except CategoryError as exc:
        notify_error(exc)
        return []


def _current_listing():
    records = _load_records()
    term = clean_search_term(request.args.get("q"))
    sort = parse_sort_args(request.args)
    page = get_page_arg(listing_signature(term, sort))
    return build_listing(records, term, sort, page)


def _get_record_or_404(records: List[CategoryRecord], category_id: int) -> CategoryRecord:
    record = index_categories(records).get(category_key(category_id))
    if record is None:
        abort(404)
    return record


@bp.route("/")
def list_categories():
    listing = _current_listing()
    return render_template("categories/list.html", listing=listing)


@bp.route("/rows")
def list_category_rows():
    return jsonify(_current_listing().to_dict())


@bp.route("/<int:category_id>")
def category_detail(category_id: int):
    records = _load_records()
    category = _get_record_or_404(records, category_id)
    parent = index_categories(records).get(category_key(category.get("parentId")))
    return render_template(
        "categories/detail.html",
        category=category,
        parent=parent,
        children=direct_children(records, category_id),
    )


@bp.route("/create", methods=["GET", "POST"])
def create_category():
    records = _load_records()
    if request.method == "GET":
        return render_template(
            "categories/form.html",
            category=None,
            form={"enabled": True},
            category_options=eligible_parent_options(records),
        )

    form = _read_form()
    try:
        _service().save(records, form)
    except CategoryError as exc:
        current_app.logger.warning("Category create rejected: %s", exc.description)
        notify_error(exc)
        return render_template(
            "categories/form.html",
            category=None,
            form=form,
            category_options=eligible_parent_options(records),
        ), 400
    notify("Category created", f'"{form["name"].strip()}" was added.')
    return redirect(url_for("categories.list_categories"))


@bp.route("/<int:category_id>/edit")
def edit_category(category_id: int):
    records = _load_records()
    category = _get_record_or_404(records, category_id)
    return render_template(
        "categories/form.html",
        category=category,
        form={
            "name": category.get("name"),
            "parentId": category_key(category.get("parentId")),
            "enabled": category.get("enabled"),
            "image": category.get("image"),
        },
        category_options=eligible_parent_options(records, category_id),
    )


@bp.route("/<int:category_id>/update", methods=["POST"])
def update_category(category_id: int):
    records = _load_records()
    category = _get_record_or_404(records, category_id)
    form = _read_form()
    try:
        _service().save(records, form, editing_id=category.get("id"))
    except CategoryError as exc:
        current_app.logger.warning("Category %s update rejected: %s", category_id, exc.description)
        notify_error(exc)
        return render_template(
            "categories/form.html",
            category=category,
            form=form,
            category_options=eligible_parent_options(records, category_id),
        ), 400
    notify("Category updated", f'"{form["name"].strip()}" was updated.')
    return redirect(url_for("categories.list_categories"))


@bp.route("/<int:category_id>/delete", methods=["POST"])
def delete_category(category_id: int):
    records = _load_records()
    category = _get_record_or_404(records, category_id)
    try:
        _service().delete(records, category_id)
    except CategoryError as exc:
        current_app.logger.warning("Category %s delete rejected: %s", category_id, exc.description)
        notify_error(exc)
        return redirect(url_for("categories.list_categories"))
    notify("Category deleted", f'"{category.get("name")}" was removed.')
    return redirect(url_for("categories.list_categories"))


@bp.route("/reset", methods=["POST"])
def reset_categories():
    try:
        _service().reset()
    except CategoryError as exc:
        notify_error(exc)
        return redirect(url_for("categories.list_categories"))
    notify("Catalog reset", "The categories were restored to the factory data.")
    return redirect(url_for("categories.list_categories"))


@bp.route("/export")
def export_categories():
    try:
        records = _service().load()
    except CategoryError as exc:
        notify_error(exc)
        return redirect(url_for("categories.list_categories"))
    try:
        stream = export_stream(records)
    except CategoryError as exc:
        notify_error(exc)
        return redirect(url_for("categories.list_categories"))
    current_app.logger.info("Exported %d categories", len(records))
    notify("CSV exported", f"{len(records)} categories exported.")
    return send_file(
        stream,
        as_attachment=True,
        download_name=export_filename(),
        mimetype="text/csv; charset=utf-8",
    )


def _read_form() -> dict:
    form = request.form
    return {
        "name": form.get("name", ""),
        "parentId": form.get("parent_id") or None,
        "enabled": form.get("enabled") in ("1", "on", "true"),
        "image": form.get("image", ""),
    }


@bp.app_template_global()
def sort_url(column: str, listing: Any) -> str:
    """URL of the listing after clicking the header of ``column``."""

    state = toggle_sort(listing.sort, column)
    args = {"q": listing.search.term}
    if state.active:
        args.update({"sort": state.field, "dir": state.direction})
    return url_for("categories.list_categories", **{k: v for k, v in args.items() if v})
