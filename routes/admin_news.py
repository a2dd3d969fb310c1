"""
Admin News Routes Blueprint

JSON endpoints behind the news admin screen. Every endpoint goes through
AdminNewsActions, which checks the admin role before anything else runs.
"""

from flask import Blueprint, current_app, jsonify, request
from flask_wtf.csrf import generate_csrf
from werkzeug.exceptions import HTTPException

from extensions import limiter
from services import query_state_codec as codec
from services.admin_news_actions import ActionResult, AdminNewsActions

admin_news_bp = Blueprint('admin_news', __name__, url_prefix='/admin/news')


def _mutation_limit():
    return current_app.config['NEWS_API_RATE_LIMIT']


def _actions() -> AdminNewsActions:
    return current_app.extensions['admin_news']


def _respond(result: ActionResult):
    return jsonify(result.to_dict()), result.status_code


def _json_body() -> dict:
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def list_params_from_args(args, include_category: bool = False) -> dict:
    """
    Translate list query-string arguments into a getCategories/getArticles payload.

    ``sort`` plus ``sortDir`` become a single sorting entry; ``search``,
    ``status`` and ``category`` become filters. Validation happens later.
    """
    params = {}
    for name in ('page', 'limit'):
        if args.get(name):
            params[name] = args.get(name)

    sort = args.get('sort')
    if sort:
        params['sorting'] = [{'id': sort, 'desc': args.get('sortDir', 'asc').lower() == 'desc'}]

    filters = {}
    if args.get('search') is not None:
        filters['search'] = args.get('search')
    if args.get('status'):
        filters['status'] = args.get('status')
    if args.get('category'):
        filters['categoryId'] = args.get('category')
    if filters:
        params['filters'] = filters

    if include_category and args.get('categoryId'):
        params['categoryId'] = args.get('categoryId')
    return params


@admin_news_bp.errorhandler(HTTPException)
def http_error(e):
    """Keep error responses JSON inside the admin API (405, 413, 429, ...)."""
    current_app.logger.warning(f"Admin news HTTP error {e.code}: {e.description}")
    return jsonify(error=e.description), e.code


@admin_news_bp.errorhandler(Exception)
def unexpected_error(e):
    current_app.logger.exception(f"Unhandled error in admin news: {e}")
    return jsonify(error="Unexpected server error"), 500


# ========== PAGE LOADER ==========

@admin_news_bp.route("")
@admin_news_bp.route("/")
def page():
    """
    Initial payload of the admin screen.

    Decodes the ``news_*`` URL parameters and loads both lists, the stats,
    and the category dropdown in one round trip. The payload also carries
    the CSRF token that every mutation must echo in the ``X-CSRFToken``
    header.
    """
    actions = _actions()
    view_state = codec.decode(
        request.args, page_size_options=current_app.config['NEWS_PAGE_SIZE_OPTIONS']
    )
    list_params = codec.to_list_params(view_state)

    categories = actions.get_categories(list_params)
    if categories.status_code in (401, 403):
        return _respond(categories)
    articles = actions.get_articles(list_params)
    select = actions.get_categories_for_select()

    categories_data = dict(categories.data or {})
    current_app.logger.info(
        f"News admin loaded - tab={view_state.active_tab.value} page={view_state.page}"
    )
    return jsonify({
        "viewState": view_state.to_dict(),
        "categories": {k: v for k, v in categories_data.items() if k != "stats"} or None,
        "stats": categories_data.get("stats"),
        "articles": articles.data,
        "categoriesForSelect": select.data or [],
        "error": categories.error or articles.error,
        "csrfToken": generate_csrf(),
    })


# ========== CATEGORIES ==========

@admin_news_bp.route("/api/categories", methods=["GET"])
def list_categories():
    return _respond(_actions().get_categories(list_params_from_args(request.args)))


@admin_news_bp.route("/api/categories", methods=["POST"])
@limiter.limit(_mutation_limit)
def create_category():
    return _respond(_actions().create_category(_json_body()))


@admin_news_bp.route("/api/categories/select", methods=["GET"])
def categories_for_select():
    result = _actions().get_categories_for_select()
    if not result.ok:
        return _respond(result)
    return jsonify(result.data)


@admin_news_bp.route("/api/categories/<category_id>", methods=["PATCH"])
@limiter.limit(_mutation_limit)
def update_category(category_id):
    return _respond(_actions().update_category(category_id, _json_body()))


@admin_news_bp.route("/api/categories/<category_id>", methods=["DELETE"])
@limiter.limit(_mutation_limit)
def delete_category(category_id):
    return _respond(_actions().delete_category(category_id))


@admin_news_bp.route("/api/categories/<category_id>/status", methods=["POST"])
@limiter.limit(_mutation_limit)
def toggle_category_status(category_id):
    return _respond(_actions().toggle_category_status(category_id, _json_body().get('isActive')))


@admin_news_bp.route("/api/categories/<category_id>/featured", methods=["POST"])
@limiter.limit(_mutation_limit)
def toggle_category_featured(category_id):
    return _respond(_actions().toggle_category_featured(category_id, _json_body().get('isFeatured')))


# ========== ARTICLES ==========

@admin_news_bp.route("/api/articles", methods=["GET"])
def list_articles():
    params = list_params_from_args(request.args, include_category=True)
    return _respond(_actions().get_articles(params))


@admin_news_bp.route("/api/articles", methods=["POST"])
@limiter.limit(_mutation_limit)
def create_article():
    return _respond(_actions().create_article(_json_body()))


@admin_news_bp.route("/api/articles/<article_id>", methods=["PATCH"])
@limiter.limit(_mutation_limit)
def update_article(article_id):
    return _respond(_actions().update_article(article_id, _json_body()))


@admin_news_bp.route("/api/articles/<article_id>", methods=["DELETE"])
@limiter.limit(_mutation_limit)
def delete_article(article_id):
    return _respond(_actions().delete_article(article_id))


@admin_news_bp.route("/api/articles/<article_id>/status", methods=["POST"])
@limiter.limit(_mutation_limit)
def toggle_article_status(article_id):
    return _respond(_actions().toggle_article_status(article_id, _json_body().get('isActive')))


@admin_news_bp.route("/api/articles/<article_id>/featured", methods=["POST"])
@limiter.limit(_mutation_limit)
def toggle_article_featured(article_id):
    return _respond(_actions().toggle_article_featured(article_id, _json_body().get('isFeatured')))


# ========== UPLOADS ==========

@admin_news_bp.route("/api/uploads", methods=["POST"])
@limiter.limit(_mutation_limit)
def image_upload_url():
    result = _actions().get_image_upload_url(_json_body())
    if not result.ok:
        return _respond(result)
    return jsonify(result.data)
