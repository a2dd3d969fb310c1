"""
Admin News Actions - the operations the news admin UI calls

Every operation runs the same pipeline: check the caller is an admin,
validate the payload, hand it to the list or mutation service, and fold the
outcome (or the first error) into an ActionResult.
"""

import functools
import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from pydantic import ValidationError

from schemas.news import (
    CreateArticleSchema,
    CreateCategorySchema,
    GetArticlesParams,
    GetCategoriesParams,
    ImageUploadRequestSchema,
    RecordIdSchema,
    ToggleFeaturedSchema,
    ToggleStatusSchema,
    UpdateArticleSchema,
    UpdateCategorySchema,
    first_error_message,
)
from services.auth_service import AuthorizationGate
from services.news_list_service import NewsListService
from services.news_mutation_service import MutationOutcome, NewsMutationService
from services.storage_service import StorageService
from utils.errors import AdminNewsError, ValidationFailedError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActionResult:
    """
    Outcome of one admin operation.

    Either ``error`` is set, or ``data`` and/or ``success`` are. Never both.
    """
    data: Any = None
    error: Optional[str] = None
    success: Optional[str] = None
    status_code: int = 200

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failure(cls, exc: AdminNewsError) -> "ActionResult":
        return cls(error=exc.message, status_code=exc.status_code)

    @classmethod
    def from_outcome(cls, outcome: MutationOutcome, created: bool = False) -> "ActionResult":
        data = {"id": outcome.record_id} if created else None
        return cls(data=data, success=outcome.message, status_code=201 if created else 200)

    def to_dict(self) -> dict:
        if self.error is not None:
            return {"error": self.error}
        payload = {}
        if self.data is not None:
            payload["data"] = self.data
        if self.success is not None:
            payload["success"] = self.success
        return payload


def validate(schema, payload: Optional[Mapping]):
    """
    Parse ``payload`` with ``schema``.

    Raises:
        ValidationFailedError: carrying the first failing rule's message
    """
    try:
        return schema.model_validate(dict(payload or {}))
    except ValidationError as exc:
        raise ValidationFailedError(first_error_message(exc)) from exc


def admin_action(func):
    """Authorize first, then run the action; admin errors become results."""

    @functools.wraps(func)
    def wrapper(self, *args, **kwargs) -> ActionResult:
        try:
            self.gate.require_admin()
            return func(self, *args, **kwargs)
        except AdminNewsError as exc:
            logger.info("%s rejected: %s", func.__name__, exc.message)
            return ActionResult.failure(exc)
    return wrapper


class AdminNewsActions:
    """Entry point for every news admin operation."""

    def __init__(
        self,
        gate: AuthorizationGate,
        list_service: NewsListService,
        mutation_service: NewsMutationService,
        storage_service: Optional[StorageService] = None,
    ):
        self.gate = gate
        self.list_service = list_service
        self.mutation_service = mutation_service
        self.storage_service = storage_service

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @admin_action
    def get_categories(self, params: Optional[Mapping] = None) -> ActionResult:
        query = validate(GetCategoriesParams, params)
        envelope, stats = self.list_service.list_categories(query)
        data = envelope.to_dict()
        data["stats"] = stats.to_dict()
        return ActionResult(data=data)

    @admin_action
    def get_articles(self, params: Optional[Mapping] = None) -> ActionResult:
        query = validate(GetArticlesParams, params)
        envelope = self.list_service.list_articles(query)
        return ActionResult(data=envelope.to_dict())

    @admin_action
    def get_categories_for_select(self) -> ActionResult:
        return ActionResult(data=self.list_service.categories_for_select())

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    @admin_action
    def create_category(self, payload: Mapping) -> ActionResult:
        data = validate(CreateCategorySchema, payload)
        return ActionResult.from_outcome(self.mutation_service.create_category(data), created=True)

    @admin_action
    def update_category(self, category_id: str, payload: Mapping) -> ActionResult:
        data = validate(UpdateCategorySchema, {**(payload or {}), "id": category_id})
        return ActionResult.from_outcome(self.mutation_service.update_category(data))

    @admin_action
    def delete_category(self, category_id: str) -> ActionResult:
        data = validate(RecordIdSchema, {"id": category_id})
        return ActionResult.from_outcome(self.mutation_service.delete_category(data.id))

    @admin_action
    def toggle_category_status(self, category_id: str, is_active) -> ActionResult:
        data = validate(ToggleStatusSchema, {"id": category_id, "isActive": is_active})
        return ActionResult.from_outcome(
            self.mutation_service.toggle_category_status(data.id, data.is_active)
        )

    @admin_action
    def toggle_category_featured(self, category_id: str, is_featured) -> ActionResult:
        data = validate(ToggleFeaturedSchema, {"id": category_id, "isFeatured": is_featured})
        return ActionResult.from_outcome(
            self.mutation_service.toggle_category_featured(data.id, data.is_featured)
        )

    # ------------------------------------------------------------------
    # Articles
    # ------------------------------------------------------------------

    @admin_action
    def create_article(self, payload: Mapping) -> ActionResult:
        data = validate(CreateArticleSchema, payload)
        return ActionResult.from_outcome(self.mutation_service.create_article(data), created=True)

    @admin_action
    def update_article(self, article_id: str, payload: Mapping) -> ActionResult:
        data = validate(UpdateArticleSchema, {**(payload or {}), "id": article_id})
        return ActionResult.from_outcome(self.mutation_service.update_article(data))

    @admin_action
    def delete_article(self, article_id: str) -> ActionResult:
        data = validate(RecordIdSchema, {"id": article_id})
        return ActionResult.from_outcome(self.mutation_service.delete_article(data.id))

    @admin_action
    def toggle_article_status(self, article_id: str, is_active) -> ActionResult:
        data = validate(ToggleStatusSchema, {"id": article_id, "isActive": is_active})
        return ActionResult.from_outcome(
            self.mutation_service.toggle_article_status(data.id, data.is_active)
        )

    @admin_action
    def toggle_article_featured(self, article_id: str, is_featured) -> ActionResult:
        data = validate(ToggleFeaturedSchema, {"id": article_id, "isFeatured": is_featured})
        return ActionResult.from_outcome(
            self.mutation_service.toggle_article_featured(data.id, data.is_featured)
        )

    # ------------------------------------------------------------------
    # Uploads
    # ------------------------------------------------------------------

    @admin_action
    def get_image_upload_url(self, payload: Mapping) -> ActionResult:
        request = validate(ImageUploadRequestSchema, payload)
        if self.storage_service is None:
            return ActionResult(error="Image uploads are not configured", status_code=500)
        urls = self.storage_service.image_upload_url(
            request.entity_type,
            request.entity_id,
            request.file_name,
            request.content_type,
            request.image_index,
        )
        return ActionResult(data=urls)
