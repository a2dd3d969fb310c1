"""
Selection and dialog state machine for the news admin screen.

Two states: closed, or open with a dialog kind and (for everything except
the create dialogs) the record it targets. ``reduce_dialog`` is the only
way to move between them.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union

from models.constants import EntityKind
from utils.errors import InvalidDialogTransition


class DialogKind(str, Enum):
    CATEGORY_DETAILS = "category-details"
    CATEGORY_CREATE = "category-create"
    CATEGORY_EDIT = "category-edit"
    CATEGORY_DELETE = "category-delete"
    ARTICLE_DETAILS = "article-details"
    ARTICLE_CREATE = "article-create"
    ARTICLE_EDIT = "article-edit"
    ARTICLE_DELETE = "article-delete"

    @property
    def entity_kind(self) -> EntityKind:
        if self.value.startswith("category"):
            return EntityKind.CATEGORY
        return EntityKind.ARTICLE

    @property
    def requires_target(self) -> bool:
        return not self.value.endswith("-create")


@dataclass(frozen=True)
class DialogTarget:
    """The record a dialog operates on, tagged with its kind."""
    entity_kind: EntityKind
    record: Any

    @property
    def record_id(self) -> Optional[str]:
        if isinstance(self.record, dict):
            return self.record.get("id")
        return getattr(self.record, "id", None)


@dataclass(frozen=True)
class DialogState:
    kind: Optional[DialogKind] = None
    target: Optional[DialogTarget] = None

    @property
    def is_open(self) -> bool:
        return self.kind is not None

    def is_showing(self, kind: DialogKind) -> bool:
        return self.kind == kind

    @property
    def selected_category(self):
        if self.target and self.target.entity_kind == EntityKind.CATEGORY:
            return self.target.record
        return None

    @property
    def selected_article(self):
        if self.target and self.target.entity_kind == EntityKind.ARTICLE:
            return self.target.record
        return None


CLOSED = DialogState()


@dataclass(frozen=True)
class OpenDialog:
    kind: DialogKind
    target: Optional[DialogTarget] = None


@dataclass(frozen=True)
class CloseDialog:
    pass


DialogAction = Union[OpenDialog, CloseDialog]


def reduce_dialog(state: DialogState, action: DialogAction) -> DialogState:
    """
    Apply one action to the dialog state.

    Opening replaces whatever dialog was open, so at most one is ever
    shown. Closing is accepted from any state.

    Raises:
        InvalidDialogTransition: create dialog given a target, other dialogs
            without one, a target of the wrong record kind, or an unknown action
    """
    if isinstance(action, CloseDialog):
        return CLOSED

    if not isinstance(action, OpenDialog):
        raise InvalidDialogTransition(f"Unknown dialog action: {action!r}")

    kind = DialogKind(action.kind)
    target = action.target

    if not kind.requires_target:
        if target is not None:
            raise InvalidDialogTransition(f"{kind.value} dialog does not take a record")
        return DialogState(kind=kind)

    if target is None:
        raise InvalidDialogTransition(f"{kind.value} dialog requires a record")
    if target.entity_kind != kind.entity_kind:
        raise InvalidDialogTransition(
            f"{kind.value} dialog cannot target a {target.entity_kind.value}"
        )
    return DialogState(kind=kind, target=target)


def open_dialog(state: DialogState, kind: DialogKind, record=None) -> DialogState:
    """Convenience wrapper that tags ``record`` with the dialog's entity kind."""
    kind = DialogKind(kind)
    target = DialogTarget(kind.entity_kind, record) if record is not None else None
    return reduce_dialog(state, OpenDialog(kind, target))


def close_dialog(state: DialogState) -> DialogState:
    return reduce_dialog(state, CloseDialog())
