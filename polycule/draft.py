"""DOT editor draft, kept apart from the committed graph.

The draft is validated on every edit but only replaces the committed graph
on an explicit save. A failed save leaves the graph and its committed text
untouched.
"""

from __future__ import annotations

import logging
from typing import Callable

from .dot.ast import DotGraph
from .dot.grammar import GENERIC_ERROR, validate_dot
from .dot.reducer import dot_ast_to_graph
from .dot.serializer import to_dot
from .errors import DotSyntaxError
from .graph.store import GraphStore
from .models import GraphSnapshot

logger = logging.getLogger(__name__)


class DotDraft:
    """Editable DOT buffer bound to a `GraphStore`."""

    def __init__(self, store: GraphStore, validate: Callable[[str], list[DotGraph]] = validate_dot):
        self._store = store
        self._validate = validate
        self.committed_text = to_dot(store.snapshot)
        self.draft = self.committed_text
        self.draft_error: str | None = None
        self._unsubscribe = store.subscribe(self._on_model_change)

    def close(self) -> None:
        self._unsubscribe()

    @property
    def can_save(self) -> bool:
        return self.draft_error is None and self.draft != self.committed_text

    def _on_model_change(self, operation: str, before: GraphSnapshot, after: GraphSnapshot) -> None:
        self.committed_text = to_dot(after)
        self.draft = self.committed_text
        self.draft_error = None

    def _check(self, text: str) -> list[DotGraph] | None:
        try:
            ast = self._validate(text)
        except DotSyntaxError as exc:
            self.draft_error = str(exc) or GENERIC_ERROR
            return None
        self.draft_error = None
        return ast

    def edit(self, text: str | None) -> str | None:
        """Replace the draft text and validate it. Returns the draft error."""
        if not isinstance(text, str):
            return self.draft_error
        self.draft = text
        self._check(text)
        return self.draft_error

    def save(self) -> bool:
        """Commit the draft to the store. Returns True when the graph was replaced."""
        if self.draft_error is None and self.draft == self.committed_text:
            return False

        ast = self._check(self.draft)
        if ast is None:
            logger.debug("Draft not saved: %s", self.draft_error)
            return False

        try:
            snapshot = dot_ast_to_graph(ast)
        except (TypeError, ValueError, AttributeError) as exc:
            self.draft_error = str(exc) or GENERIC_ERROR
            logger.warning("Draft reduce failed: %s", exc)
            return False

        self._store.replace_graph(snapshot, operation="dot-commit")
        return True
