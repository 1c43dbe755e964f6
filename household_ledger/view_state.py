"""
Collapse View-State

Per-category visibility flags owned by the presentation layer.

DESIGN DECISION: Collapse flags are plain immutable state passed into
the calculation core as an argument. The core reads them to label its
output and never changes them; collapsing a category never alters a
computed total.
"""

from collections.abc import Iterable
from typing import Union

from pydantic import BaseModel, ConfigDict, Field

from household_ledger.models.expense import ExpenseCategory, PersonalExpenseCategory


class CollapseState(BaseModel):
    """Set of collapsed category ids. Everything else is expanded."""
    model_config = ConfigDict(frozen=True)

    collapsed: frozenset[str] = Field(default_factory=frozenset)

    @classmethod
    def from_categories(
        cls,
        categories: Iterable[Union[ExpenseCategory, PersonalExpenseCategory]],
    ) -> "CollapseState":
        """Seed the view state from the flags stored on the categories."""
        return cls(collapsed=frozenset(c.id for c in categories if c.collapsed))

    def is_collapsed(self, category_id: str) -> bool:
        return category_id in self.collapsed

    def toggle(self, category_id: str) -> "CollapseState":
        if category_id in self.collapsed:
            return self.expand(category_id)
        return self.collapse(category_id)

    def collapse(self, category_id: str) -> "CollapseState":
        return CollapseState(collapsed=self.collapsed | {category_id})

    def expand(self, category_id: str) -> "CollapseState":
        return CollapseState(collapsed=self.collapsed - {category_id})

    def expand_all(self) -> "CollapseState":
        return CollapseState()
