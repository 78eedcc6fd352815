# domain/combo_registry.py

from dataclasses import replace
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, TypeVar

from domain.models import ComboComponent, ComboComponentEdge

T = TypeVar("T")


class ComboRegistry:
    """
    Read-only snapshot of combo products: combo design id -> ordered components.

    Built fresh from the shirt_combo_components rows for every request and
    never mutated afterwards.
    """

    def __init__(self, combos: Optional[Mapping[str, Sequence[ComboComponent]]] = None):
        self._combos: Dict[str, tuple] = {
            combo_id: tuple(components)
            for combo_id, components in (combos or {}).items()
            if components
        }

    @classmethod
    def build(cls, edges: Iterable[ComboComponentEdge]) -> "ComboRegistry":
        """
        Group edges by combo id, keeping the input order inside each group.

        No validation happens here: a self-reference or duplicate edge is kept
        as-is so reports still render over dirty data.
        """
        grouped: Dict[str, List[ComboComponent]] = {}
        for edge in edges:
            grouped.setdefault(edge.combo_design_id, []).append(
                ComboComponent(edge.component_design_id, edge.quantity_multiplier)
            )
        return cls(grouped)

    def has(self, design_id: str) -> bool:
        return design_id in self._combos

    def components_of(self, design_id: str) -> List[ComboComponent]:
        return list(self._combos.get(design_id, ()))

    def combo_ids(self) -> List[str]:
        return list(self._combos)

    def __contains__(self, design_id: object) -> bool:
        return design_id in self._combos

    def __len__(self) -> int:
        return len(self._combos)

    def __repr__(self) -> str:
        return f"ComboRegistry({self._combos!r})"


def _get(item: Any, key: str) -> Any:
    if isinstance(item, Mapping):
        return item[key]
    return getattr(item, key)


def _with_design(item: T, design: str, quantity: int) -> T:
    if isinstance(item, Mapping):
        return {**item, "design": design, "quantity": quantity}
    return replace(item, design=design, quantity=quantity)


def expand_combo_items(items: Iterable[T], registry: ComboRegistry) -> List[T]:
    """
    Replace every combo line item with one item per component.

    Each expanded item keeps the original size and every other field, with
    `design` set to the component and `quantity` multiplied by the component
    multiplier. Expansions are inserted where the combo item was, components
    in registry order. Items that are not combos pass through untouched.

    Works with OrderLineItem dataclasses as well as plain dict rows.
    """
    expanded: List[T] = []
    for item in items:
        design = _get(item, "design")
        if not registry.has(design):
            expanded.append(item)
            continue

        quantity = _get(item, "quantity")
        for component_id, multiplier in registry.components_of(design):
            expanded.append(_with_design(item, component_id, quantity * multiplier))

    return expanded
