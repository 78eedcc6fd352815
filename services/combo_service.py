# services/combo_service.py

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Sequence

from data_integrator import delete_rows, fetch_one, fetch_rows, insert_rows, update_rows
from domain.combo_registry import ComboRegistry
from domain.errors import (
    ComboNotFoundError,
    ComboReplaceError,
    ComboValidationError,
    StorageError,
)
from domain.models import ComboComponent, ComboComponentEdge

logger = logging.getLogger(__name__)

DESIGN_TABLE = "shirt_designs"
COMBO_TABLE = "shirt_combo_components"


@dataclass
class ComboComponentView:
    component_id: str
    component_name: str
    multiplier: int


@dataclass
class ComboView:
    """
    A combo as listed on the admin page.
    """
    combo_id: str
    combo_name: str
    is_combo: bool  # flag stored on the design row
    components: List[ComboComponentView] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Reading
# ---------------------------------------------------------------------------

def load_combo_edges(db) -> List[ComboComponentEdge]:
    ok, msg, rows = fetch_rows(
        db,
        COMBO_TABLE,
        "combo_design_id, component_design_id, quantity_multiplier",
        order_by=[("combo_design_id", False), ("component_design_id", False)],
    )
    if not ok:
        raise StorageError(msg)

    # a row that cannot be read is skipped so the rest still reports
    edges: List[ComboComponentEdge] = []
    for row in rows:
        try:
            edges.append(ComboComponentEdge.from_row(row))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Skipping malformed combo component row %s: %s", row, e)
    return edges


def load_combo_registry(db) -> ComboRegistry:
    """
    Snapshot of every combo relationship.

    A failed read is logged and gives an empty registry so reports still
    render; combo designs then show up unexpanded.
    """
    try:
        edges = load_combo_edges(db)
    except StorageError as e:
        logger.error("Error fetching combo relationships: %s", e)
        return ComboRegistry()
    return ComboRegistry.build(edges)


def list_combos(db) -> List[ComboView]:
    """
    Combos grouped by combo design, with design names resolved.
    Raises StorageError when either table cannot be read.
    """
    edges = load_combo_edges(db)

    ok, msg, designs = fetch_rows(db, DESIGN_TABLE, "id, name, is_combo", order_by=[("id", False)])
    if not ok:
        raise StorageError(msg)

    design_map = {str(d["id"]): d for d in designs}

    def name_of(design_id: str) -> str:
        return (design_map.get(design_id) or {}).get("name") or "Unknown"

    combos: Dict[str, ComboView] = {}
    for edge in edges:
        view = combos.get(edge.combo_design_id)
        if view is None:
            view = ComboView(
                combo_id=edge.combo_design_id,
                combo_name=name_of(edge.combo_design_id),
                is_combo=bool((design_map.get(edge.combo_design_id) or {}).get("is_combo", False)),
            )
            combos[edge.combo_design_id] = view

        view.components.append(
            ComboComponentView(
                component_id=edge.component_design_id,
                component_name=name_of(edge.component_design_id),
                multiplier=edge.quantity_multiplier,
            )
        )

    return list(combos.values())


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def _is_positive_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 1


def validate_combo_request(
        combo_id: str,
        components: Sequence[ComboComponent],
        design_exists: Callable[[str], bool],
) -> None:
    """
    Check a create/replace request. The first broken rule raises
    ComboValidationError; the rules are checked in this order:

      1. combo_id is set and is an existing design
      2. at least one component
      3. every component has an id and a multiplier >= 1
      4. no component listed twice
      5. the combo is not one of its own components
    """
    if not combo_id:
        raise ComboValidationError(ComboValidationError.COMBO_ID, "กรุณาเลือกแบบเสื้อสำหรับ Combo")
    if not design_exists(combo_id):
        raise ComboValidationError(ComboValidationError.COMBO_ID, f"ไม่พบแบบเสื้อรหัส {combo_id}")

    if not components:
        raise ComboValidationError(
            ComboValidationError.EMPTY_COMPONENTS, "Combo ต้องมีอย่างน้อย 1 คอมโพเนนต์"
        )

    for component in components:
        if not component.component_id or not _is_positive_int(component.multiplier):
            raise ComboValidationError(
                ComboValidationError.INVALID_COMPONENT, "กรุณากรอกข้อมูลคอมโพเนนต์ให้ครบถ้วน"
            )

    component_ids = [c.component_id for c in components]
    if len(component_ids) != len(set(component_ids)):
        raise ComboValidationError(
            ComboValidationError.DUPLICATE_COMPONENT, "ไม่สามารถเลือกแบบเสื้อเดียวกันซ้ำได้"
        )

    if combo_id in component_ids:
        raise ComboValidationError(
            ComboValidationError.SELF_REFERENCE, "Combo ไม่สามารถมีตัวเองเป็นคอมโพเนนต์ได้"
        )


def _design_exists(db) -> Callable[[str], bool]:
    def check(design_id: str) -> bool:
        ok, msg, row = fetch_one(db, DESIGN_TABLE, "id", design_id, "id")
        if not ok:
            raise StorageError(msg)
        return row is not None
    return check


# ---------------------------------------------------------------------------
# Writing
# ---------------------------------------------------------------------------

def create_or_replace_combo(db, combo_id: str, components: Sequence[ComboComponent]) -> None:
    """
    Make `combo_id` a combo of exactly `components`.

    The existing component rows are deleted and the new set inserted in two
    separate requests; the store gives no transaction around them. If the
    insert fails after the delete went through, ComboReplaceError is raised
    and the combo stays without components until the operator saves again.
    """
    validate_combo_request(combo_id, components, _design_exists(db))

    ok, msg, _ = update_rows(db, DESIGN_TABLE, {"is_combo": True}, "id", combo_id)
    if not ok:
        raise StorageError(msg)

    ok, msg, _ = delete_rows(db, COMBO_TABLE, "combo_design_id", combo_id)
    if not ok:
        raise StorageError(msg)

    rows = [
        {
            "combo_design_id": combo_id,
            "component_design_id": c.component_id,
            "quantity_multiplier": c.multiplier,
        }
        for c in components
    ]
    ok, msg, _ = insert_rows(db, COMBO_TABLE, rows)
    if not ok:
        logger.error("Combo %s lost its components: insert after delete failed: %s", combo_id, msg)
        raise ComboReplaceError(combo_id, msg)

    logger.info("Saved combo %s with %d components", combo_id, len(rows))


def delete_combo(db, combo_id: str) -> None:
    """
    Remove all components of `combo_id` and clear its is_combo flag.
    The design itself is kept. Deleting a combo without components is fine.
    """
    if not _design_exists(db)(combo_id):
        raise ComboNotFoundError(combo_id)

    ok, msg, _ = delete_rows(db, COMBO_TABLE, "combo_design_id", combo_id)
    if not ok:
        raise StorageError(msg)

    ok, msg, _ = update_rows(db, DESIGN_TABLE, {"is_combo": False}, "id", combo_id)
    if not ok:
        raise StorageError(msg)

    logger.info("Deleted combo %s", combo_id)
