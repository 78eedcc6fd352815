# services/design_service.py

import logging
from typing import Any, Dict, List, Optional, Tuple

from data_integrator import fetch_one, fetch_rows, insert_rows, update_rows
from domain.errors import StorageError
from domain.models import DesignInfo, ShirtDesign, UploadedImage
from services.drive_service import ImageUploader

logger = logging.getLogger(__name__)

DESIGN_TABLE = "shirt_designs"


def list_designs(db, include_inactive: bool = False) -> List[ShirtDesign]:
    """
    Catalog ordered by display_order. Public pages only see active designs.
    Raises StorageError when the catalog cannot be read.
    """
    filters = None if include_inactive else {"is_active": True}
    ok, msg, rows = fetch_rows(db, DESIGN_TABLE, filters=filters, order_by=[("display_order", False)])
    if not ok:
        raise StorageError(msg)
    return [ShirtDesign.from_row(row) for row in rows]


def list_design_infos(db) -> List[DesignInfo]:
    """Every design (active or not) as (id, name), for reporting."""
    return [DesignInfo(d.id, d.name) for d in list_designs(db, include_inactive=True)]


def get_design(db, design_id: str) -> Optional[ShirtDesign]:
    ok, msg, row = fetch_one(db, DESIGN_TABLE, "id", design_id)
    if not ok:
        raise StorageError(msg)
    return ShirtDesign.from_row(row) if row else None


def get_price_map(designs: List[ShirtDesign]) -> Dict[str, float]:
    """Server-side price of every active design, used to price orders."""
    return {d.id: d.price for d in designs if d.is_active}


def _image_filename(design_id: str, side: str, image: UploadedImage) -> str:
    ext = image.filename.rsplit(".", 1)[-1].lower() if "." in image.filename else "jpg"
    return f"design-{design_id}-{side}.{ext}"


def create_design(
        db,
        *,
        design_id: str,
        name: str,
        price: float,
        description: str,
        front_image: Optional[UploadedImage],
        back_image: Optional[UploadedImage],
        uploader: ImageUploader,
        display_order: int = 0,
) -> Tuple[bool, str, Optional[Dict[str, Any]]]:
    """
    Upload both images and insert a new active design.
    Returns (ok, message, inserted_row)
    """
    if not design_id or not name or not price or not description or not front_image or not back_image:
        return False, "กรุณากรอกข้อมูลให้ครบถ้วน", None

    ok, msg, existing = fetch_one(db, DESIGN_TABLE, "id", design_id, "id")
    if not ok:
        return False, msg, None
    if existing:
        return False, f"แบบเสื้อรหัส {design_id} มีอยู่แล้ว", None

    try:
        front_url = uploader(_image_filename(design_id, "front", front_image), front_image.mimetype, front_image.data)
        back_url = uploader(_image_filename(design_id, "back", back_image), back_image.mimetype, back_image.data)
    except Exception as e:
        logger.error("Image upload failed for design %s: %s", design_id, e)
        return False, f"อัปโหลดรูปไม่สำเร็จ: {e}", None

    ok, msg, rows = insert_rows(
        db,
        DESIGN_TABLE,
        {
            "id": design_id,
            "name": name,
            "price": price,
            "description": description,
            "front_image": front_url,
            "back_image": back_url,
            "is_active": True,
            "display_order": display_order,
        },
    )
    if not ok:
        return False, msg, None

    logger.info("Created design %s", design_id)
    return True, "Shirt design created successfully", rows[0] if rows else None


def update_design(
        db,
        design_id: str,
        *,
        uploader: Optional[ImageUploader] = None,
        name: Optional[str] = None,
        price: Optional[float] = None,
        description: Optional[str] = None,
        is_active: Optional[bool] = None,
        display_order: Optional[int] = None,
        front_image: Optional[UploadedImage] = None,
        back_image: Optional[UploadedImage] = None,
) -> Tuple[bool, str, Optional[Dict[str, Any]]]:
    """
    Partial update: only the given fields change. New images replace the
    old ones when an uploader is supplied.
    """
    ok, msg, current = fetch_one(db, DESIGN_TABLE, "id", design_id)
    if not ok:
        return False, msg, None
    if not current:
        return False, "Design not found", None

    values: Dict[str, Any] = {}
    if name:
        values["name"] = name
    if price is not None:
        values["price"] = price
    if description:
        values["description"] = description
    if is_active is not None:
        values["is_active"] = is_active
    if display_order is not None:
        values["display_order"] = display_order

    try:
        if front_image is not None and front_image.data and uploader:
            values["front_image"] = uploader(
                _image_filename(design_id, "front", front_image), front_image.mimetype, front_image.data
            )
        if back_image is not None and back_image.data and uploader:
            values["back_image"] = uploader(
                _image_filename(design_id, "back", back_image), back_image.mimetype, back_image.data
            )
    except Exception as e:
        logger.error("Image upload failed for design %s: %s", design_id, e)
        return False, f"อัปโหลดรูปไม่สำเร็จ: {e}", None

    if not values:
        return True, "Nothing to update", current

    ok, msg, rows = update_rows(db, DESIGN_TABLE, values, "id", design_id)
    if not ok:
        return False, msg, None

    return True, "Shirt design updated successfully", rows[0] if rows else {**current, **values}


def deactivate_design(db, design_id: str) -> Tuple[bool, str]:
    """Soft delete: the row stays so old orders keep their design name."""
    ok, msg, _ = update_rows(db, DESIGN_TABLE, {"is_active": False}, "id", design_id)
    if not ok:
        return False, msg
    logger.info("Deactivated design %s", design_id)
    return True, "Shirt design deleted successfully"
