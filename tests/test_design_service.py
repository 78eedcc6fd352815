import pytest

from domain.errors import StorageError
from domain.models import UploadedImage
from services.design_service import (
    DESIGN_TABLE,
    create_design,
    deactivate_design,
    get_design,
    get_price_map,
    list_design_infos,
    list_designs,
    update_design,
)

FRONT = UploadedImage("front.PNG", "image/png", b"front")
BACK = UploadedImage("back.jpg", "image/jpeg", b"back")


def new_design(db, uploader, **overrides):
    kwargs = dict(
        design_id="4",
        name="Tiger Night",
        price=420,
        description="glow print",
        front_image=FRONT,
        back_image=BACK,
        uploader=uploader,
        display_order=4,
    )
    kwargs.update(overrides)
    return create_design(db, **kwargs)


def test_list_designs_hides_inactive_by_default(db):
    db.tables[DESIGN_TABLE][1]["is_active"] = False

    assert [d.id for d in list_designs(db)] == ["1", "3"]
    assert [d.id for d in list_designs(db, include_inactive=True)] == ["1", "2", "3"]


def test_list_designs_orders_by_display_order(db):
    db.tables[DESIGN_TABLE][0]["display_order"] = 10

    assert [d.id for d in list_designs(db)] == ["2", "3", "1"]


def test_list_designs_raises_on_storage_failure(db):
    db.fail_on.add(("select", DESIGN_TABLE))

    with pytest.raises(StorageError):
        list_designs(db)


def test_list_design_infos_includes_inactive(db):
    db.tables[DESIGN_TABLE][2]["is_active"] = False

    assert [(d.id, d.name) for d in list_design_infos(db)] == [
        ("1", "Tiger Classic"),
        ("2", "Tiger Stripe"),
        ("3", "Meeting Combo"),
    ]


def test_price_map_skips_inactive(designs):
    designs[1].is_active = False

    assert get_price_map(designs) == {"1": 350, "3": 650}


def test_create_design_uploads_both_images(db, uploader):
    ok, msg, row = new_design(db, uploader)

    assert ok, msg
    assert row["front_image"] == "https://files.example/design-4-front.png"
    assert row["back_image"] == "https://files.example/design-4-back.jpg"
    assert row["is_active"] is True
    assert get_design(db, "4").name == "Tiger Night"


def test_create_design_requires_all_fields(db, uploader):
    ok, msg, _ = new_design(db, uploader, back_image=None)

    assert not ok
    assert msg == "กรุณากรอกข้อมูลให้ครบถ้วน"
    assert uploader.uploads == []


def test_create_design_rejects_duplicate_id(db, uploader):
    ok, msg, _ = new_design(db, uploader, design_id="1")

    assert not ok
    assert "1" in msg
    assert len(db.rows(DESIGN_TABLE)) == 3


def test_create_design_reports_upload_failure(db, failing_uploader):
    ok, _, _ = new_design(db, failing_uploader)

    assert not ok
    assert get_design(db, "4") is None


def test_update_design_changes_only_given_fields(db):
    ok, _, row = update_design(db, "2", price=400)

    assert ok
    assert row["price"] == 400
    assert row["name"] == "Tiger Stripe"


def test_update_design_replaces_image(db, uploader):
    ok, _, row = update_design(db, "1", uploader=uploader, front_image=FRONT)

    assert ok
    assert row["front_image"] == "https://files.example/design-1-front.png"
    assert row["back_image"] is None


def test_update_unknown_design(db):
    assert update_design(db, "77", name="x")[:2] == (False, "Design not found")


def test_update_without_changes(db):
    ok, msg, _ = update_design(db, "1")

    assert ok
    assert msg == "Nothing to update"


def test_deactivate_keeps_the_row(db):
    ok, _ = deactivate_design(db, "2")

    assert ok
    design = get_design(db, "2")
    assert design is not None
    assert design.is_active is False
