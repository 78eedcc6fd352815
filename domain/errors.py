# domain/errors.py


class ShirtOrderError(Exception):
    """Base class for errors raised by the shirt order services."""


class StorageError(ShirtOrderError):
    """A read or write against the datastore failed."""


class OrderValidationError(ShirtOrderError):
    pass


class ComboValidationError(ShirtOrderError):
    """
    A combo create/replace request broke one of the combo rules.

    `rule` identifies which rule failed; the message is meant to be shown
    to the operator as-is.
    """
    COMBO_ID = "combo_id"
    EMPTY_COMPONENTS = "empty_components"
    INVALID_COMPONENT = "invalid_component"
    DUPLICATE_COMPONENT = "duplicate_component"
    SELF_REFERENCE = "self_reference"

    def __init__(self, rule: str, message: str):
        super().__init__(message)
        self.rule = rule
        self.message = message


class ComboNotFoundError(ShirtOrderError):
    def __init__(self, combo_id: str):
        super().__init__(f"ไม่พบแบบเสื้อรหัส {combo_id}")
        self.combo_id = combo_id


class ComboReplaceError(ShirtOrderError):
    """
    Existing components were deleted but the new set could not be inserted.
    The combo is left without components until the operator retries.
    """
    def __init__(self, combo_id: str, reason: str):
        super().__init__(
            f"ลบคอมโพเนนต์เดิมของ Combo {combo_id} แล้ว แต่บันทึกคอมโพเนนต์ใหม่ไม่สำเร็จ: {reason} "
            f"(Combo นี้ไม่มีคอมโพเนนต์ กรุณาบันทึกอีกครั้ง)"
        )
        self.combo_id = combo_id
        self.reason = reason
