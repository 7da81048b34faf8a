from datetime import date
from decimal import Decimal

from sqlalchemy.orm import Session

from prestamistas.models.system_settings_model import SystemSetting
from prestamistas.utils.loan_calculations import parse_amount

SETTING_TYPES = ("text", "number", "boolean", "date")

TRUE_VALUES = ("true", "1", "yes", "si", "sí")
FALSE_VALUES = ("false", "0", "no")


def normalize_setting_value(value: str, value_type: str) -> str:
    """
    Check a raw value against its declared type and return the stored form.
    Raises ValueError when the value does not fit the type.
    """
    value = str(value).strip()
    if value_type == "number":
        return str(parse_amount(value))
    if value_type == "boolean":
        low = value.lower()
        if low in TRUE_VALUES:
            return "true"
        if low in FALSE_VALUES:
            return "false"
        raise ValueError(f"Not a boolean: {value!r}")
    if value_type == "date":
        try:
            return date.fromisoformat(value).isoformat()
        except ValueError:
            raise ValueError(f"Not an ISO date (YYYY-MM-DD): {value!r}")
    if value_type == "text":
        return value
    raise ValueError(f"Unknown setting type: {value_type}")


def get_setting(db: Session, key: str, default: str) -> str:
    row = db.query(SystemSetting).filter(SystemSetting.key == key).first()
    return row.value if row else default


def get_number_setting(db: Session, key: str, default) -> Decimal:
    raw = get_setting(db, key, str(default))
    try:
        return parse_amount(raw)
    except ValueError:
        return parse_amount(default)
