import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from prestamistas.core.security import get_current_user, require_admin
from prestamistas.models.system_settings_model import SystemSetting
from prestamistas.models.user_model import User
from prestamistas.schemas.settings_schema import SettingCreate, SettingOut, SettingPatch
from prestamistas.utils.database import get_db
from prestamistas.utils.settings_values import normalize_setting_value

router = APIRouter(prefix="/settings", tags=["Settings"])
logger = logging.getLogger(__name__)


def _normalized(value: str, value_type: str) -> str:
    try:
        return normalize_setting_value(value, value_type)
    except ValueError as e:
        raise HTTPException(status.HTTP_422_UNPROCESSABLE_ENTITY, str(e))


@router.get("", response_model=list[SettingOut])
def list_settings(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return db.query(SystemSetting).order_by(SystemSetting.key.asc()).all()


@router.get("/{key}", response_model=SettingOut)
def get_setting(key: str, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    obj = db.query(SystemSetting).filter(SystemSetting.key == key).first()
    if not obj:
        raise HTTPException(404, "Setting not found")
    return obj


@router.post("", response_model=SettingOut, status_code=status.HTTP_201_CREATED)
def create_setting(payload: SettingCreate, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    key = payload.key.strip()

    # 1) Prevent duplicate key
    existing = db.query(SystemSetting).filter(SystemSetting.key == key).first()
    if existing:
        raise HTTPException(status_code=409, detail="Setting key already exists")

    # 2) Create new setting
    obj = SystemSetting(
        key=key,
        value=_normalized(payload.value, payload.value_type),
        value_type=payload.value_type,
        description=(payload.description or "").strip(),
        updated_by=admin.user_id,
    )
    db.add(obj)
    db.commit()
    db.refresh(obj)

    logger.info("Setting %s created by user %s", obj.key, admin.user_id)
    return obj


@router.patch("", response_model=SettingOut)
def update_setting(payload: SettingPatch, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    obj = db.query(SystemSetting).filter(SystemSetting.key == payload.key).first()
    if not obj:
        raise HTTPException(404, "Setting not found")

    obj.value = _normalized(payload.value, obj.value_type)
    obj.updated_by = admin.user_id
    db.commit()
    db.refresh(obj)

    logger.info("Setting %s set to %r by user %s", obj.key, obj.value, admin.user_id)
    return obj
