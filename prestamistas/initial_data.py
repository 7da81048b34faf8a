import logging

from sqlalchemy.orm import Session

from prestamistas.core.config import ADMIN_EMAIL, ADMIN_PASSWORD, DEFAULT_INTEREST_RATE
from prestamistas.core.security import hash_password
from prestamistas.models.system_settings_model import SystemSetting
from prestamistas.models.user_model import User
from prestamistas.utils.database import SessionLocal

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS = [
    # key, value, value_type, description
    ("default_interest_rate", DEFAULT_INTEREST_RATE, "number", "Interest rate (%) proposed for new loans"),
    ("default_term_days", "30", "number", "Term in days proposed for new loans"),
    ("currency", "COP", "text", "Currency code shown on receipts and reports"),
    ("company_name", "Sistema de Prestamistas", "text", "Name printed on reports"),
]


def seed_settings(db: Session) -> int:
    created = 0
    for key, value, value_type, description in DEFAULT_SETTINGS:
        exists = db.query(SystemSetting).filter(SystemSetting.key == key).first()
        if exists:
            continue
        db.add(SystemSetting(key=key, value=str(value), value_type=value_type, description=description))
        created += 1
    db.commit()
    return created


def seed_admin(db: Session, email=ADMIN_EMAIL, password=ADMIN_PASSWORD) -> bool:
    if not email or not password:
        return False

    email = email.strip().lower()
    if db.query(User).filter(User.email == email).first():
        return False

    db.add(
        User(
            email=email,
            password_hash=hash_password(password),
            first_name="Admin",
            last_name="",
            role="admin",
            is_active=True,
        )
    )
    db.commit()
    logger.info("Bootstrap admin %s created", email)
    return True


def init_seed(session_factory=SessionLocal) -> None:
    db = session_factory()
    try:
        n = seed_settings(db)
        if n:
            logger.info("Seeded %s default settings", n)
        seed_admin(db)
    finally:
        db.close()
