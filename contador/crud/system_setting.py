from sqlalchemy.orm import Session
from typing import Dict, List, Optional

from contador.models.system_setting import SystemSetting
from contador.utils.encryption import encrypt, decrypt


def get_setting(db: Session, key: str) -> Optional[SystemSetting]:
    return db.query(SystemSetting).filter(SystemSetting.key == key).first()


def get_settings_by_category(db: Session, category: str, solo_activos: bool = True) -> List[SystemSetting]:
    query = db.query(SystemSetting).filter(SystemSetting.category == category)
    if solo_activos:
        query = query.filter(SystemSetting.is_active == True)
    return query.all()


def get_values_by_category(db: Session, category: str) -> Dict[str, str]:
    """{key: valor en claro}. Los secretos se devuelven descifrados."""
    values = {}
    for s in get_settings_by_category(db, category):
        values[s.key] = decrypt(s.value) if s.is_encrypted else (s.value or "")
    return values


# -----------------------------------------------------
# Upsert
# -----------------------------------------------------
def upsert_setting(
    db: Session,
    key: str,
    value: Optional[str],
    category: str,
    is_encrypted: bool = False,
    description: Optional[str] = None,
    commit: bool = True,
) -> SystemSetting:
    """Crea o actualiza una clave. Con is_encrypted el valor se cifra antes de guardar."""
    stored = encrypt(value) if (is_encrypted and value) else value

    setting = get_setting(db, key)
    if setting:
        setting.value = stored
        setting.category = category
        setting.is_encrypted = is_encrypted
        setting.is_active = True
        if description:
            setting.description = description
    else:
        setting = SystemSetting(
            key=key,
            value=stored,
            category=category,
            is_encrypted=is_encrypted,
            description=description,
            is_active=True,
        )
        db.add(setting)

    if commit:
        db.commit()
        db.refresh(setting)
    return setting
