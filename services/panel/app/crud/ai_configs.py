import copy
from typing import Any, Dict, Optional
from uuid import UUID
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.ai_config import AIConfig, default_knowledge_base
from app.schemas.ai_config_schema import AIConfigOut, AIConfigUpdate


def get_config(db: Session, user_id: UUID) -> Optional[AIConfig]:
    return db.query(AIConfig).filter(AIConfig.user_id == user_id).first()


def get_or_create_config(db: Session, user_id: UUID) -> AIConfig:
    config = get_config(db, user_id)
    if config is not None:
        return config

    config = AIConfig(user_id=user_id)
    db.add(config)
    try:
        db.commit()
    except IntegrityError:
        # outra requisição criou primeiro
        db.rollback()
        return get_config(db, user_id)
    db.refresh(config)
    return config


def serialize_config(config: AIConfig) -> Dict[str, Any]:
    return AIConfigOut.model_validate(config).model_dump(mode="json")


def merge_knowledge_base(current: Optional[Dict[str, Any]], incoming: Dict[str, Any]) -> Dict[str, Any]:
    """Mescla a base recebida sobre a atual, que por sua vez parte do esqueleto padrão."""
    merged = default_knowledge_base()
    for source in (current or {}, incoming):
        for key, value in source.items():
            if isinstance(value, dict) and isinstance(merged.get(key), dict):
                section = dict(merged[key])
                section.update(value)
                merged[key] = section
            else:
                merged[key] = value
    return merged


def update_config(db: Session, config: AIConfig, payload: AIConfigUpdate) -> AIConfig:
    update_data = payload.model_dump(exclude_unset=True)
    if "knowledge_base" in update_data:
        update_data["knowledge_base"] = merge_knowledge_base(
            copy.deepcopy(config.knowledge_base),
            update_data["knowledge_base"] or {},
        )

    for field, value in update_data.items():
        setattr(config, field, value)

    db.commit()
    db.refresh(config)
    return config


def reset_knowledge_base(db: Session, config: AIConfig) -> AIConfig:
    config.knowledge_base = default_knowledge_base()
    db.commit()
    db.refresh(config)
    return config
