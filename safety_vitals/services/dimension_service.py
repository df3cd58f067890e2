"""
Dimension catalog service.

The catalog names the categories survey questions are scored under
("1. Leadership", "2. Communication", ...). Keyed by a short code.
"""

import logging

from sqlalchemy import select

from safety_vitals.core.exceptions import ConflictError, NotFoundError, ValidationError
from safety_vitals.models import db
from safety_vitals.models.survey import Dimension
from safety_vitals.services.survey_stats_service import dimension_sort_key

logger = logging.getLogger(__name__)


def _text(data: dict, name: str, *, required: bool) -> str | None:
    value = data.get(name)
    if value is None or (isinstance(value, str) and not value.strip()):
        if required:
            raise ValidationError(f"{name} is required", details={name: "required"})
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{name} must be a string", details={name: "must be a string"})
    return value.strip()


def list_dimensions() -> list[dict]:
    """Catalog ordered like the dashboard: numeric prefix, then name."""
    rows = db.session.execute(select(Dimension)).scalars().all()
    rows.sort(key=lambda d: dimension_sort_key(d.dimension_name))
    return [d.to_dict() for d in rows]


def create_dimension(data: dict) -> dict:
    code = _text(data, "code", required=True)
    name = _text(data, "dimension_name", required=True)
    if db.session.get(Dimension, code) is not None:
        raise ConflictError(resource="Dimension", field="code", value=code)

    dimension = Dimension(code=code, dimension_name=name,
                          description=_text(data, "description", required=False))
    db.session.add(dimension)
    db.session.commit()
    logger.info("Dimension created: code=%s", code)
    return dimension.to_dict()


def update_dimension(code: str, data: dict) -> dict:
    dimension = db.session.get(Dimension, code)
    if dimension is None:
        raise NotFoundError(resource="Dimension", resource_id=code)
    if "dimension_name" in data:
        dimension.dimension_name = _text(data, "dimension_name", required=True)
    if "description" in data:
        dimension.description = _text(data, "description", required=False)
    db.session.commit()
    return dimension.to_dict()


def delete_dimension(code: str) -> None:
    dimension = db.session.get(Dimension, code)
    if dimension is None:
        raise NotFoundError(resource="Dimension", resource_id=code)
    db.session.delete(dimension)
    db.session.commit()
    logger.info("Dimension deleted: code=%s", code)
