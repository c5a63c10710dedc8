from typing import Literal

from pydantic import BaseModel, ValidationError

from config import APP_VERSION
from models import SplitType, WeightUnit


class SettingsSchema(BaseModel):
    weight_unit: WeightUnit = WeightUnit.KG
    default_split: SplitType = SplitType.UPPER_LOWER
    default_gym: str = ""
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    app_version: str = APP_VERSION


def validate_settings(data: dict) -> None:
    try:
        SettingsSchema(**data)
    except ValidationError as e:
        raise ValueError(str(e))
