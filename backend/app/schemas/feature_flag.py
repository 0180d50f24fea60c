from typing import Dict

from pydantic import BaseModel


class FeatureFlagsOut(BaseModel):
    flags: Dict[str, bool]


class FeatureFlagsUpdate(BaseModel):
    flags: Dict[str, bool]
