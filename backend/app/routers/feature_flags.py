from fastapi import APIRouter, Depends, HTTPException

from app.middleware.auth_middleware import get_current_user, require_roles
from app.models.user import User
from app.schemas.feature_flag import FeatureFlagsOut, FeatureFlagsUpdate
from app.utils.feature_flags import FeatureFlags, get_feature_flags
from app.utils.permissions import ADMIN

router = APIRouter(prefix="/api/feature-flags", tags=["feature-flags"])


@router.get("", response_model=FeatureFlagsOut)
def read_flags(
    flags: FeatureFlags = Depends(get_feature_flags),
    _current_user: User = Depends(get_current_user),
):
    return {"flags": flags.all_flags()}


@router.put("", response_model=FeatureFlagsOut)
def update_flags(
    data: FeatureFlagsUpdate,
    flags: FeatureFlags = Depends(get_feature_flags),
    _current_user: User = Depends(require_roles(ADMIN)),
):
    try:
        flags.set_flags(data.flags)
    except KeyError as exc:
        raise HTTPException(status_code=400, detail=f"Flag desconocido: {exc.args[0]}")
    return {"flags": flags.all_flags()}
