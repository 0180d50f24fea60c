"""Feature flags por instancia de aplicación con notificación de cambios.

Cada aplicación FastAPI crea su propio `FeatureFlags` en `app.state`, de modo que los
tests pueden usar instancias independientes.
"""

import logging
from typing import Callable, Dict, List, Mapping, Optional

from fastapi import HTTPException, Request

logger = logging.getLogger(__name__)

FLAG_NAMES = (
    "enable_workflow_system",
    "enable_semantic_search",
    "enable_shared_links",
    "enable_two_factor_auth",
    "enable_telemetry",
    "enable_audit_logs",
)

Listener = Callable[[str, bool], None]


class FeatureFlags:
    def __init__(self, defaults: Optional[Mapping[str, bool]] = None):
        self._flags: Dict[str, bool] = {name: False for name in FLAG_NAMES}
        for name, value in (defaults or {}).items():
            self._check_name(name)
            self._flags[name] = bool(value)
        self._listeners: Dict[str, List[Listener]] = {}

    @staticmethod
    def _check_name(name: str) -> None:
        if name not in FLAG_NAMES:
            raise KeyError(name)

    def is_enabled(self, name: str) -> bool:
        self._check_name(name)
        return self._flags[name]

    def enable(self, name: str) -> None:
        self._set(name, True)

    def disable(self, name: str) -> None:
        self._set(name, False)

    def toggle(self, name: str) -> None:
        self._set(name, not self.is_enabled(name))

    def set_flags(self, updates: Mapping[str, bool]) -> List[str]:
        for name in updates:
            self._check_name(name)
        changed = [name for name, value in updates.items() if self._flags[name] != bool(value)]
        for name in changed:
            self._flags[name] = bool(updates[name])
        for name in changed:
            self._notify(name)
        return changed

    def all_flags(self) -> Dict[str, bool]:
        return dict(self._flags)

    def subscribe(self, name: str, listener: Listener) -> Callable[[], None]:
        self._check_name(name)
        self._listeners.setdefault(name, []).append(listener)

        def unsubscribe() -> None:
            listeners = self._listeners.get(name, [])
            if listener in listeners:
                listeners.remove(listener)

        return unsubscribe

    def _set(self, name: str, value: bool) -> None:
        self._check_name(name)
        if self._flags[name] == value:
            return
        self._flags[name] = value
        self._notify(name)

    def _notify(self, name: str) -> None:
        value = self._flags[name]
        logger.info("[flags] %s=%s", name, value)
        for listener in list(self._listeners.get(name, [])):
            listener(name, value)


def get_feature_flags(request: Request) -> FeatureFlags:
    return request.app.state.feature_flags


def require_flag(name: str):
    def checker(request: Request) -> None:
        if not get_feature_flags(request).is_enabled(name):
            raise HTTPException(status_code=404, detail="Funcionalidad deshabilitada.")
    return checker
