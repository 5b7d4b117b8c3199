"""Admin navigation entries contributed by this service."""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import FastAPI


@dataclass(frozen=True)
class NavigationEntry:
    path: str
    name: str
    in_navigation: bool = True


ROLES_NAVIGATION_ENTRY = NavigationEntry(path="/admin/roles", name="Roles")


def register_navigation(app: FastAPI) -> list[NavigationEntry]:
    """Add the roles admin entry to ``app.state.navigation`` once."""

    navigation: list[NavigationEntry] = getattr(app.state, "navigation", None) or []
    if ROLES_NAVIGATION_ENTRY not in navigation:
        navigation.append(ROLES_NAVIGATION_ENTRY)
    app.state.navigation = navigation
    return navigation


__all__ = ["NavigationEntry", "ROLES_NAVIGATION_ENTRY", "register_navigation"]
