from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Tuple

from .records import normalise_id

SUPER_ADMIN = "super_admin"
SHOP_OWNER = "shop_owner"
SHOP_EDITOR = "shop_editor"


@dataclass(frozen=True)
class ShopMembership:
    """A user's role inside one shop."""
    shop_id: str
    role: str = SHOP_EDITOR
    shop_name: Optional[str] = None


@dataclass(frozen=True)
class UserSession:
    """
    The signed-in user, passed explicitly into every view.

    - role_name: the global role (super_admin, shop_owner, shop_editor, user)
    - shops: shop memberships, which scope what a non-admin can see
    """
    user_id: str
    email: str = ""
    full_name: str = ""
    role_name: str = "user"
    shops: Tuple[ShopMembership, ...] = field(default_factory=tuple)

    @property
    def shop_ids(self) -> FrozenSet[str]:
        return frozenset(m.shop_id for m in self.shops)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> UserSession:
        shops = []
        for raw in data.get("shops") or []:
            shop_id = normalise_id(raw.get("shop_id"))
            if shop_id is None:
                continue
            shops.append(
                ShopMembership(
                    shop_id=shop_id,
                    role=raw.get("role", SHOP_EDITOR),
                    shop_name=raw.get("shop_name"),
                )
            )
        return cls(
            user_id=str(data.get("user_id") or data.get("id") or ""),
            email=data.get("email", ""),
            full_name=data.get("full_name", ""),
            role_name=data.get("role_name") or "user",
            shops=tuple(shops),
        )


# ----------------------------------------------------------------------
# Permission predicates; a missing session is allowed nothing
# ----------------------------------------------------------------------
def has_role(session: Optional[UserSession], role: str) -> bool:
    return session is not None and session.role_name == role


def is_super_admin(session: Optional[UserSession]) -> bool:
    return has_role(session, SUPER_ADMIN)


def has_shop_access(session: Optional[UserSession], shop_id: Any) -> bool:
    if session is None:
        return False
    if is_super_admin(session):
        return True
    return normalise_id(shop_id) in session.shop_ids


def can_access_users(session: Optional[UserSession]) -> bool:
    if session is None:
        return False
    return is_super_admin(session) or bool(session.shops)


def can_add_users(session: Optional[UserSession]) -> bool:
    return can_access_users(session)


def can_delete_users(session: Optional[UserSession]) -> bool:
    return can_access_users(session)


def available_roles(session: Optional[UserSession]) -> List[str]:
    """Roles this session may hand out when creating users."""
    if is_super_admin(session):
        return [SUPER_ADMIN, SHOP_OWNER, SHOP_EDITOR]
    if has_role(session, SHOP_OWNER):
        return [SHOP_EDITOR]
    return []


def accessible_shop_ids(session: Optional[UserSession], all_shop_ids: Iterable[Any]) -> List[str]:
    """
    Shop ids the session can see, in input order: every shop for a super
    admin, only the member shops for everyone else.
    """
    if session is None:
        return []
    keys = [k for k in (normalise_id(s) for s in all_shop_ids) if k is not None]
    if is_super_admin(session):
        return keys
    return [k for k in keys if k in session.shop_ids]
