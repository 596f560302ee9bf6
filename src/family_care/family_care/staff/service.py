from __future__ import annotations

from typing import Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.app_logger import get_logger
from ..common.datetime_utils import now_local
from ..common.validators import require_non_empty, require_pin
from ..core.constants import DEFAULT_LOGIN_LOG_LIMIT
from ..core.enums import StaffGroup
from ..core.exceptions import AuthenticationError, ConflictError, NotFoundError, ValidationError
from .model import Staff, StaffLoginLog
from .repository import StaffRepository

logger = get_logger(__name__)

_PROFILE_FIELDS = {"full_name", "nick_name", "email", "personal_pin"}
_NULLABLE = {"email"}


class AuthService:
    """Use case: nickname + PIN login."""

    def __init__(self, staff: StaffRepository):
        self._staff = staff

    def authenticate(
        self,
        nickname: Optional[str],
        pin: Optional[str],
        *,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> Staff:
        if not nickname or not pin:
            raise ValidationError("Nickname and PIN are required")

        member = self._staff.get_by_nickname(nickname.strip())
        if not member:
            logger.warning("Login rejected: unknown or inactive nickname %r", nickname)
            raise AuthenticationError("Invalid credentials")

        now = now_local()
        try:
            ok = check_password_hash(member.pin_hash, pin)
        except (TypeError, ValueError):
            # e.g. placeholder or corrupted hashes
            ok = False

        if not ok:
            self._staff.add_login_log(
                staff_id=member.id,
                success=False,
                at=now,
                ip_address=ip_address,
                user_agent=user_agent,
                failure_reason="Invalid PIN",
            )
            logger.warning("Login rejected: wrong PIN for staff %s", member.id)
            raise AuthenticationError("Invalid credentials")

        self._staff.touch_last_login(member.id, now)
        self._staff.add_login_log(
            staff_id=member.id,
            success=True,
            at=now,
            ip_address=ip_address,
            user_agent=user_agent,
        )
        logger.info("Staff %s logged in", member.nick_name)
        return member

    def current(self, staff_id: str) -> Staff:
        member = self._staff.get_by_id(staff_id)
        if not member:
            raise NotFoundError("Staff not found")
        return member


class StaffService:
    """Use case: manage staff accounts (super-admin) and own profile."""

    def __init__(self, staff: StaffRepository):
        self._staff = staff

    def list_active(self) -> Sequence[Staff]:
        return self._staff.list_active()

    def list_for_management(self) -> Sequence[Staff]:
        return self._staff.list_all()

    def get(self, staff_id: str) -> Staff:
        member = self._staff.get_by_id(staff_id)
        if not member:
            raise NotFoundError("Staff not found")
        return member

    def _ensure_nickname_free(self, nick_name: str, *, staff_id: Optional[str] = None) -> None:
        existing = self._staff.get_by_nickname(nick_name, include_inactive=True)
        if existing and existing.id != staff_id:
            raise ConflictError("Nickname already exists")

    def create(
        self,
        *,
        full_name: str,
        nick_name: str,
        personal_pin: str,
        group: StaffGroup,
        email: Optional[str] = None,
        display_order: int = 0,
        is_active: bool = True,
    ) -> Staff:
        full_name = require_non_empty(full_name, "Full name")
        nick_name = require_non_empty(nick_name, "Nickname")
        require_pin(personal_pin)
        self._ensure_nickname_free(nick_name)

        created = self._staff.create(
            full_name=full_name,
            nick_name=nick_name,
            pin_hash=generate_password_hash(personal_pin),
            group=StaffGroup(group).value,
            email=email or None,
            display_order=int(display_order),
            is_active=bool(is_active),
        )
        logger.info("Staff %s created (%s)", created.nick_name, created.group.value)
        return created

    def update(self, staff_id: str, changes: dict, *, current_staff_id: Optional[str] = None) -> Staff:
        self.get(staff_id)
        changes = {k: v for k, v in changes.items() if v is not None or k in _NULLABLE}
        if changes.get("is_active") is False and staff_id == current_staff_id:
            raise ValidationError("You cannot deactivate your own account")

        if "nick_name" in changes:
            changes["nick_name"] = require_non_empty(changes["nick_name"], "Nickname")
            self._ensure_nickname_free(changes["nick_name"], staff_id=staff_id)
        if "full_name" in changes:
            changes["full_name"] = require_non_empty(changes["full_name"], "Full name")
        if "personal_pin" in changes:
            pin = changes.pop("personal_pin")
            if pin:
                changes["pin_hash"] = generate_password_hash(require_pin(pin))
        if changes.get("group") is not None:
            changes["group"] = StaffGroup(changes["group"])

        updated = self._staff.update(staff_id, changes)
        if not updated:
            raise NotFoundError("Staff not found")
        return updated

    def update_profile(self, staff_id: str, changes: dict) -> Staff:
        own = {k: v for k, v in changes.items() if k in _PROFILE_FIELDS}
        return self.update(staff_id, own)

    def deactivate(self, staff_id: str, *, current_staff_id: str) -> None:
        if staff_id == current_staff_id:
            raise ValidationError("You cannot deactivate your own account")
        if not self._staff.deactivate(staff_id):
            raise NotFoundError("Staff not found")
        logger.info("Staff %s deactivated", staff_id)

    def reorder(self, staff_ids: Sequence[str]) -> None:
        if len(set(staff_ids)) != len(staff_ids):
            raise ValidationError("Duplicate staff ids in ordering")
        self._staff.set_display_order(list(staff_ids))

    def login_logs(self, staff_id: str, limit: int = DEFAULT_LOGIN_LOG_LIMIT) -> Sequence[StaffLoginLog]:
        self.get(staff_id)
        limit = max(1, min(int(limit), 200))
        return self._staff.list_login_logs(staff_id, limit)
