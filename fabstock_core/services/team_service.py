# =============================================================================
# fabstock_core/services/team_service.py
# Team roster management and invitations
# =============================================================================

from __future__ import annotations
import random
from dataclasses import dataclass, fields as dataclass_fields, replace
from typing import Any, Mapping, Optional

from fabstock_core.config import get_app_url
from fabstock_core.errors import FabStockError, ValidationError
from fabstock_core.models import AVATAR_COLORS, MemberRole, TeamMember
from fabstock_core.notifications import EmailClient
from fabstock_core.sync import DataProvider

from .base_service import BaseService, new_id

_MEMBER_FIELDS = {f.name for f in dataclass_fields(TeamMember)} - {"id"}


@dataclass
class InvitationResult:
    """Outcome of an invitation attempt; failures are reported, not raised."""
    sent: bool
    error: Optional[str] = None


@dataclass
class AddMemberResult:
    member: TeamMember
    invitation: InvitationResult


class TeamService(BaseService):
    """Admin-only roster management."""

    def __init__(self, provider: DataProvider, email_client: Optional[EmailClient] = None):
        super().__init__()
        self.provider = provider
        self._email_client = email_client

    @property
    def email_client(self) -> EmailClient:
        # Built per call so edited EmailJS keys apply immediately
        return self._email_client or EmailClient.from_settings(self.provider.settings)

    def get_member(self, member_id: str) -> TeamMember:
        for member in self.provider.team_members:
            if member.id == member_id:
                return member
        raise ValidationError(f"Unknown team member: {member_id}", field="id")

    def add_member(
        self,
        name: str,
        email: str,
        role: MemberRole,
        actor: Optional[TeamMember],
        invite_link: Optional[str] = None,
    ) -> AddMemberResult:
        """
        Append a member then try to email an invitation.

        Interns get read-only stock access; everyone else can manage stock.
        """
        self.require_admin(actor)
        name = (name or "").strip()
        email = (email or "").strip()
        if not name:
            raise ValidationError("Name is required", field="name")
        if not email:
            raise ValidationError("Email is required", field="email")

        member = TeamMember(
            id=new_id("u"),
            name=name,
            email=email,
            role=role,
            can_manage_stock=role is not MemberRole.INTERN,
            avatar_color=random.choice(AVATAR_COLORS),
        )
        self.provider.set_team_members(self.provider.team_members + [member])
        self.logger.info(f"Member added: {member.name} ({member.role.value})")

        return AddMemberResult(member=member, invitation=self.send_invite(member, invite_link))

    def send_invite(self, member: TeamMember, invite_link: Optional[str] = None) -> InvitationResult:
        client = self.email_client
        if not client.is_configured():
            self.logger.info(f"EmailJS not configured, no invitation sent to {member.email}")
            return InvitationResult(sent=False, error="EmailJS is not configured")

        try:
            client.send_invitation(member.name, member.email, invite_link or get_app_url())
        except FabStockError as e:
            self.logger.warning(f"Invitation to {member.email} failed: {e.message}")
            return InvitationResult(sent=False, error=e.message)
        return InvitationResult(sent=True)

    def update_member(
        self,
        member_id: str,
        updates: Mapping[str, Any],
        actor: Optional[TeamMember],
    ) -> TeamMember:
        """Partial update (e.g. toggling ``can_manage_stock``)."""
        self.require_admin(actor)
        unknown = set(updates) - _MEMBER_FIELDS
        if unknown:
            raise ValidationError(f"Unknown member fields: {sorted(unknown)}")

        changes = dict(updates)
        if "role" in changes and not isinstance(changes["role"], MemberRole):
            changes["role"] = MemberRole(changes["role"])

        updated = replace(self.get_member(member_id), **changes)
        return self.update_member_details(updated, actor)

    def update_member_details(self, member: TeamMember, actor: Optional[TeamMember]) -> TeamMember:
        self.require_admin(actor)
        members = self.provider.team_members
        if not any(m.id == member.id for m in members):
            raise ValidationError(f"Unknown team member: {member.id}", field="id")
        self.provider.set_team_members([member if m.id == member.id else m for m in members])
        return member

    def delete_member(self, member_id: str, actor: Optional[TeamMember]) -> None:
        actor = self.require_admin(actor)
        if member_id == actor.id:
            raise ValidationError("You cannot remove yourself", field="id")
        remaining = [m for m in self.provider.team_members if m.id != member_id]
        self.provider.delete_member(member_id, remaining)
