"""
Convert between profile rows, records, and api payloads.
"""

from django.utils.translation import gettext_lazy as _
from drf_spectacular.utils import extend_schema_field
from rest_framework import serializers

from core.abstracts.serializers import (
    FlexibleDateField,
    RecordSerializer,
    RowSerializerBase,
    SerializerBase,
)
from users.models import Profile, Role, default_roles
from users.permissions import get_permissions


@extend_schema_field({"type": "array", "items": {"type": "string"}})
class RolesField(serializers.Field):
    """
    Represents the roles of a profile.

    Accepts a list of tags or a single tag, unknown tags are dropped.
    If no known tags remain, the profile is a player.
    """

    default_error_messages = {"invalid": _("Expected a list of roles.")}

    def to_representation(self, value):
        return [Role(role).value for role in value]

    def to_internal_value(self, data):
        if isinstance(data, str):
            data = [data]

        if not isinstance(data, (list, tuple)):
            self.fail("invalid")

        roles = []
        for tag in data:
            role = Role.parse(tag)
            if role is not None and role not in roles:
                roles.append(role)

        return roles or default_roles()


class ProfileRowSerializer(RowSerializerBase[Profile]):
    """Rows in the profiles table."""

    record_class = Profile

    name = serializers.CharField(allow_blank=True)
    email = serializers.CharField(allow_blank=True)
    roles = RolesField()
    teams = serializers.ListField(child=serializers.CharField())
    assigned_teams = serializers.ListField(child=serializers.CharField())
    parent_of = serializers.ListField(child=serializers.CharField())
    phone = serializers.CharField(allow_blank=True)
    date_of_birth = FlexibleDateField()
    profile_image = serializers.CharField(allow_blank=True)
    is_active = serializers.BooleanField()

    def to_internal_value(self, data):
        # Older rows store a single role tag
        if not data.get("roles") and data.get("role"):
            data = {**data, "roles": [data["role"]]}

        return super().to_internal_value(data)


class ProfileSerializer(RecordSerializer):
    """Represent a user's profile in the api."""

    name = serializers.CharField()
    email = serializers.EmailField(read_only=True)
    roles = serializers.ListField(
        child=serializers.ChoiceField(choices=Role.choices), read_only=True
    )
    role_labels = serializers.ListField(child=serializers.CharField(), read_only=True)
    teams = serializers.ListField(child=serializers.CharField(), read_only=True)
    assigned_teams = serializers.ListField(
        child=serializers.CharField(), read_only=True
    )
    parent_of = serializers.ListField(child=serializers.CharField(), read_only=True)
    phone = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    date_of_birth = serializers.DateField(required=False, allow_null=True)
    profile_image = serializers.URLField(
        required=False, allow_null=True, allow_blank=True
    )
    is_active = serializers.BooleanField(read_only=True)
    registration_date = serializers.DateTimeField(read_only=True)


class CurrentProfileSerializer(ProfileSerializer):
    """Profile of the signed in user, includes granted actions."""

    permissions = serializers.SerializerMethodField()

    @extend_schema_field({"type": "array", "items": {"type": "string"}})
    def get_permissions(self, obj: Profile):
        return get_permissions(obj)


class SetRolesSerializer(SerializerBase):
    """Replace the roles of a profile."""

    roles = serializers.ListField(
        child=serializers.ChoiceField(choices=Role.choices), allow_empty=False
    )


class SetParentOfSerializer(SerializerBase):
    """Replace the profiles a user is the guardian of."""

    parent_of = serializers.ListField(child=serializers.CharField())


class SetActiveSerializer(SerializerBase):
    """Activate or deactivate a profile."""

    is_active = serializers.BooleanField()


class MakeAdminSerializer(SerializerBase):
    """Grant the admin role by email."""

    email = serializers.EmailField()


class LoginSerializer(SerializerBase):
    """Sign in with email and password."""

    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, trim_whitespace=False)


class SignupSerializer(LoginSerializer):
    """Register a new account."""

    name = serializers.CharField()
    password = serializers.CharField(
        write_only=True, trim_whitespace=False, min_length=6
    )


class OauthSerializer(SerializerBase):
    """Start sign in with a third party provider."""

    redirect_to = serializers.URLField(required=False)


class OauthCallbackSerializer(SerializerBase):
    """Returned code from third party provider."""

    code = serializers.CharField()


class AuthSessionSerializer(SerializerBase):
    """Current session state."""

    is_authenticated = serializers.BooleanField()
    offline = serializers.BooleanField()
    user_id = serializers.CharField(allow_null=True)
    expires_at = serializers.IntegerField(allow_null=True)
    profile = CurrentProfileSerializer(allow_null=True)

