"""
Views for the user API.
"""

from drf_spectacular.utils import extend_schema
from rest_framework import exceptions, permissions, status
from rest_framework.decorators import action
from rest_framework.response import Response

from core.abstracts.viewsets import FilterBackendBase, StoreViewSetBase, ViewSetBase
from core.backend import is_offline
from lib.supabase import SupabaseError
from users.authentication import (
    BearerTokenAuthentication,
    LenientSessionAuthentication,
)
from users.models import Profile, Role
from users.permissions import Action, has_permission
from users.serializers import (
    AuthSessionSerializer,
    CurrentProfileSerializer,
    LoginSerializer,
    MakeAdminSerializer,
    OauthCallbackSerializer,
    OauthSerializer,
    ProfileSerializer,
    SetActiveSerializer,
    SetParentOfSerializer,
    SetRolesSerializer,
    SignupSerializer,
)
from users.services import AuthService
from users.stores import AllUsersStore, UserStore


class UserFilter(FilterBackendBase):
    """Filter users by search term and role."""

    filter_fields = [
        {
            "name": "search",
            "schema_type": "string",
            "description": "Search name or email.",
        },
        {
            "name": "role",
            "schema_type": "string",
            "description": "Only users with role.",
        },
        {
            "name": "all",
            "schema_type": "boolean",
            "description": "Include inactive users, admins only.",
        },
    ]

    def filter_queryset(self, request, queryset: list[Profile], view):
        store: UserStore = view.get_store()

        search = self.get_query_param(request, "search")
        if search:
            term = search.lower()
            queryset = [profile for profile in queryset if store.matches(profile, term)]

        role = Role.parse(self.get_query_param(request, "role"))
        if role:
            queryset = [profile for profile in queryset if role in profile.roles]

        return queryset


class UserViewSet(StoreViewSetBase[Profile]):
    """Manage user profiles."""

    serializer_class = ProfileSerializer
    store_class = UserStore
    filter_backends = [UserFilter]
    http_method_names = ["get", "post", "put", "patch", "delete", "head", "options"]

    action_permissions = {
        "update": Action.EDIT_PROFILE,
        "partial_update": Action.EDIT_PROFILE,
        "destroy": Action.MANAGE_USERS,
        "roles": Action.MANAGE_USERS,
        "active": Action.MANAGE_USERS,
        "parent_of": Action.MANAGE_USERS,
        "make_admin": Action.MANAGE_USERS,
    }

    def get_store(self) -> UserStore:
        show_all = self.request.query_params.get("all", "").lower() in ("1", "true")

        if show_all and has_permission(self.profile, Action.MANAGE_USERS):
            return AllUsersStore(self.request)

        return super().get_store()

    def get_serializer_class(self):
        match self.action:
            case "roles":
                return SetRolesSerializer
            case "active":
                return SetActiveSerializer
            case "parent_of":
                return SetParentOfSerializer
            case "make_admin":
                return MakeAdminSerializer

        return super().get_serializer_class()

    def create(self, request, *args, **kwargs):
        raise exceptions.MethodNotAllowed("POST", "Users are created by signing up.")

    def perform_update(self, record: Profile, data: dict) -> Profile:
        profile = self.get_store().update_user(record.id, **data)
        AuthService.forget_profile(profile.id)

        return profile

    def perform_destroy(self, record: Profile):
        self.get_store().deactivate_user(record.id)
        AuthService.forget_profile(record.id)

    @extend_schema(request=SetRolesSerializer, responses=ProfileSerializer)
    @action(detail=True, methods=["put"])
    def roles(self, request, *args, **kwargs):
        """Replace the roles of a user."""

        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        profile = self.get_store().set_roles(
            kwargs["pk"], serializer.validated_data["roles"]
        )
        AuthService.forget_profile(profile.id)

        return Response(ProfileSerializer(profile).data)

    @extend_schema(request=SetActiveSerializer, responses=ProfileSerializer)
    @action(detail=True, methods=["put"])
    def active(self, request, *args, **kwargs):
        """Activate or deactivate a user."""

        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        profile = self.get_store().set_active(
            kwargs["pk"], serializer.validated_data["is_active"]
        )
        AuthService.forget_profile(profile.id)

        return Response(ProfileSerializer(profile).data)

    @extend_schema(request=SetParentOfSerializer, responses=ProfileSerializer)
    @action(detail=True, methods=["put"], url_path="parent-of")
    def parent_of(self, request, *args, **kwargs):
        """Replace the profiles a user is the guardian of."""

        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        profile = self.get_store().set_parent_of(
            kwargs["pk"], serializer.validated_data["parent_of"]
        )
        AuthService.forget_profile(profile.id)

        return Response(ProfileSerializer(profile).data)

    @extend_schema(request=MakeAdminSerializer, responses=ProfileSerializer)
    @action(detail=False, methods=["post"], url_path="make-admin")
    def make_admin(self, request, *args, **kwargs):
        """Grant the admin role to the user with the email."""

        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        profile = self.get_store().make_admin(serializer.validated_data["email"])
        AuthService.forget_profile(profile.id)

        return Response(ProfileSerializer(profile).data)

    @extend_schema(request=None, responses=ProfileSerializer(many=True))
    @action(detail=False, methods=["post"])
    def refresh(self, request, *args, **kwargs):
        """Fetch the user list again."""

        records = self.filter_records(self.get_store().refresh())
        return Response(ProfileSerializer(records, many=True).data)


class ManageProfileViewSet(ViewSetBase):
    """Manage the authenticated user's profile."""

    serializer_class = CurrentProfileSerializer

    def retrieve(self, request, *args, **kwargs):
        return Response(self.get_serializer(self.profile).data)

    def partial_update(self, request, *args, **kwargs):
        serializer = self.get_serializer(self.profile, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        profile = AuthService(request).update_profile(**serializer.validated_data)
        return Response(self.get_serializer(profile).data)


class AuthViewSet(ViewSetBase):
    """Sign users in and out."""

    authentication_classes = [LenientSessionAuthentication]
    permission_classes = [permissions.AllowAny]

    def get_serializer_class(self):
        match self.action:
            case "login":
                return LoginSerializer
            case "signup":
                return SignupSerializer
            case "oauth":
                return OauthSerializer
            case "oauth_callback":
                return OauthCallbackSerializer

        return AuthSessionSerializer

    def get_authenticate_header(self, request):
        # Failed sign ins respond with 401 instead of 403
        return BearerTokenAuthentication.keyword

    def get_session_response(self, service: AuthService, profile=None, status_code=200):
        session = service.get_stored_session()
        payload = {
            "is_authenticated": session is not None,
            "offline": is_offline(),
            "user_id": session.user_id if session else None,
            "expires_at": session.expires_at if session else None,
            "profile": profile,
        }
        data = AuthSessionSerializer(payload).data

        if session is not None:
            data["access_token"] = session.access_token
            data["refresh_token"] = session.refresh_token

        return Response(data, status=status_code)

    @extend_schema(auth=[{"security": []}, {}], responses=AuthSessionSerializer)
    @action(detail=False, methods=["post"])
    def login(self, request, *args, **kwargs):
        """Sign in with email and password."""

        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        service = AuthService(request)
        try:
            profile = service.sign_in_with_email(**serializer.validated_data)
        except SupabaseError as e:
            if e.status_code and e.status_code < 500:
                raise exceptions.AuthenticationFailed(e.message) from e
            raise e

        return self.get_session_response(service, profile)

    @extend_schema(auth=[{"security": []}, {}], responses=AuthSessionSerializer)
    @action(detail=False, methods=["post"])
    def signup(self, request, *args, **kwargs):
        """Register new account."""

        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        service = AuthService(request)
        try:
            profile = service.sign_up(**serializer.validated_data)
        except SupabaseError as e:
            if e.status_code and e.status_code < 500:
                raise exceptions.ValidationError(e.message) from e
            raise e

        return self.get_session_response(service, profile, status.HTTP_201_CREATED)

    @extend_schema(request=None, responses=AuthSessionSerializer)
    @action(detail=False, methods=["post"])
    def logout(self, request, *args, **kwargs):
        """End the current session."""

        service = AuthService(request)
        service.sign_out()

        return self.get_session_response(service)

    @extend_schema(auth=[{"security": []}, {}])
    @action(detail=False, methods=["post"])
    def oauth(self, request, *args, **kwargs):
        """Start sign in with google, returns the url to redirect the user to."""

        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            url = AuthService(request).sign_in_with_google(
                serializer.validated_data.get("redirect_to")
            )
        except SupabaseError as e:
            if e.status_code and e.status_code < 500:
                raise exceptions.ValidationError(e.message) from e
            raise e

        return Response({"url": url})

    @extend_schema(auth=[{"security": []}, {}], responses=AuthSessionSerializer)
    @action(detail=False, methods=["get"], url_path="oauth/callback")
    def oauth_callback(self, request, *args, **kwargs):
        """Finish sign in with google."""

        serializer = self.get_serializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)

        service = AuthService(request)
        try:
            profile = service.complete_oauth(serializer.validated_data["code"])
        except SupabaseError as e:
            if e.status_code and e.status_code < 500:
                raise exceptions.AuthenticationFailed(e.message) from e
            raise e

        return self.get_session_response(service, profile)

    @action(detail=False, methods=["get"])
    def session(self, request, *args, **kwargs):
        """Current session, refreshes expired tokens."""

        service = AuthService(request)
        profile = request.user if isinstance(request.user, Profile) else None

        return self.get_session_response(service, profile)
