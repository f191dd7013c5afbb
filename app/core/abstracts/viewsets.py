from typing import Literal, NotRequired, Optional, TypedDict

from rest_framework import filters, permissions, status
from rest_framework.pagination import LimitOffsetPagination
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet, ViewSet

from app.settings import DJANGO_ENABLE_API_SESSION_AUTH
from core.abstracts.models import ModelBase
from core.abstracts.stores import StoreBase
from users.authentication import (
    BackendSessionAuthentication,
    BearerTokenAuthentication,
)
from users.models import Profile
from users.permissions import HasActionPermission


class ViewSetBase(GenericViewSet):
    """
    Provide core functionality, additional type hints, and improved documentaton for viewsets.
    """

    authentication_classes = [BearerTokenAuthentication]
    """Determines how a user is considered logged in, or authenticated."""

    permission_classes = [permissions.IsAuthenticated, HasActionPermission]
    """Determines what a user can do."""

    action_permissions: dict[str, str] = {}
    """Map viewset actions to the role based action required to run them."""

    action: Literal["list", "create", "retrieve", "update", "partial_update", "destroy"]
    """
    What request method is being called for the viewset.

    Learn more:
    - https://www.django-rest-framework.org/api-guide/viewsets/#introspecting-viewset-actions
    - https://testdriven.io/blog/drf-views-part-3/
    """

    detail: bool
    """
    Indicates if the current action is configured for a list or detail view.
    This is irrespective of the request method, detail views include the object's id
    in the url, whereas the list view does not include the id.
    """

    request: Request
    """The incomming request."""

    kwargs: dict
    """
    URL arguments passed in as parameters or query parameters.
    They are defined in the same place the url is defined.
    """

    filter_backends: list = []
    """Define (list) what backends to use for filtering."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)

        if (
            DJANGO_ENABLE_API_SESSION_AUTH
            and not any(
                issubclass(auth_class, BackendSessionAuthentication)
                for auth_class in self.authentication_classes
            )
        ):
            self.authentication_classes = [
                *self.authentication_classes,
                BackendSessionAuthentication,
            ]

    @property
    def profile(self) -> Optional[Profile]:
        """Profile of the authenticated user."""

        user = self.request.user
        return user if isinstance(user, Profile) else None


class CustomLimitOffsetPagination(LimitOffsetPagination):
    """Defines custom pagination setup."""

    default_limit = 100

    def get_paginated_response(self, data):
        return Response(
            {
                "count": self.count,
                "next": self.get_next_link(),
                "previous": self.get_previous_link(),
                "offset": self.offset,
                "results": data,
            }
        )

    def get_paginated_response_schema(self, schema):
        res_schema = super().get_paginated_response_schema(schema)

        res_schema["properties"] = {
            "offset": {
                "type": "integer",
                "example": 0,
            },
            **res_schema["properties"],
        }

        return res_schema


class StoreViewSetBase[T: ModelBase](ViewSetBase):
    """
    Base viewset for CRUD operations on a store.

    Records are read from the store's mirror, writes are sent
    through the store so the mirror is patched after the backend
    accepts them.
    """

    store_class: type[StoreBase[T]]

    pagination_class = CustomLimitOffsetPagination
    lookup_value_regex = "[^/]+"

    def get_store(self) -> StoreBase[T]:
        return self.store_class(self.request)

    def get_records(self) -> list[T]:
        return self.get_store().items

    def filter_records(self, records: list[T]) -> list[T]:
        for backend in list(self.filter_backends):
            records = backend().filter_queryset(self.request, records, self)

        return records

    def get_object(self) -> T:
        record = self.get_store().get_or_fetch(self.kwargs["pk"])
        self.check_object_permissions(self.request, record)

        return record

    def get_response(self, record: T, status_code=status.HTTP_200_OK):
        serializer = self.get_serializer(record)
        return Response(serializer.data, status=status_code)

    def list(self, request, *args, **kwargs):
        records = self.filter_records(self.get_records())

        page = self.paginate_queryset(records)
        if page is not None:
            serializer = self.get_serializer(page, many=True)
            return self.get_paginated_response(serializer.data)

        serializer = self.get_serializer(records, many=True)
        return Response(serializer.data)

    def retrieve(self, request, *args, **kwargs):
        return self.get_response(self.get_object())

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        record = self.perform_create(serializer.validated_data)
        return self.get_response(record, status_code=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop("partial", False)
        record = self.get_object()

        serializer = self.get_serializer(record, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        record = self.perform_update(record, serializer.validated_data)
        return self.get_response(record)

    def partial_update(self, request, *args, **kwargs):
        kwargs["partial"] = True
        return self.update(request, *args, **kwargs)

    def destroy(self, request, *args, **kwargs):
        record = self.get_object()
        self.perform_destroy(record)

        return Response(status=status.HTTP_204_NO_CONTENT)

    def perform_create(self, data: dict) -> T:
        return self.get_store().create(**data)

    def perform_update(self, record: T, data: dict) -> T:
        return self.get_store().update(record.id, **data)

    def perform_destroy(self, record: T):
        self.get_store().remove(record.id)


class FilterBackendBase(filters.BaseFilterBackend):
    """Provide additional functionality and typing for the base filter backend."""

    class ParamType(TypedDict):
        name: str
        schema_type: NotRequired[str]
        required: NotRequired[bool]
        description: NotRequired[str]

    filter_fields: list[ParamType] = []
    """Define fields to show in documentation."""

    def filter_queryset(self, request: Request, queryset: list, view: ViewSet):
        return queryset

    def get_query_param(self, request: Request, name: str) -> Optional[str]:
        value = request.query_params.get(name, None)
        return value.strip() if value else None

    def get_bool_param(self, request: Request, name: str) -> bool:
        return (self.get_query_param(request, name) or "").lower() in ("1", "true", "yes")

    def get_schema_operation_parameters(self, view):
        # Used to display query params in swagger spec

        params = super().get_schema_operation_parameters(view)
        params += [
            {
                "name": field["name"],
                "in": "query",
                "required": field.get("required", False),
                "description": field.get("description", ""),
                "schema": {"type": field.get("schema_type", "string")},
            }
            for field in self.filter_fields
        ]

        return params
