"""DRF views providing the onboarding API surface."""

from __future__ import annotations

import dataclasses
import logging

from django.contrib.auth import authenticate
from rest_framework import permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.api.permissions import IsEmployeeUserRole, IsHRUserRole
from apps.onboarding import services
from apps.onboarding.errors import (
    InvalidStateTransition,
    OnboardingError,
    PersistFailure,
    ValidationFailure,
)
from apps.onboarding.forms import DocumentUploadForm
from apps.onboarding.lifecycle import ApplicationState, Transition, can_transition
from apps.onboarding.models import OnboardingApplication
from apps.onboarding.serializers import (
    ApplicationSummarySerializer,
    OnboardingApplicationSerializer,
    StoredFileSerializer,
    VisaStatusSerializer,
)
from apps.onboarding.uploads import store_uploaded_file
from apps.onboarding.visa import visa_status_for, work_authorization_statuses
from apps.users.jwt_utils import issue_token
from apps.users.permissions import roles_for_user

logger = logging.getLogger(__name__)

NEVER_SUBMITTED_BODY = {"status": ApplicationState.NEVER_SUBMITTED.value}


def _error_response(exc: OnboardingError) -> Response:
    """Translate a workflow exception into the API's error body."""

    if isinstance(exc, ValidationFailure):
        return Response({"errors": exc.errors}, status=status.HTTP_400_BAD_REQUEST)
    if isinstance(exc, InvalidStateTransition):
        return Response(
            {"detail": str(exc), "status": exc.current, "transition": exc.transition},
            status=status.HTTP_409_CONFLICT,
        )
    if isinstance(exc, PersistFailure):
        return Response(
            {"detail": exc.detail},
            status=exc.status_code or status.HTTP_409_CONFLICT,
        )
    return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)


def _serialise_application(application: OnboardingApplication) -> dict:
    return OnboardingApplicationSerializer(application).data


class ObtainTokenView(APIView):
    """Exchange a username and password for a signed bearer token."""

    permission_classes = [permissions.AllowAny]
    authentication_classes: list = []

    def post(self, request, *args, **kwargs):  # type: ignore[override]
        username = request.data.get("username") or ""
        password = request.data.get("password") or ""
        user = authenticate(request, username=username, password=password)
        if user is None:
            logger.warning("Rejected token request for %s", username or "<blank>")
            return Response(
                {"detail": "Invalid username or password."},
                status=status.HTTP_401_UNAUTHORIZED,
            )

        roles = sorted(role.value for role in roles_for_user(user))
        return Response({"token": issue_token(user), "roles": roles}, status=status.HTTP_200_OK)


class OnboardingApplicationView(APIView):
    """Read or submit the caller's own onboarding application."""

    permission_classes = [permissions.IsAuthenticated, IsEmployeeUserRole]

    def get(self, request, *args, **kwargs):  # type: ignore[override]
        application = services.get_application_for_user(request.user)
        if application is None:
            return Response(NEVER_SUBMITTED_BODY, status=status.HTTP_404_NOT_FOUND)
        return Response(_serialise_application(application))

    def post(self, request, *args, **kwargs):  # type: ignore[override]
        existed = OnboardingApplication.objects.filter(user=request.user).exists()
        try:
            application = services.submit_application(request.user, request.data)
        except OnboardingError as exc:
            return _error_response(exc)

        return Response(
            _serialise_application(application),
            status=status.HTTP_200_OK if existed else status.HTTP_201_CREATED,
        )


class FileUploadView(APIView):
    """Store a single document and return where it lives."""

    permission_classes = [permissions.IsAuthenticated]
    parser_classes = [MultiPartParser, FormParser]

    def post(self, request, *args, **kwargs):  # type: ignore[override]
        form = DocumentUploadForm(data=request.data, files=request.FILES)
        if not form.is_valid():
            errors = {field: list(messages) for field, messages in form.errors.items()}
            return Response({"errors": errors}, status=status.HTTP_400_BAD_REQUEST)

        stored = store_uploaded_file(form.cleaned_data["file"], user=request.user)
        stored = dataclasses.replace(stored, file_url=request.build_absolute_uri(stored.file_url))
        return Response(StoredFileSerializer(stored).data, status=status.HTTP_201_CREATED)


class VisaStatusView(APIView):
    """Work authorization window for the caller."""

    permission_classes = [permissions.IsAuthenticated, IsEmployeeUserRole]

    def get(self, request, *args, **kwargs):  # type: ignore[override]
        application = services.get_application_for_user(request.user)
        if application is None:
            return Response(NEVER_SUBMITTED_BODY, status=status.HTTP_404_NOT_FOUND)

        visa_status = visa_status_for(application)
        if visa_status is None:
            return Response({"required": False})
        return Response({"required": True, **VisaStatusSerializer(visa_status).data})


class HRApplicationViewSet(viewsets.ViewSet):
    """HR review of submitted onboarding applications."""

    permission_classes = [permissions.IsAuthenticated, IsHRUserRole]
    lookup_value_regex = r"\d+"

    def _get_application(self, pk) -> OnboardingApplication:
        try:
            return services.get_application(int(pk))
        except OnboardingApplication.DoesNotExist as exc:
            raise NotFound("Application not found.") from exc

    def list(self, request):  # type: ignore[override]
        requested_status = (request.query_params.get("status") or "pending").strip().lower()
        try:
            queryset = services.list_applications(requested_status)
        except ValidationFailure as exc:
            return _error_response(exc)

        return Response(
            {
                "status": requested_status,
                "results": ApplicationSummarySerializer(queryset, many=True).data,
            }
        )

    def retrieve(self, request, pk=None):  # type: ignore[override]
        application = self._get_application(pk)
        return Response(
            {
                "application": _serialise_application(application),
                "canReview": can_transition(application.status, Transition.APPROVE),
            }
        )

    @action(detail=True, methods=["post"])
    def approve(self, request, pk=None):
        application = self._get_application(pk)
        try:
            application = services.approve_application(application, request.user)
        except OnboardingError as exc:
            return _error_response(exc)
        return Response(_serialise_application(application), status=status.HTTP_200_OK)

    @action(detail=True, methods=["post"])
    def reject(self, request, pk=None):
        application = self._get_application(pk)
        feedback = request.data.get("feedback", "")
        if not isinstance(feedback, str):
            feedback = ""
        try:
            application = services.reject_application(application, request.user, feedback)
        except OnboardingError as exc:
            return _error_response(exc)
        return Response(_serialise_application(application), status=status.HTTP_200_OK)


class HRVisaStatusView(APIView):
    """Work authorization windows across employees, soonest expiry first."""

    permission_classes = [permissions.IsAuthenticated, IsHRUserRole]

    def get(self, request, *args, **kwargs):  # type: ignore[override]
        statuses = work_authorization_statuses()
        return Response({"results": VisaStatusSerializer(statuses, many=True).data})


class EmployeeProfileViewSet(viewsets.ViewSet):
    """Profiles of employees whose onboarding was approved."""

    permission_classes = [permissions.IsAuthenticated, IsHRUserRole]
    lookup_value_regex = r"\d+"

    def list(self, request):  # type: ignore[override]
        employees = services.list_employees()
        return Response({"results": ApplicationSummarySerializer(employees, many=True).data})

    def retrieve(self, request, pk=None):  # type: ignore[override]
        employee = services.list_employees().filter(pk=int(pk)).first()
        if employee is None:
            raise NotFound("Employee not found.")
        return Response(_serialise_application(employee))
