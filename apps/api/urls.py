"""URL configuration for the API application."""

from __future__ import annotations

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from apps.api.views import (
    EmployeeProfileViewSet,
    FileUploadView,
    HRApplicationViewSet,
    HRVisaStatusView,
    ObtainTokenView,
    OnboardingApplicationView,
    VisaStatusView,
)

router = DefaultRouter()
router.register('hr/applications', HRApplicationViewSet, basename='hr-applications')
router.register('hr/employees', EmployeeProfileViewSet, basename='hr-employees')

app_name = 'api'

urlpatterns = [
    path('', include(router.urls)),
    path('auth/token/', ObtainTokenView.as_view(), name='auth-token'),
    path('files/upload/', FileUploadView.as_view(), name='file-upload'),
    path('onboarding/application/', OnboardingApplicationView.as_view(), name='onboarding-application'),
    path('onboarding/visa-status/', VisaStatusView.as_view(), name='onboarding-visa-status'),
    path('hr/visa-status/', HRVisaStatusView.as_view(), name='hr-visa-status'),
]
