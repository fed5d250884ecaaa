from django.urls import path

from .views import CurrentIdentityView, StaffLoginView, SuperAdminLoginView

app_name = 'core_identity'

urlpatterns = [
    path('users/login', StaffLoginView.as_view(), name='staff-login'),
    path('super-admin/login', SuperAdminLoginView.as_view(), name='super-admin-login'),
    path('auth/me', CurrentIdentityView.as_view(), name='current-identity'),
]
