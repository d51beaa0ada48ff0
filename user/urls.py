from django.urls import path
from .views import SignupView, LoginView, LogoutView, ProfileView

urlpatterns = [
    path("signup/", SignupView.as_view(), name="user-signup"),
    path("login/", LoginView.as_view(), name="user-login"),
    path("logout/", LogoutView.as_view(), name="user-logout"),
    path("profile/", ProfileView.as_view(), name="user-profile"),
]
