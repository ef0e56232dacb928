from django.urls import path
from .views import SignupView, LoginView, RefreshView, LogoutView, ProfileView

urlpatterns = [
    path("signup/",  SignupView.as_view(),  name="auth-signup"),
    path("login/",   LoginView.as_view(),   name="auth-login"),
    path("refresh/", RefreshView.as_view(), name="auth-refresh"),
    path("logout/",  LogoutView.as_view(),  name="auth-logout"),
    path("me/",      ProfileView.as_view(), name="auth-me"),
]
