from .auth import LoginView, LogoutView, RegisterView
from .profile import ChangePasswordView, ProfileView

__all__ = [
    "RegisterView",
    "LoginView",
    "LogoutView",
    "ProfileView",
    "ChangePasswordView",
]
