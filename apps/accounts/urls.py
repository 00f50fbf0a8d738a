from django.urls import path
from . import views

app_name = 'users'

urlpatterns = [
    # Authentication
    path('google/', views.google_token_login, name='google-token-login'),

    # User profile
    path('user/', views.get_current_user, name='current-user'),
]

# Browser OAuth flow, mounted under /auth/
browser_urlpatterns = [
    path('google/', views.google_login, name='google-login'),
    path('callback/', views.google_callback, name='google-callback'),
    path('logout/', views.logout, name='logout'),
]
