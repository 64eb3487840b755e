from django.urls import path
from django.contrib.auth.views import LogoutView
from . import views

urlpatterns = [
    path('login/', views.login_view, name='login'),
    path('logout/', LogoutView.as_view(next_page='home'), name='logout'),
    path('api/auth/me/', views.api_me, name='api_auth_me'),
    path('api/auth/logout/', views.api_logout, name='api_auth_logout'),
]
