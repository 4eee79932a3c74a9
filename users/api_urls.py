from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView

from . import api_views

urlpatterns = [
    path('token/', api_views.EmailTokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
    path('me/', api_views.me_view, name='api_me'),
    path('users/register', api_views.register_user, name='api_register_user'),
    path('users/<int:user_id>', api_views.get_user, name='api_get_user'),
]
