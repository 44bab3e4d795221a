from django.urls import path
from .views import order_tracking

urlpatterns = [
    path("orders/<str:order_id>/tracking", order_tracking),
]
