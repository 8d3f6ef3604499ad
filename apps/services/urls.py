from django.urls import path
from . import views

app_name = 'services'

urlpatterns = [
    path('',               views.service_collection, name='collection'),
    path('<uuid:pk>/',     views.service_detail,     name='detail'),
]
