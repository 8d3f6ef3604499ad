from django.urls import path
from . import views

app_name = 'barbers'

urlpatterns = [
    path('',                                   views.barber_list,         name='list'),
    path('me/availability/',                   views.my_availability,     name='my_availability'),
    path('me/days-off/',                       views.my_days_off,         name='my_days_off'),
    path('me/days-off/<uuid:override_id>/',    views.my_day_off_detail,   name='my_day_off_detail'),
    path('<uuid:barber_id>/availability/',     views.barber_availability, name='availability'),
]
