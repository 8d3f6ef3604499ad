from django.urls import path
from . import views

app_name = 'appointments'

urlpatterns = [
    path('',                                       views.appointment_collection, name='collection'),
    path('slots/',                                 views.slots,                  name='slots'),
    path('earnings/',                              views.earnings_summary,       name='earnings'),
    path('<uuid:appointment_id>/',                 views.appointment_detail,     name='detail'),
    path('<uuid:appointment_id>/status/',          views.appointment_status,     name='status'),
    path('<uuid:appointment_id>/cancel/',          views.appointment_cancel,     name='cancel'),
    path('<uuid:appointment_id>/mark-paid/',       views.appointment_mark_paid,  name='mark_paid'),
    path('<uuid:appointment_id>/calendar.ics',     views.appointment_calendar,   name='calendar'),
]
