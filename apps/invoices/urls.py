from django.urls import path
from . import views

app_name = 'invoices'

urlpatterns = [
    path('<uuid:invoice_id>/pdf/', views.invoice_pdf, name='pdf'),
]
