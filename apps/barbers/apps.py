from django.apps import AppConfig


class BarbersConfig(AppConfig):
    name = 'apps.barbers'
    label = 'barbers'
