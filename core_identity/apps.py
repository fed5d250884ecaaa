from django.apps import AppConfig


class CoreIdentityConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'core_identity'
    verbose_name = 'Core Identity (super admins and staff)'
