from django.apps import AppConfig


class SocialConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'social'
    verbose_name = 'XVO Social'

    def ready(self):
        # registers the account cache invalidation signal
        from . import cache  # noqa: F401
