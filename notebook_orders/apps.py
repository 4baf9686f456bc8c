from django.apps import AppConfig


class NotebookOrdersConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "notebook_orders"
    verbose_name = "Notebook Orders"  # Admin section name

    def ready(self):
        # Registers the out-of-band generation trigger (post_save on NotebookOrder).
        from . import signals  # noqa: F401
