import atexit

from django.apps import AppConfig, apps

from biplatform.utils.custom_logger import CustomLogger

logger = CustomLogger("biplatform")


class BiPlatformConfig(AppConfig):
    """Owns the process-wide EntityStore handle"""

    default_auto_field = "django.db.models.BigAutoField"
    name = "biplatform"
    verbose_name = "BI platform"
    store = None

    def ready(self):
        # models are importable only once the registry is ready
        from biplatform.core.entity_store import EntityStore

        self.store = EntityStore()
        atexit.register(self.shutdown)
        logger.info("entity store ready")

    def shutdown(self):
        if self.store is not None:
            self.store.close()
            self.store = None


def get_entity_store():
    """the store created at startup"""
    return apps.get_app_config("biplatform").store
