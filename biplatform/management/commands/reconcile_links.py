from django.core.management.base import BaseCommand, CommandError

from biplatform.apps import get_entity_store
from biplatform.core.entity_store import Collection
from biplatform.core.exceptions import EntityServiceError
from biplatform.core.link_maintainer import LinkMaintainer
from biplatform.utils.custom_logger import CustomLogger
from biplatform.utils.object_id import is_valid_object_id

logger = CustomLogger("biplatform")


class Command(BaseCommand):
    help = "Repair data source links and dashboard layouts left stale by failed cascades"

    def add_arguments(self, parser):
        parser.add_argument("owner_id", nargs="?", help="Owner whose entities to repair")
        parser.add_argument("--all", action="store_true", help="Repair every owner")
        parser.add_argument(
            "--delete-orphans",
            action="store_true",
            help="Delete charts whose data source no longer exists",
        )

    def owners(self, store) -> list:
        owners = set()
        for collection in (Collection.DATA_SOURCES, Collection.CHARTS, Collection.DASHBOARDS):
            owners.update(store.count_by(collection, "created_by").keys())
        return sorted(owners)

    def handle(self, *args, **options):
        store = get_entity_store()
        if options["all"]:
            owners = self.owners(store)
        elif options["owner_id"]:
            if not is_valid_object_id(options["owner_id"]):
                raise CommandError(f"invalid owner id {options['owner_id']}")
            owners = [options["owner_id"]]
        else:
            raise CommandError("pass an owner id or --all")

        maintainer = LinkMaintainer(store)
        for owner_id in owners:
            try:
                report = maintainer.reconcile(owner_id, delete_orphans=options["delete_orphans"])
            except EntityServiceError as err:
                logger.error(f"reconcile failed for owner {owner_id}: {err.message}")
                raise CommandError(f"reconcile failed for owner {owner_id}") from err

            self.stdout.write(
                f"{owner_id}: {report.sources_relinked} data sources relinked, "
                f"{report.dashboards_pruned} dashboards pruned, "
                f"{len(report.orphan_charts)} orphan charts"
                + (f" ({report.orphans_deleted} deleted)" if options["delete_orphans"] else "")
            )
        self.stdout.write(self.style.SUCCESS(f"reconciled {len(owners)} owners"))
