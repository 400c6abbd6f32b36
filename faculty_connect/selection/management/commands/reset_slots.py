from django.core.management.base import BaseCommand

from selection.slots import SlotStore


class Command(BaseCommand):
    help = 'Reset every faculty/subject slot counter to full capacity'

    def handle(self, *args, **options):
        store = SlotStore()
        store.reset_all()
        slots = store.get_all_slots()
        self.stdout.write(self.style.SUCCESS(f'{len(slots)} slot counters reset.'))
