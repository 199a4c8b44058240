"""
Seed the attribute catalog with sample attributes.

Creates:
    - Size: S, M, L
    - Color: Red, Blue, Green
    - Optionally a product with every Size x Color variation

Usage:
    python manage.py seed_variation_catalog
    python manage.py seed_variation_catalog --product "Classic Tee" --price 19.90
"""

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from apps.variations.exceptions import VariationMatrixError
from apps.variations.models import AttributeOption, AttributeType, Product
from apps.variations.services import ModelAttributeCatalog, VariationEditSession
from apps.variations.services.persistence import VariationPersistenceService


SAMPLE_ATTRIBUTES = [
    ('size', 'Size', ['S', 'M', 'L']),
    ('color', 'Color', ['Red', 'Blue', 'Green']),
]


class Command(BaseCommand):
    help = 'Create sample attributes and, optionally, a product with generated variations'

    def add_arguments(self, parser):
        parser.add_argument(
            '--product',
            help='Name of a product to create with all Size x Color variations'
        )
        parser.add_argument(
            '--price',
            default='10.00',
            help='Price given to every generated variation (default: 10.00)'
        )

    def handle(self, *args, **options):
        with transaction.atomic():
            attributes = self.create_attributes()
            if options['product']:
                self.create_product(options['product'], options['price'], attributes)

        self.stdout.write(self.style.SUCCESS('Sample catalog created successfully!'))
        self.stdout.write(f'   - {AttributeType.objects.count()} attributes')
        self.stdout.write(f'   - {AttributeOption.objects.count()} attribute values')

    def create_attributes(self):
        self.stdout.write('Creating attributes...')
        attributes = []
        for order, (slug, name, values) in enumerate(SAMPLE_ATTRIBUTES):
            attr_type, _ = AttributeType.objects.get_or_create(
                slug=slug,
                defaults={'name': name, 'display_order': order}
            )
            for i, value in enumerate(values):
                AttributeOption.objects.get_or_create(
                    attribute_type=attr_type,
                    value=value,
                    defaults={'display_order': i}
                )
            attributes.append(attr_type)
        return attributes

    def create_product(self, name, price, attributes):
        self.stdout.write(f'Creating product "{name}"...')
        product, _ = Product.objects.get_or_create(name=name)

        session = VariationPersistenceService.load_session(product, ModelAttributeCatalog())
        try:
            for attr_type in attributes:
                if attr_type.pk not in session.selections:
                    session.selections.attach(
                        attr_type.pk,
                        initial_value_ids=attr_type.options.values_list('pk', flat=True)
                    )
            result = session.generate_variations()
            for variation in result.created:
                session.update_variation(variation.key, {'price': price})
            counts = VariationPersistenceService.apply(product, session.to_payload())
        except VariationMatrixError as exc:
            raise CommandError(str(exc))

        self.stdout.write(
            f'   - {counts["created"]} variations created, '
            f'{counts["updated"]} updated, {counts["deleted"]} deleted'
        )
