import pytest

from apps.variations.models import AttributeOption, AttributeType, Product
from apps.variations.services import VariationEditSession
from .factories import BLUE, COLOR, M, RED, S, SIZE, make_catalog


@pytest.fixture
def catalog():
    return make_catalog()


@pytest.fixture
def make_session(catalog):
    def factory(sku_token='test'):
        return VariationEditSession(catalog, sku_token=sku_token)
    return factory


@pytest.fixture
def session(make_session):
    """Session with Size [S, M] and Color [Red, Blue] attached."""
    session = make_session()
    session.selections.attach(SIZE, initial_value_ids=[S, M])
    session.selections.attach(COLOR, initial_value_ids=[RED, BLUE])
    return session


# =============================================================================
# Database fixtures
# =============================================================================

@pytest.fixture
def size_type(db):
    size = AttributeType.objects.create(name='Size', slug='size', display_order=0)
    for i, value in enumerate(['S', 'M', 'L']):
        AttributeOption.objects.create(attribute_type=size, value=value, display_order=i)
    return size


@pytest.fixture
def color_type(db):
    color = AttributeType.objects.create(name='Color', slug='color', display_order=1)
    for i, value in enumerate(['Red', 'Blue', 'Green']):
        AttributeOption.objects.create(attribute_type=color, value=value, display_order=i)
    return color


@pytest.fixture
def product(db):
    return Product.objects.create(name='Classic Tee', code='TEE')