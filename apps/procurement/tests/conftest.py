import pytest
from decimal import Decimal
from apps.inventory.models import Item
from apps.procurement.models import Vendor, VendorCategory
from apps.procurement.services import create_purchase_order


@pytest.fixture
def vendor(db):
    category = VendorCategory.objects.create(name='Wholesale')
    return Vendor.objects.create(name='Lakshmi Traders', category=category, phone='9840012345')


@pytest.fixture
def purchase_order(vendor, item, store_user):
    """OPEN purchase order for 100 kg rice at 50.00."""
    return create_purchase_order(
        vendor=vendor,
        lines=[{'item': item, 'ordered_qty': Decimal('100'), 'unit_cost': Decimal('50.00')}],
        user=store_user,
    )


@pytest.fixture
def dal(unit, category):
    return Item.objects.create(
        name='Toor Dal',
        sku='DAL-01',
        category=category,
        unit=unit,
        cost_per_unit=Decimal('120.00'),
    )


@pytest.fixture
def two_line_order(vendor, item, dal, store_user):
    """OPEN purchase order for 100 kg rice and 20 kg dal."""
    return create_purchase_order(
        vendor=vendor,
        lines=[
            {'item': item, 'ordered_qty': Decimal('100'), 'unit_cost': Decimal('50.00')},
            {'item': dal, 'ordered_qty': Decimal('20'), 'unit_cost': Decimal('120.00')},
        ],
        user=store_user,
    )


@pytest.fixture
def other_vendor_order(dal, store_user):
    category = VendorCategory.objects.create(name='Pulses')
    other = Vendor.objects.create(name='Murugan Stores', category=category, phone='9840098765')
    return create_purchase_order(
        vendor=other,
        lines=[{'item': dal, 'ordered_qty': Decimal('10'), 'unit_cost': Decimal('118.00')}],
        user=store_user,
    )
