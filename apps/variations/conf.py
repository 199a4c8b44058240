from django.conf import settings


DEFAULTS = {
    'PLACEHOLDER_SKU_PREFIX': 'NEW',
    'MANUAL_SKU_PREFIX': 'SKU',
    'DEFAULT_LOW_STOCK_THRESHOLD': 5,
    'DEFAULT_STATUS': 'active',
}


def get_setting(name):
    """Read one VARIATION_MATRIX setting, falling back to the defaults."""
    if name not in DEFAULTS:
        raise KeyError(f"Unknown VARIATION_MATRIX setting: {name}")
    overrides = getattr(settings, 'VARIATION_MATRIX', None) or {}
    return overrides.get(name, DEFAULTS[name])
