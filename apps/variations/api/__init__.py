from .serializers import (
    SessionPayloadSerializer,
    VariationSavePayloadSerializer,
)

__all__ = [
    'SessionPayloadSerializer',
    'VariationSavePayloadSerializer',
]
