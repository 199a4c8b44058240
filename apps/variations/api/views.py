import logging

from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.variations.exceptions import VariationMatrixError
from apps.variations.models import Product
from apps.variations.services import ModelAttributeCatalog, VariationEditSession
from apps.variations.services.persistence import VariationPersistenceService
from .serializers import SessionPayloadSerializer, VariationSavePayloadSerializer

logger = logging.getLogger(__name__)


def _engine_error_response(product, exc):
    logger.warning(
        "Rejected variation request for product %s: %s (%s)",
        product.pk, exc, exc.code
    )
    return Response(exc.as_dict(), status=status.HTTP_400_BAD_REQUEST)


class ProductVariationsView(APIView):
    """
    Saved variation state of a product.

    get: The product's attributes and variations as a session payload
    put: Validate and apply a save payload
    """

    def get(self, request, pk):
        product = get_object_or_404(Product, pk=pk)
        try:
            session = VariationPersistenceService.load_session(product)
        except VariationMatrixError as exc:
            return _engine_error_response(product, exc)
        return Response(session.to_payload())

    def put(self, request, pk):
        product = get_object_or_404(Product, pk=pk)
        serializer = VariationSavePayloadSerializer(data=request.data)
        if not serializer.is_valid():
            logger.warning(
                "Invalid variation payload for product %s: %s",
                product.pk, serializer.errors
            )
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        try:
            counts = VariationPersistenceService.apply(product, serializer.validated_data)
        except VariationMatrixError as exc:
            return _engine_error_response(product, exc)
        return Response(counts)


class GenerateVariationsView(APIView):
    """
    Regenerate variations for an edit session.

    Expected payload:
    {
        "attributes": [
            {"attribute_id": 1, "attribute_value_ids": [1, 2]},
            {"attribute_id": 2, "attribute_value_ids": [4], "used_for_variations": true}
        ],
        "variations": [...],
        "delete_variation_ids": [42]
    }

    Nothing is written to the database; the response carries the new
    session payload plus the variations created and removed by this pass.
    """

    def post(self, request, pk):
        product = get_object_or_404(Product, pk=pk)
        serializer = SessionPayloadSerializer(data=request.data)
        if not serializer.is_valid():
            logger.warning(
                "Invalid generate payload for product %s: %s",
                product.pk, serializer.errors
            )
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        try:
            session = VariationEditSession.from_payload(
                serializer.validated_data, ModelAttributeCatalog()
            )
            result = session.generate_variations()
        except VariationMatrixError as exc:
            return _engine_error_response(product, exc)

        return Response({
            'payload': session.to_payload(),
            'created': [v.to_dict() for v in result.created],
            'removed': [v.to_dict() for v in result.removed],
        })
