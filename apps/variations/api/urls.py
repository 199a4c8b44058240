from django.urls import path

from .views import GenerateVariationsView, ProductVariationsView

urlpatterns = [
    path(
        'products/<int:pk>/variations/',
        ProductVariationsView.as_view(),
        name='product-variations'
    ),
    path(
        'products/<int:pk>/variations/generate/',
        GenerateVariationsView.as_view(),
        name='product-variations-generate'
    ),
]
