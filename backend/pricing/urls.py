from django.urls import path

from .views import LinePriceView, QuotationTotalsView, ShippingEstimateView

urlpatterns = [
    path('totals', QuotationTotalsView.as_view(), name='pricing-totals'),
    path('lines/price', LinePriceView.as_view(), name='pricing-line-price'),
    path('shipping/estimate', ShippingEstimateView.as_view(), name='pricing-shipping-estimate'),
]
