from django.contrib import admin

from .models import CurrencyRates


class ReadOnlyAdmin(admin.ModelAdmin):
    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(CurrencyRates)
class CurrencyRatesAdmin(ReadOnlyAdmin):
    list_display = ("id", "as_of_ts", "base_ccy", "quote_ccy", "rate", "source")
    list_filter = ("base_ccy", "quote_ccy", "source")
    ordering = ("-as_of_ts",)
