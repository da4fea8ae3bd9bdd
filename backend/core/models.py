from django.db import models


class CurrencyRates(models.Model):
    """Exchange rate rows; the latest row per pair (by as_of_ts) is the live rate."""
    id = models.BigAutoField(primary_key=True)
    as_of_ts = models.DateTimeField()
    base_ccy = models.CharField(max_length=3)
    quote_ccy = models.CharField(max_length=3)
    rate = models.DecimalField(max_digits=18, decimal_places=8)
    source = models.TextField(blank=True, null=True)

    class Meta:
        db_table = 'currency_rates'
        constraints = [
            models.UniqueConstraint(
                fields=['as_of_ts', 'base_ccy', 'quote_ccy'],
                name='currency_rates_unique',
            ),
        ]
        indexes = [
            models.Index(fields=['base_ccy', 'quote_ccy', '-as_of_ts'], name='currency_rates_pair_idx'),
        ]

    def __str__(self):
        return f"{self.base_ccy}->{self.quote_ccy} {self.rate} @ {self.as_of_ts:%Y-%m-%d %H:%M}"
