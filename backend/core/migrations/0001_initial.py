from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='CurrencyRates',
            fields=[
                ('id', models.BigAutoField(primary_key=True, serialize=False)),
                ('as_of_ts', models.DateTimeField()),
                ('base_ccy', models.CharField(max_length=3)),
                ('quote_ccy', models.CharField(max_length=3)),
                ('rate', models.DecimalField(decimal_places=8, max_digits=18)),
                ('source', models.TextField(blank=True, null=True)),
            ],
            options={
                'db_table': 'currency_rates',
            },
        ),
        migrations.AddConstraint(
            model_name='currencyrates',
            constraint=models.UniqueConstraint(
                fields=['as_of_ts', 'base_ccy', 'quote_ccy'],
                name='currency_rates_unique',
            ),
        ),
        migrations.AddIndex(
            model_name='currencyrates',
            index=models.Index(fields=['base_ccy', 'quote_ccy', '-as_of_ts'], name='currency_rates_pair_idx'),
        ),
    ]
