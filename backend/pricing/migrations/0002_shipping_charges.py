from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ('pricing', '0001_initial'),
    ]

    operations = [
        migrations.AddField(
            model_name='shippingratetiers',
            name='min_charge',
            field=models.DecimalField(decimal_places=2, default=0, max_digits=12),
        ),
        migrations.AddField(
            model_name='shippingratetiers',
            name='handling_fee',
            field=models.DecimalField(decimal_places=2, default=0, max_digits=12),
        ),
        migrations.AddField(
            model_name='shippingratetiers',
            name='fuel_surcharge_pct',
            field=models.DecimalField(decimal_places=2, default=0, max_digits=5),
        ),
    ]
