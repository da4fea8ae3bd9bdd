from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='TierMarkupTables',
            fields=[
                ('id', models.BigAutoField(primary_key=True, serialize=False)),
                ('tier_name', models.CharField(help_text='e.g., end_user, contractor, dealer', max_length=32, unique=True)),
                ('default_markup', models.DecimalField(decimal_places=2, max_digits=7)),
                ('max_line_discount', models.DecimalField(blank=True, decimal_places=2, max_digits=5, null=True)),
                ('max_overall_discount', models.DecimalField(blank=True, decimal_places=2, max_digits=5, null=True)),
                ('is_active', models.BooleanField(default=True)),
            ],
            options={
                'db_table': 'tier_markup_tables',
                'verbose_name_plural': 'Tier markup tables',
            },
        ),
        migrations.CreateModel(
            name='TierBrandMarkups',
            fields=[
                ('id', models.BigAutoField(primary_key=True, serialize=False)),
                ('brand', models.CharField(max_length=64)),
                ('markup', models.DecimalField(decimal_places=2, max_digits=7)),
                ('position', models.PositiveIntegerField(default=0)),
                ('table', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='brand_markups', to='pricing.tiermarkuptables')),
            ],
            options={
                'db_table': 'tier_brand_markups',
                'ordering': ['table', 'position', 'id'],
                'unique_together': {('table', 'brand')},
            },
        ),
        migrations.CreateModel(
            name='TierCategoryMarkups',
            fields=[
                ('id', models.BigAutoField(primary_key=True, serialize=False)),
                ('category', models.CharField(max_length=64)),
                ('markup', models.DecimalField(decimal_places=2, max_digits=7)),
                ('position', models.PositiveIntegerField(default=0)),
                ('table', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='category_markups', to='pricing.tiermarkuptables')),
            ],
            options={
                'db_table': 'tier_category_markups',
                'ordering': ['table', 'position', 'id'],
                'unique_together': {('table', 'category')},
            },
        ),
        migrations.CreateModel(
            name='ShippingRateTiers',
            fields=[
                ('id', models.BigAutoField(primary_key=True, serialize=False)),
                ('method', models.CharField(choices=[('sea', 'Sea'), ('air', 'Air'), ('land', 'Land'), ('courier', 'Courier')], max_length=16)),
                ('zone_id', models.CharField(blank=True, help_text='Blank applies to every zone', max_length=32, null=True)),
                ('min_weight', models.DecimalField(decimal_places=2, max_digits=12)),
                ('max_weight', models.DecimalField(decimal_places=2, max_digits=12)),
                ('base_rate', models.DecimalField(decimal_places=2, max_digits=12)),
                ('per_kg_rate', models.DecimalField(decimal_places=4, max_digits=12)),
                ('is_active', models.BooleanField(default=True)),
            ],
            options={
                'db_table': 'shipping_rate_tiers',
                'ordering': ['method', 'zone_id', 'min_weight', 'max_weight'],
            },
        ),
    ]
