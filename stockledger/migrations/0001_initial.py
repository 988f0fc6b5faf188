"""
Initial migration for Stockledger models.
"""

from decimal import Decimal
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    """Create Stockledger models: units, catalog, batches, ledger events, sales."""

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Unit',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=50, verbose_name='Name')),
                ('symbol', models.CharField(max_length=20, unique=True, verbose_name='Symbol')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Unit',
                'verbose_name_plural': 'Units',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='UnitConversion',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('factor', models.DecimalField(decimal_places=6, help_text='How many target units make one source unit', max_digits=18, verbose_name='Factor')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('from_unit', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='conversions_from', to='stockledger.unit', verbose_name='From unit')),
                ('to_unit', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='conversions_to', to='stockledger.unit', verbose_name='To unit')),
            ],
            options={
                'verbose_name': 'Unit conversion',
                'verbose_name_plural': 'Unit conversions',
                'constraints': [
                    models.UniqueConstraint(fields=('from_unit', 'to_unit'), name='unique_unit_conversion_pair'),
                    models.CheckConstraint(condition=models.Q(('from_unit', models.F('to_unit')), _negated=True), name='unit_conversion_distinct_units'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Product',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=200, verbose_name='Name')),
                ('sku', models.CharField(max_length=64, unique=True, verbose_name='SKU')),
                ('current_stock', models.DecimalField(decimal_places=3, default=Decimal('0'), max_digits=12, verbose_name='Current stock')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('unit', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='products', to='stockledger.unit', verbose_name='Unit')),
            ],
            options={
                'verbose_name': 'Product',
                'verbose_name_plural': 'Products',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='ProductVariant',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=200, verbose_name='Name')),
                ('sku', models.CharField(max_length=64, unique=True, verbose_name='SKU')),
                ('current_stock', models.DecimalField(decimal_places=3, default=Decimal('0'), max_digits=12, verbose_name='Current stock')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='variants', to='stockledger.product', verbose_name='Product')),
                ('unit', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='variants', to='stockledger.unit', verbose_name='Unit')),
            ],
            options={
                'verbose_name': 'Variant',
                'verbose_name_plural': 'Variants',
                'ordering': ['product', 'name'],
            },
        ),
        migrations.CreateModel(
            name='Supplier',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=200, verbose_name='Name')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'verbose_name': 'Supplier',
                'verbose_name_plural': 'Suppliers',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='ProductBatch',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('batch_code', models.CharField(db_index=True, max_length=64, verbose_name='Batch code')),
                ('expiry_date', models.DateField(db_index=True, verbose_name='Expiry date')),
                ('initial_quantity', models.DecimalField(decimal_places=3, max_digits=12, verbose_name='Initial quantity')),
                ('remaining_quantity', models.DecimalField(decimal_places=3, max_digits=12, verbose_name='Remaining quantity')),
                ('buy_price', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=12, verbose_name='Unit cost')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='batches', to='stockledger.product', verbose_name='Product')),
                ('variant', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='batches', to='stockledger.productvariant', verbose_name='Variant')),
            ],
            options={
                'verbose_name': 'Product batch',
                'verbose_name_plural': 'Product batches',
                'ordering': ['expiry_date', 'created_at'],
                'indexes': [
                    models.Index(fields=['product', 'expiry_date'], name='sl_batch_product_expiry_idx'),
                    models.Index(fields=['variant', 'expiry_date'], name='sl_batch_variant_expiry_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='BatchBarcode',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('code', models.CharField(max_length=64, unique=True, verbose_name='Code')),
                ('is_primary', models.BooleanField(default=False, verbose_name='Primary')),
                ('batch', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='barcodes', to='stockledger.productbatch', verbose_name='Batch')),
            ],
            options={
                'verbose_name': 'Batch barcode',
                'verbose_name_plural': 'Batch barcodes',
            },
        ),
        migrations.CreateModel(
            name='StockIn',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('quantity', models.DecimalField(decimal_places=3, max_digits=12, verbose_name='Quantity')),
                ('base_quantity', models.DecimalField(decimal_places=3, max_digits=12, verbose_name='Quantity (batch unit)')),
                ('date', models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name='Date')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('unit', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='+', to='stockledger.unit', verbose_name='Unit')),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='User')),
                ('batch', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='stock_ins', to='stockledger.productbatch', verbose_name='Batch')),
                ('supplier', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='stock_ins', to='stockledger.supplier', verbose_name='Supplier')),
            ],
            options={
                'verbose_name': 'Stock in',
                'verbose_name_plural': 'Stock ins',
                'ordering': ['-date'],
                'abstract': False,
                'indexes': [
                    models.Index(fields=['batch', 'date'], name='sl_stockin_batch_date_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='StockOut',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('quantity', models.DecimalField(decimal_places=3, max_digits=12, verbose_name='Quantity')),
                ('base_quantity', models.DecimalField(decimal_places=3, max_digits=12, verbose_name='Quantity (batch unit)')),
                ('date', models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name='Date')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('reason', models.CharField(help_text='Required. E.g. "Expired", "Damaged in transit"', max_length=255, verbose_name='Reason')),
                ('unit', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='+', to='stockledger.unit', verbose_name='Unit')),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='User')),
                ('batch', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='stock_outs', to='stockledger.productbatch', verbose_name='Batch')),
            ],
            options={
                'verbose_name': 'Stock out',
                'verbose_name_plural': 'Stock outs',
                'ordering': ['-date'],
                'abstract': False,
                'indexes': [
                    models.Index(fields=['batch', 'date'], name='sl_stockout_batch_date_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Transaction',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('tran_id', models.CharField(blank=True, db_index=True, default='', max_length=64, verbose_name='Transaction number')),
                ('final_amount', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=14, verbose_name='Final amount')),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name='Date')),
            ],
            options={
                'verbose_name': 'Transaction',
                'verbose_name_plural': 'Transactions',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='TransactionItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('quantity', models.DecimalField(decimal_places=3, max_digits=12, verbose_name='Quantity')),
                ('base_quantity', models.DecimalField(decimal_places=3, max_digits=12, verbose_name='Quantity (batch unit)')),
                ('unit_price', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=12, verbose_name='Unit price')),
                ('batch', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='transaction_items', to='stockledger.productbatch', verbose_name='Batch')),
                ('transaction', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='items', to='stockledger.transaction', verbose_name='Transaction')),
                ('unit', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='+', to='stockledger.unit', verbose_name='Unit')),
            ],
            options={
                'verbose_name': 'Transaction item',
                'verbose_name_plural': 'Transaction items',
            },
        ),
    ]
