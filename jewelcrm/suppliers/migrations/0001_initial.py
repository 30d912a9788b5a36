import django.core.validators
from django.db import migrations, models
import django.db.models.deletion


CATEGORY_CHOICES = [('metal', 'Metal'), ('stone', 'Stone'), ('findings', 'Findings'), ('casting', 'Casting'), ('engraving', 'Engraving'), ('plating', 'Plating'), ('contractors', 'Contractors'), ('shipping', 'Shipping')]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='Supplier',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=200)),
                ('code', models.CharField(blank=True, max_length=50, null=True, unique=True)),
                ('category', models.CharField(choices=CATEGORY_CHOICES, default='metal', max_length=20)),
                ('contact_person', models.CharField(blank=True, max_length=200)),
                ('phone', models.CharField(blank=True, max_length=20)),
                ('email', models.EmailField(blank=True, max_length=254)),
                ('address', models.TextField(blank=True)),
                ('payment_terms', models.CharField(blank=True, help_text='e.g. Net 30', max_length=100)),
                ('notes', models.TextField(blank=True)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'suppliers',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='SupplierOrder',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('order_number', models.CharField(max_length=50, unique=True)),
                ('category', models.CharField(choices=CATEGORY_CHOICES, max_length=20)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=12)),
                ('ordered_on', models.DateField()),
                ('expected_on', models.DateField(blank=True, null=True)),
                ('delivered_on', models.DateField(blank=True, null=True)),
                ('quality_score', models.PositiveSmallIntegerField(blank=True, help_text='Inspection score from 1 (rejected) to 5 (excellent)', null=True, validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(5)])),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('supplier', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='orders', to='suppliers.supplier')),
            ],
            options={
                'db_table': 'supplier_orders',
                'ordering': ['-ordered_on', '-id'],
                'indexes': [models.Index(fields=['ordered_on'], name='supplier_orders_date_idx'), models.Index(fields=['category'], name='supplier_orders_cat_idx')],
            },
        ),
    ]
