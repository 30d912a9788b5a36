import django.core.validators
from django.db import migrations, models
import django.db.models.deletion


STAGE_CHOICES = [('design', 'Design/CAD'), ('casting', 'Casting'), ('stone_setting', 'Stone Setting'), ('polishing', 'Polishing'), ('quality_control', 'Quality Control'), ('packaging', 'Packaging')]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='WorkOrder',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('number', models.CharField(help_text='e.g. WO-12345', max_length=50, unique=True)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('in_production', 'In Production'), ('quality_check', 'Quality Check'), ('on_hold', 'On Hold'), ('completed', 'Completed'), ('cancelled', 'Cancelled')], default='pending', max_length=20)),
                ('priority', models.CharField(choices=[('low', 'Low'), ('medium', 'Medium'), ('high', 'High'), ('urgent', 'Urgent')], default='medium', max_length=10)),
                ('current_stage', models.CharField(choices=STAGE_CHOICES, default='design', max_length=30)),
                ('progress', models.PositiveSmallIntegerField(default=0, validators=[django.core.validators.MinValueValidator(0), django.core.validators.MaxValueValidator(100)])),
                ('sales_order_number', models.CharField(blank=True, max_length=50)),
                ('customer_name', models.CharField(max_length=200)),
                ('customer_email', models.EmailField(blank=True, max_length=254)),
                ('customer_phone', models.CharField(blank=True, max_length=30)),
                ('assigned_to', models.CharField(blank=True, max_length=200)),
                ('item_name', models.CharField(max_length=255)),
                ('item_description', models.TextField(blank=True)),
                ('metal_type', models.CharField(blank=True, max_length=100)),
                ('metal_purity', models.CharField(blank=True, max_length=20)),
                ('metal_finish', models.CharField(blank=True, max_length=50)),
                ('estimated_weight', models.DecimalField(blank=True, decimal_places=2, max_digits=8, null=True)),
                ('actual_weight', models.DecimalField(blank=True, decimal_places=2, max_digits=8, null=True)),
                ('instructions', models.TextField(blank=True)),
                ('due_date', models.DateField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'work_orders',
                'ordering': ['due_date', 'number'],
                'indexes': [models.Index(fields=['status'], name='work_orders_status_idx'), models.Index(fields=['due_date'], name='work_orders_due_idx')],
            },
        ),
        migrations.CreateModel(
            name='WorkOrderStone',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('code', models.CharField(max_length=50)),
                ('stone_type', models.CharField(max_length=50)),
                ('shape', models.CharField(blank=True, max_length=50)),
                ('size', models.CharField(blank=True, max_length=30)),
                ('color', models.CharField(blank=True, max_length=20)),
                ('clarity', models.CharField(blank=True, max_length=20)),
                ('quantity', models.PositiveIntegerField(default=1)),
                ('placement', models.CharField(blank=True, max_length=100)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('received', 'Received'), ('set', 'Set')], default='pending', max_length=20)),
                ('work_order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='stones', to='production.workorder')),
            ],
            options={
                'db_table': 'work_order_stones',
                'ordering': ['code'],
            },
        ),
        migrations.CreateModel(
            name='WorkOrderStage',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('stage', models.CharField(choices=STAGE_CHOICES, max_length=30)),
                ('started_on', models.DateField()),
                ('completed_on', models.DateField(blank=True, null=True)),
                ('completed_by', models.CharField(blank=True, max_length=200)),
                ('notes', models.TextField(blank=True)),
                ('quality_passed', models.BooleanField(blank=True, null=True)),
                ('quality_checked_by', models.CharField(blank=True, max_length=200)),
                ('work_order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='timeline', to='production.workorder')),
            ],
            options={
                'db_table': 'work_order_stages',
                'ordering': ['started_on', 'id'],
            },
        ),
    ]
