import django.core.validators
from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import jewelcrm.integrations.models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='MarketplaceIntegration',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=200)),
                ('description', models.TextField()),
                ('developer', models.CharField(max_length=200)),
                ('developer_email', models.EmailField(max_length=254)),
                ('category', models.CharField(choices=[('design_tools', 'Design Tools'), ('inventory_management', 'Inventory Management'), ('accounting_finance', 'Accounting & Finance'), ('ecommerce_sales', 'E-commerce & Sales'), ('supplier_management', 'Supplier Management'), ('quality_control', 'Quality Control'), ('production_management', 'Production Management'), ('customer_management', 'Customer Management'), ('pricing_calculators', 'Pricing Calculators'), ('certification_systems', 'Certification Systems'), ('analytics_reporting', 'Analytics & Reporting'), ('communication_tools', 'Communication Tools'), ('project_management', 'Project Management'), ('time_tracking', 'Time Tracking'), ('other', 'Other')], default='other', max_length=30)),
                ('pricing_model', models.CharField(choices=[('free', 'Free'), ('one_time', 'One-time'), ('subscription', 'Subscription'), ('usage_based', 'Usage based'), ('contact', 'Contact for pricing')], default='free', max_length=20)),
                ('pricing_amount', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ('currency', models.CharField(default='USD', max_length=3)),
                ('billing_cycle', models.CharField(blank=True, max_length=20)),
                ('features', models.JSONField(blank=True, default=list)),
                ('requirements', models.JSONField(blank=True, default=list)),
                ('tags', models.JSONField(blank=True, default=list)),
                ('documentation', models.URLField(blank=True)),
                ('support_email', models.EmailField(blank=True, max_length=254)),
                ('support_url', models.URLField(blank=True)),
                ('version', models.CharField(default='1.0.0', max_length=20)),
                ('is_published', models.BooleanField(default=False)),
                ('is_verified', models.BooleanField(default=False)),
                ('rating', models.DecimalField(decimal_places=1, default=0, max_digits=2, validators=[django.core.validators.MinValueValidator(0), django.core.validators.MaxValueValidator(5)])),
                ('review_count', models.PositiveIntegerField(default=0)),
                ('download_count', models.PositiveIntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'marketplace_integrations',
                'ordering': ['-rating', 'name'],
            },
        ),
        migrations.CreateModel(
            name='CustomIntegration',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=200)),
                ('description', models.TextField(blank=True)),
                ('template', models.CharField(choices=[('webhook_receiver', 'Webhook Receiver'), ('data_sync', 'Data Sync'), ('file_processor', 'File Processor'), ('notification_sender', 'Notification Sender'), ('data_transformer', 'Data Transformer'), ('custom_endpoint', 'Custom Endpoint'), ('scheduled_task', 'Scheduled Task'), ('event_trigger', 'Event Trigger')], max_length=30)),
                ('configuration', models.JSONField(default=jewelcrm.integrations.models.default_configuration)),
                ('is_active', models.BooleanField(default=False)),
                ('schedule', models.JSONField(default=jewelcrm.integrations.models.default_schedule)),
                ('permissions', models.JSONField(blank=True, default=list)),
                ('metadata', models.JSONField(blank=True, default=dict)),
                ('generated_code', models.TextField(blank=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='custom_integrations', to=settings.AUTH_USER_MODEL)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'custom_integrations',
                'ordering': ['-created_at'],
            },
        ),
    ]
