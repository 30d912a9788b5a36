from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models


def default_error_handling():
    return {'retryCount': 3, 'retryDelay': 5000, 'fallbackAction': ''}


def default_configuration():
    return {
        'triggers': [],
        'actions': [],
        'conditions': [],
        'dataMapping': {},
        'errorHandling': default_error_handling(),
    }


def default_schedule():
    return {'enabled': False, 'cronExpression': '', 'timezone': 'UTC'}


class MarketplaceIntegration(models.Model):
    """Third-party integration listed in the developer marketplace"""
    CATEGORY_CHOICES = [
        ('design_tools', 'Design Tools'),
        ('inventory_management', 'Inventory Management'),
        ('accounting_finance', 'Accounting & Finance'),
        ('ecommerce_sales', 'E-commerce & Sales'),
        ('supplier_management', 'Supplier Management'),
        ('quality_control', 'Quality Control'),
        ('production_management', 'Production Management'),
        ('customer_management', 'Customer Management'),
        ('pricing_calculators', 'Pricing Calculators'),
        ('certification_systems', 'Certification Systems'),
        ('analytics_reporting', 'Analytics & Reporting'),
        ('communication_tools', 'Communication Tools'),
        ('project_management', 'Project Management'),
        ('time_tracking', 'Time Tracking'),
        ('other', 'Other'),
    ]

    PRICING_CHOICES = [
        ('free', 'Free'),
        ('one_time', 'One-time'),
        ('subscription', 'Subscription'),
        ('usage_based', 'Usage based'),
        ('contact', 'Contact for pricing'),
    ]

    name = models.CharField(max_length=200)
    description = models.TextField()
    developer = models.CharField(max_length=200)
    developer_email = models.EmailField()
    category = models.CharField(max_length=30, choices=CATEGORY_CHOICES, default='other')
    pricing_model = models.CharField(max_length=20, choices=PRICING_CHOICES, default='free')
    pricing_amount = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    currency = models.CharField(max_length=3, default='USD')
    billing_cycle = models.CharField(max_length=20, blank=True)
    features = models.JSONField(default=list, blank=True)
    requirements = models.JSONField(default=list, blank=True)
    tags = models.JSONField(default=list, blank=True)
    documentation = models.URLField(blank=True)
    support_email = models.EmailField(blank=True)
    support_url = models.URLField(blank=True)
    version = models.CharField(max_length=20, default='1.0.0')
    is_published = models.BooleanField(default=False)
    is_verified = models.BooleanField(default=False)
    rating = models.DecimalField(max_digits=2, decimal_places=1, default=0,
                                 validators=[MinValueValidator(0), MaxValueValidator(5)])
    review_count = models.PositiveIntegerField(default=0)
    download_count = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    @property
    def pricing_label(self):
        if self.pricing_model == 'free':
            return 'Free'
        if self.pricing_model == 'one_time':
            return f"${self.pricing_amount} (One-time)"
        if self.pricing_model == 'subscription':
            return f"${self.pricing_amount}/{self.billing_cycle}"
        if self.pricing_model == 'usage_based':
            return f"${self.pricing_amount}/request"
        return 'Contact for pricing'

    class Meta:
        db_table = 'marketplace_integrations'
        ordering = ['-rating', 'name']


class CustomIntegration(models.Model):
    """Integration assembled in the visual builder"""
    TEMPLATE_CHOICES = [
        ('webhook_receiver', 'Webhook Receiver'),
        ('data_sync', 'Data Sync'),
        ('file_processor', 'File Processor'),
        ('notification_sender', 'Notification Sender'),
        ('data_transformer', 'Data Transformer'),
        ('custom_endpoint', 'Custom Endpoint'),
        ('scheduled_task', 'Scheduled Task'),
        ('event_trigger', 'Event Trigger'),
    ]

    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    template = models.CharField(max_length=30, choices=TEMPLATE_CHOICES)
    configuration = models.JSONField(default=default_configuration)
    is_active = models.BooleanField(default=False)
    schedule = models.JSONField(default=default_schedule)
    permissions = models.JSONField(default=list, blank=True)
    metadata = models.JSONField(default=dict, blank=True)
    generated_code = models.TextField(blank=True)
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True,
                                   related_name='custom_integrations')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.name} ({self.template})"

    class Meta:
        db_table = 'custom_integrations'
        ordering = ['-created_at']
