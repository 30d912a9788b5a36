from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models


SUPPLY_CATEGORY_CHOICES = [
    ('metal', 'Metal'),
    ('stone', 'Stone'),
    ('findings', 'Findings'),
    ('casting', 'Casting'),
    ('engraving', 'Engraving'),
    ('plating', 'Plating'),
    ('contractors', 'Contractors'),
    ('shipping', 'Shipping'),
]


class Supplier(models.Model):
    """Vendors of metal, stones, findings and outsourced services"""
    name = models.CharField(max_length=200)
    code = models.CharField(max_length=50, unique=True, blank=True, null=True)
    category = models.CharField(max_length=20, choices=SUPPLY_CATEGORY_CHOICES, default='metal')
    contact_person = models.CharField(max_length=200, blank=True)
    phone = models.CharField(max_length=20, blank=True)
    email = models.EmailField(blank=True)
    address = models.TextField(blank=True)
    payment_terms = models.CharField(max_length=100, blank=True, help_text="e.g. Net 30")
    notes = models.TextField(blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'suppliers'
        ordering = ['name']


class SupplierOrder(models.Model):
    """Purchase placed with a supplier; drives spend and scorecard analytics"""
    supplier = models.ForeignKey(Supplier, on_delete=models.CASCADE, related_name='orders')
    order_number = models.CharField(max_length=50, unique=True)
    category = models.CharField(max_length=20, choices=SUPPLY_CATEGORY_CHOICES)
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    ordered_on = models.DateField()
    expected_on = models.DateField(null=True, blank=True)
    delivered_on = models.DateField(null=True, blank=True)
    quality_score = models.PositiveSmallIntegerField(
        null=True, blank=True,
        validators=[MinValueValidator(1), MaxValueValidator(5)],
        help_text="Inspection score from 1 (rejected) to 5 (excellent)"
    )
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.order_number

    @property
    def is_delivered(self):
        return self.delivered_on is not None

    @property
    def on_time(self):
        """None until delivered or when no expected date was agreed"""
        if self.delivered_on is None or self.expected_on is None:
            return None
        return self.delivered_on <= self.expected_on

    class Meta:
        db_table = 'supplier_orders'
        ordering = ['-ordered_on', '-id']
        indexes = [
            models.Index(fields=['ordered_on'], name='supplier_orders_date_idx'),
            models.Index(fields=['category'], name='supplier_orders_cat_idx'),
        ]
