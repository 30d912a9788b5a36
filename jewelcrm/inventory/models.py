from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from jewelcrm.locations.models import Location
from jewelcrm.suppliers.models import Supplier


class InventoryItem(models.Model):
    """A stocked jewelry piece (or a batch of identical pieces) at a location"""
    STATUS_CHOICES = [
        ('in_stock', 'In Stock'),
        ('on_memo', 'On Memo'),
        ('reserved', 'Reserved'),
        ('sold', 'Sold'),
        ('archived', 'Archived'),
    ]

    sku = models.CharField(max_length=100, unique=True)
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    category = models.CharField(max_length=100, blank=True)
    metal = models.CharField(max_length=50, blank=True, help_text="e.g. Gold, Platinum, Silver")
    purity = models.CharField(max_length=20, blank=True, help_text="e.g. 18K, 14K, 925")
    primary_stone = models.CharField(max_length=100, blank=True)
    carat_weight = models.DecimalField(max_digits=8, decimal_places=3, null=True, blank=True,
                                       validators=[MinValueValidator(Decimal('0'))])
    weight = models.DecimalField(max_digits=10, decimal_places=3, null=True, blank=True,
                                 validators=[MinValueValidator(Decimal('0'))], help_text="Weight in grams")
    quantity = models.PositiveIntegerField(default=0)
    cost = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'),
                               validators=[MinValueValidator(Decimal('0'))])
    price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'),
                                validators=[MinValueValidator(Decimal('0'))])
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='in_stock')
    vendor = models.ForeignKey(Supplier, on_delete=models.SET_NULL, null=True, blank=True, related_name='inventory_items')
    location = models.ForeignKey(Location, on_delete=models.SET_NULL, null=True, blank=True, related_name='inventory_items')
    image = models.URLField(max_length=500, blank=True)
    tags = models.JSONField(default=list, blank=True)
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.sku} - {self.name}"

    @property
    def total_value(self):
        return self.price * self.quantity

    @property
    def margin(self):
        """Gross margin percentage, None when the item has no price"""
        if not self.price:
            return None
        return round((self.price - self.cost) * 100 / self.price, 2)

    class Meta:
        db_table = 'inventory_items'
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['sku'], name='inventory_sku_idx'),
            models.Index(fields=['category'], name='inventory_category_idx'),
            models.Index(fields=['status'], name='inventory_status_idx'),
            models.Index(fields=['quantity'], name='inventory_quantity_idx'),
        ]


class Product(models.Model):
    """Catalogue listing, optionally tied to the inventory item it was created from"""
    sku = models.CharField(max_length=100, unique=True)
    name = models.CharField(max_length=255)
    category = models.CharField(max_length=100, blank=True)
    description = models.TextField(blank=True)
    unit_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'),
                                     validators=[MinValueValidator(Decimal('0'))])
    unit_cost = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'),
                                    validators=[MinValueValidator(Decimal('0'))])
    inventory_item = models.ForeignKey(InventoryItem, on_delete=models.SET_NULL, null=True, blank=True, related_name='products')
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'products'
        ordering = ['name']
