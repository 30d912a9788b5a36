from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models
from django.utils import timezone


class WorkOrder(models.Model):
    """Production job for a custom or stock piece (read-only over the API)"""
    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('in_production', 'In Production'),
        ('quality_check', 'Quality Check'),
        ('on_hold', 'On Hold'),
        ('completed', 'Completed'),
        ('cancelled', 'Cancelled'),
    ]

    PRIORITY_CHOICES = [
        ('low', 'Low'),
        ('medium', 'Medium'),
        ('high', 'High'),
        ('urgent', 'Urgent'),
    ]

    STAGE_CHOICES = [
        ('design', 'Design/CAD'),
        ('casting', 'Casting'),
        ('stone_setting', 'Stone Setting'),
        ('polishing', 'Polishing'),
        ('quality_control', 'Quality Control'),
        ('packaging', 'Packaging'),
    ]

    number = models.CharField(max_length=50, unique=True, help_text="e.g. WO-12345")
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending')
    priority = models.CharField(max_length=10, choices=PRIORITY_CHOICES, default='medium')
    current_stage = models.CharField(max_length=30, choices=STAGE_CHOICES, default='design')
    progress = models.PositiveSmallIntegerField(default=0, validators=[MinValueValidator(0), MaxValueValidator(100)])
    sales_order_number = models.CharField(max_length=50, blank=True)
    customer_name = models.CharField(max_length=200)
    customer_email = models.EmailField(blank=True)
    customer_phone = models.CharField(max_length=30, blank=True)
    assigned_to = models.CharField(max_length=200, blank=True)
    item_name = models.CharField(max_length=255)
    item_description = models.TextField(blank=True)
    metal_type = models.CharField(max_length=100, blank=True)
    metal_purity = models.CharField(max_length=20, blank=True)
    metal_finish = models.CharField(max_length=50, blank=True)
    estimated_weight = models.DecimalField(max_digits=8, decimal_places=2, null=True, blank=True)
    actual_weight = models.DecimalField(max_digits=8, decimal_places=2, null=True, blank=True)
    instructions = models.TextField(blank=True)
    due_date = models.DateField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.number} - {self.item_name}"

    @property
    def days_until_due(self):
        if self.due_date is None:
            return None
        return (self.due_date - timezone.localdate()).days

    @property
    def is_overdue(self):
        days = self.days_until_due
        return days is not None and days < 0 and self.status not in ('completed', 'cancelled')

    class Meta:
        db_table = 'work_orders'
        ordering = ['due_date', 'number']
        indexes = [
            models.Index(fields=['status'], name='work_orders_status_idx'),
            models.Index(fields=['due_date'], name='work_orders_due_idx'),
        ]


class WorkOrderStone(models.Model):
    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('received', 'Received'),
        ('set', 'Set'),
    ]

    work_order = models.ForeignKey(WorkOrder, on_delete=models.CASCADE, related_name='stones')
    code = models.CharField(max_length=50)
    stone_type = models.CharField(max_length=50)
    shape = models.CharField(max_length=50, blank=True)
    size = models.CharField(max_length=30, blank=True)
    color = models.CharField(max_length=20, blank=True)
    clarity = models.CharField(max_length=20, blank=True)
    quantity = models.PositiveIntegerField(default=1)
    placement = models.CharField(max_length=100, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending')

    def __str__(self):
        return f"{self.code} {self.stone_type}"

    class Meta:
        db_table = 'work_order_stones'
        ordering = ['code']


class WorkOrderStage(models.Model):
    """Timeline entry for a production stage"""
    work_order = models.ForeignKey(WorkOrder, on_delete=models.CASCADE, related_name='timeline')
    stage = models.CharField(max_length=30, choices=WorkOrder.STAGE_CHOICES)
    started_on = models.DateField()
    completed_on = models.DateField(null=True, blank=True)
    completed_by = models.CharField(max_length=200, blank=True)
    notes = models.TextField(blank=True)
    quality_passed = models.BooleanField(null=True, blank=True)
    quality_checked_by = models.CharField(max_length=200, blank=True)

    @property
    def duration_days(self):
        if self.completed_on is None:
            return None
        return (self.completed_on - self.started_on).days

    class Meta:
        db_table = 'work_order_stages'
        ordering = ['started_on', 'id']
