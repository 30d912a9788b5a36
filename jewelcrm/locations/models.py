from django.db import models


class Location(models.Model):
    """Physical place where stock is kept (store, showroom, display case, shelf, position)"""
    LOCATION_TYPE_CHOICES = [
        ('store', 'Store'),
        ('showroom', 'Showroom'),
        ('case', 'Display Case'),
        ('shelf', 'Shelf'),
        ('position', 'Position'),
        ('safe', 'Safe'),
        ('vault', 'Vault'),
        ('workshop', 'Workshop'),
    ]

    SECURITY_LEVEL_CHOICES = [
        ('low', 'Low'),
        ('medium', 'Medium'),
        ('high', 'High'),
    ]

    code = models.CharField(max_length=50, unique=True, help_text="Stable identifier used when selecting audit locations")
    name = models.CharField(max_length=200)
    location_type = models.CharField(max_length=20, choices=LOCATION_TYPE_CHOICES, default='store')
    parent = models.ForeignKey('self', on_delete=models.PROTECT, null=True, blank=True, related_name='children')
    description = models.TextField(blank=True)
    capacity = models.PositiveIntegerField(null=True, blank=True)
    security_level = models.CharField(max_length=10, choices=SECURITY_LEVEL_CHOICES, default='medium')
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    @property
    def path(self):
        """Names from the root down to this location, e.g. 'Main Store / Front Showroom'"""
        names = []
        node = self
        while node is not None:
            names.append(node.name)
            node = node.parent
        return ' / '.join(reversed(names))

    class Meta:
        db_table = 'locations'
        ordering = ['name']
        indexes = [
            models.Index(fields=['code'], name='locations_code_idx'),
            models.Index(fields=['parent'], name='locations_parent_idx'),
        ]
